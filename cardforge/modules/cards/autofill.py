"""One-shot clipboard auto-fill: pick deck, note type, fields and tags."""

from __future__ import annotations

from typing import Optional, Sequence

from cardforge.core.config import GenerationSettings
from cardforge.modules.cards.errors import CardValidationError
from cardforge.modules.cards.models import AutoFillResult, ExternalSchema, Message, merge_tags
from cardforge.modules.cards.parser import is_number, load_json_object, string_list

MAX_TAG_SAMPLE = 150


def build_autofill_messages(
    clipboard_text: str,
    deck_names: Sequence[str],
    schemas: Sequence[ExternalSchema],
    existing_tags: Sequence[str],
    settings: GenerationSettings,
    *,
    last_deck: Optional[str] = None,
    last_model: Optional[str] = None,
) -> list[Message]:
    schema_lines = "\n".join(f"- {s.name}: {', '.join(s.fields)}" for s in schemas)
    deck_line = ", ".join(deck_names)
    tag_sample = ", ".join(existing_tags[:MAX_TAG_SAMPLE])
    recent_deck = f"Last used deck: {last_deck}" if last_deck else "No recent deck."
    recent_model = (
        f"Last used note type: {last_model}" if last_model else "No recent note type."
    )

    system = f"""You are an expert Anki flashcard assistant. Given clipboard content, determine the best deck, note type, card fields, and tags.

## Available Decks
{deck_line}

## Available Note Types and Their Fields
{schema_lines}

## Basic Note Type: "{settings.basic_model_name}"
Fields: Front (question), Back (answer), Extra (optional helper), Code (optional snippets), Timestamp/Source (optional source reference)

## Cloze Note Type: "{settings.cloze_model_name}"
Fields: Text (with {{{{c1::...}}}} deletions), Extra (optional), Timestamp (optional)

## Existing Tags (reuse these whenever possible)
{tag_sample}

## Tag Rules
- STRONGLY prefer existing tags over creating new ones.
- Use the hierarchical format matching existing patterns (e.g., A::B::Topic::SubTopic).
- Only create a new tag if no existing tag reasonably fits the content.
- Suggest 1-3 tags maximum.

## Context
{recent_deck}
{recent_model}

## Instructions
Analyze the clipboard content and return JSON:
{{
  "deck": "best matching deck name from the list above",
  "noteType": "BASIC or CLOZE",
  "fields": {{ "Front": "...", "Back": "...", "Extra": "...", "Code": "...", "Timestamp": "..." }},
  "tags": ["tag1", "tag2"],
  "confidence": 0.0-1.0
}}

- For BASIC: populate "Front" and "Back" at minimum. "Extra", "Code", "Timestamp" only if genuinely useful.
- For CLOZE: populate "Text" with cloze syntax. "Extra" and "Timestamp" only if useful.
- If the clipboard content is not suitable for a flashcard, set confidence to 0 and fill fields with the raw content in Front/Text.
- Pick the deck that best matches the content topic. If unsure, use the last used deck.
- Do NOT invent facts. Use only what's in the clipboard."""

    return [
        Message(role="system", content=system),
        Message(
            role="user",
            content=f"Create a flashcard from this clipboard content:\n\n{clipboard_text}",
        ),
    ]


def parse_autofill_response(raw: str) -> AutoFillResult:
    parsed = load_json_object(raw)
    if not isinstance(parsed, dict):
        raise CardValidationError("Auto-fill response is not a JSON object")

    fields: dict[str, str] = {}
    if isinstance(parsed.get("fields"), dict):
        fields = {
            k: v for k, v in parsed["fields"].items() if isinstance(v, str) and v.strip()
        }

    confidence = parsed.get("confidence")
    deck = parsed.get("deck")
    return AutoFillResult(
        deck=deck if isinstance(deck, str) and deck.strip() else None,
        note_type="CLOZE" if parsed.get("noteType") == "CLOZE" else "BASIC",
        fields=fields,
        tags=merge_tags(string_list(parsed.get("tags"))),
        confidence=float(min(1.0, max(0.0, confidence))) if is_number(confidence) else 0.5,
    )
