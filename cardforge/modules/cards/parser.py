"""Turn raw model text into a validated :class:`GenerationResult`.

Model output is untrusted. Structure is checked strictly (a JSON object with
a non-empty ``cards`` list of objects) while individual fields are checked
leniently: a field of the wrong type is dropped, never fatal.
"""

from __future__ import annotations

import json
import math
import re
from typing import Any

from cardforge.modules.cards.errors import CardValidationError, ParseError
from cardforge.modules.cards.models import NOTE_TYPES, Card, GenerationResult

FENCE_RE = re.compile(r"```(?:[\w-]+)?\s*\n?(.*?)\n?```", re.DOTALL)

CARD_TEXT_FIELDS = ("front", "back", "text", "extra", "code", "timestamp")
CARD_HINT_FIELDS = {"modelName": "model_name", "deckName": "deck_name"}


def extract_json(raw: str) -> str:
    """Pull a JSON object out of model text.

    Tried in order: the whole text when it already starts with ``{``, the
    interior of a fenced block, then the span from the first ``{`` to the
    last ``}``.
    """
    trimmed = raw.strip()
    if trimmed.startswith("{"):
        return trimmed

    fence = FENCE_RE.search(trimmed)
    if fence:
        return fence.group(1).strip()

    start = trimmed.find("{")
    end = trimmed.rfind("}")
    if start != -1 and end > start:
        return trimmed[start : end + 1]

    raise ParseError("No JSON object found in AI response", raw)


def load_json_object(raw: str) -> Any:
    """``extract_json`` followed by decoding; decode errors become ParseError."""
    if not raw.strip():
        raise ParseError("AI response was empty")
    candidate = extract_json(raw)
    try:
        return json.loads(candidate)
    except json.JSONDecodeError as e:
        raise ParseError(f"AI response is not valid JSON ({e.msg})", raw) from e


def is_number(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and math.isfinite(value)


def as_float(value: Any) -> float | None:
    """Numeric value as a float, or None when absent or beyond float range."""
    if not is_number(value):
        return None
    try:
        return float(value)
    except OverflowError:
        return None


def string_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, str)]


def coerce_note_type(value: Any, default: str | None = None) -> str | None:
    return value if value in NOTE_TYPES else default


def coerce_card(entry: Any, index: int) -> Card:
    if not isinstance(entry, dict):
        raise CardValidationError(f"Card at index {index} is not an object", index=index)

    data: dict[str, Any] = {}
    for name in CARD_TEXT_FIELDS:
        if isinstance(entry.get(name), str):
            data[name] = entry[name]
    for key, name in CARD_HINT_FIELDS.items():
        if isinstance(entry.get(key), str):
            data[name] = entry[key]
    data["tags"] = string_list(entry.get("tags"))
    data["note_type"] = coerce_note_type(entry.get("noteType"))
    return Card(**data)


def parse_generation(raw: str) -> GenerationResult:
    parsed = load_json_object(raw)
    if not isinstance(parsed, dict):
        raise CardValidationError("AI response is not a JSON object")

    cards = parsed.get("cards")
    if not isinstance(cards, list) or not cards:
        raise CardValidationError("AI response contains no cards")

    notes = parsed.get("notes")
    deck = parsed.get("deck")
    score = as_float(parsed.get("score"))
    feedback = parsed.get("scoreFeedback")

    return GenerationResult(
        selected_note_type=coerce_note_type(parsed.get("selectedNoteType"), "BASIC"),
        cards=[coerce_card(c, i) for i, c in enumerate(cards)],
        notes=notes if isinstance(notes, str) else "",
        deck=deck if isinstance(deck, str) and deck.strip() else None,
        score=score,
        score_feedback=string_list(feedback) if isinstance(feedback, list) else None,
    )
