"""System and user prompt assembly for card generation.

Composition is plain string building: the system prompt describes the two
note shapes, the note-type policy, optional category and template guidance,
the deletion limit, the JSON shape to emit, and guardrails. The user prompt
wraps the caller's content according to the requested action.
"""

from __future__ import annotations

from typing import Literal, Optional

from cardforge.core.config import GenerationSettings, NoteTypePolicy
from cardforge.modules.cards.classifier import ContentCategory, prompt_enhancement
from cardforge.modules.cards.models import Message
from cardforge.modules.cards.templates import CardTemplate

Action = Literal["autocomplete", "improve", "generate", "convert"]
ConvertMode = Literal["auto", "basic", "cloze"]

ACTIONS: tuple[str, ...] = ("autocomplete", "improve", "generate", "convert")
DEFAULT_CARD_COUNT = 5

POLICY_INSTRUCTIONS: dict[str, str] = {
    "auto": """Choose the best note type (Basic or Cloze) based on the content. Set "noteType" on each card.

### When to choose CLOZE
- Crisp definitions with 1-2 key terms to hide
- Factual statements where hiding a specific term tests recall
- Step-by-step processes with key terms
- Short lists where each item is independently memorable

### When to choose BASIC
- Q&A format where the question requires a multi-part answer
- Tradeoff comparisons or decision/judgment prompts
- Pattern recognition (e.g., LeetCode problems)
- When Cloze deletions would be awkward, ambiguous, or hide too much context
- When the answer requires explanation, not just a term

Explain your note type choice briefly in "notes".""",
    "prefer_basic": (
        "Prefer Basic note type unless Cloze is clearly better for recall. "
        'Set "noteType" on each card.'
    ),
    "prefer_cloze": (
        "Prefer Cloze note type unless Basic is clearly better. "
        'Set "noteType" on each card.'
    ),
    "basic_only": "Only produce Basic note type cards. Never use Cloze.",
    "cloze_only": "Only produce Cloze note type cards. Never use Basic.",
}

OUTPUT_TEMPLATE = """{
  "selectedNoteType": "BASIC|CLOZE",
  "cards": [
    {
      "front": "...",
      "back": "...",
      "text": "...",
      "extra": "...",
      "code": "...",
      "timestamp": "...",
      "tags": ["..."],
      "noteType": "BASIC|CLOZE",
      "modelName": "..."
    }
  ],
  "notes": "brief explanation of choices"
}"""

GUARDRAILS = """## Guardrails
- Never invent facts. If uncertain, mark notes with "NEEDS_REVIEW".
- Prefer atomic cards over comprehensive cards.
- Do NOT force-fill optional fields. Most cards only need Front+Back or Text.
- If missing context, add a clarifying question in "notes" and keep the card conservative."""


def policy_instruction(policy: NoteTypePolicy) -> str:
    return POLICY_INSTRUCTIONS[policy]


def _note_types_block(settings: GenerationSettings) -> str:
    return f"""## Note Types Available

### Basic (model: "{settings.basic_model_name}")
Fields:
- **Front** (required): The question or prompt
- **Back** (required): The answer
- **Extra** (optional): Helper content: pitfalls, rules of thumb, edge cases, mnemonics, tiny examples, interview recognition tips
- **Code** (optional): Code/pseudocode, commands, schemas, queries. Only include when it truly helps. Keep short.
- **Timestamp/Source** (optional): Source pointer (e.g., "CS50 W2 12:34", "LeetCode #42"). Leave blank if unknown.

Most Basic cards only need Front + Back. Use Extra/Code/Timestamp only when they add real value.

### Cloze (model: "{settings.cloze_model_name}")
Fields:
- **Text** (required): The statement with cloze deletions using {{{{c1::...}}}} syntax
- **Extra** (optional): Same as Basic Extra: pitfalls, extra context, mini examples
- **Timestamp** (optional): Same as Basic Timestamp/Source

Most Cloze notes only need Text."""


def _template_block(template: CardTemplate) -> str:
    lines = [f"## Template: {template.name}", f"Preferred note type: {template.preferred_model}"]
    for field_name, hint in template.fields.items():
        label = f" ({hint.label})" if hint.label else ""
        lines.append(f"- **{field_name}**{label}: {hint.help_text}")
    if template.tags:
        lines.append(f"Suggested tags: {', '.join(template.tags)}")
    return "\n".join(lines)


def _output_block(settings: GenerationSettings) -> str:
    return (
        "## Output Format\n"
        "Respond with ONLY valid JSON matching this schema (no prose outside JSON):\n"
        f"{OUTPUT_TEMPLATE}\n\n"
        '- For Basic cards: populate "front" and "back". Optionally "extra", "code", '
        '"timestamp". Leave "text" empty or omit.\n'
        '- For Cloze cards: populate "text" (with cloze syntax). Optionally "extra", '
        '"timestamp". Leave "front"/"back"/"code" empty or omit.\n'
        f'- Set modelName to "{settings.basic_model_name}" for Basic or '
        f'"{settings.cloze_model_name}" for Cloze.'
    )


def build_system_prompt(
    settings: GenerationSettings,
    category: Optional[ContentCategory] = None,
    template: Optional[CardTemplate] = None,
) -> str:
    sections = [
        "You are an expert Anki flashcard creator. Your job is to produce "
        "high-quality, atomic flashcards optimized for spaced repetition.",
        _note_types_block(settings),
        "## Note Type Rules\n" + policy_instruction(settings.note_type_policy),
    ]
    if category is not None:
        sections.append(prompt_enhancement(category))
    if template is not None:
        sections.append(_template_block(template))
    sections.append(
        "## Cloze Rules\n"
        "- Use standard Anki cloze syntax: {{c1::...}}, {{c2::...}}\n"
        f"- Maximum {settings.max_clozes_per_card} cloze deletions per card\n"
        "- Keep deletions short and meaningful (terms/phrases, not huge clauses)"
    )
    sections.append(_output_block(settings))
    sections.append(GUARDRAILS)
    return "\n\n".join(sections)


def build_user_prompt(
    action: Action,
    content: str,
    *,
    count: Optional[int] = None,
    convert_mode: Optional[ConvertMode] = None,
) -> str:
    if action == "autocomplete":
        return f"Create a single flashcard from these notes:\n\n{content}"
    if action == "improve":
        return (
            "Improve and atomicize this flashcard. If it should be split into "
            f"multiple atomic cards, do so:\n\n{content}"
        )
    if action == "generate":
        n = count if count and count > 0 else DEFAULT_CARD_COUNT
        return f"Generate {n} atomic flashcards from these notes:\n\n{content}"
    if action == "convert":
        if convert_mode == "cloze":
            target = "Cloze"
        elif convert_mode == "basic":
            target = "Basic"
        else:
            target = "the best note type (Basic or Cloze)"
        return f"Convert this flashcard to {target}:\n\n{content}"
    raise ValueError(f"Unknown action: {action!r}")


def build_messages(
    action: Action,
    content: str,
    settings: GenerationSettings,
    *,
    category: Optional[ContentCategory] = None,
    template: Optional[CardTemplate] = None,
    count: Optional[int] = None,
    convert_mode: Optional[ConvertMode] = None,
) -> list[Message]:
    return [
        Message(role="system", content=build_system_prompt(settings, category, template)),
        Message(
            role="user",
            content=build_user_prompt(
                action, content, count=count, convert_mode=convert_mode
            ),
        ),
    ]
