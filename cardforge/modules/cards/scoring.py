"""Rubric-based quality scoring of cards via a second model call."""

from __future__ import annotations

import math
from typing import Any, Optional, Sequence

from cardforge.modules.cards.errors import CardValidationError
from cardforge.modules.cards.models import Card, Message, NoteType, ScoreResult, grade_for
from cardforge.modules.cards.models.scoring import REWRITE_THRESHOLD
from cardforge.modules.cards.parser import (
    coerce_note_type,
    is_number,
    load_json_object,
    string_list,
)

DEFAULT_SCORE = 5
MAX_FEEDBACK = 4

SCORING_SYSTEM_PROMPT = """You are an expert spaced-repetition flashcard reviewer. Score each flashcard on a 1-10 scale based on these criteria:

## Scoring Criteria

1. **Atomicity (0-2 pts)**: Does the card test exactly ONE idea? Deduct if it combines multiple concepts.
2. **Clarity (0-2 pts)**: Is the question/cloze unambiguous? Could a knowledgeable person answer confidently without guessing what's being asked?
3. **Testability (0-2 pts)**: Can you clearly judge whether you know the answer? Avoid vague prompts like "Explain X"; prefer "What is X?" or precise cloze deletions.
4. **Cloze Quality (0-1 pt)**: For Cloze cards only: are deletions meaningful terms (not filler words), short, and independently answerable? For Basic cards, award 1 pt if Q/A format is well-structured.
5. **Difficulty Calibration (0-1 pt)**: Is it neither trivially obvious nor impossibly hard without the card?
6. **Standalone Context (0-2 pts)**: Does the card make sense without external context? Deduct for orphan references like "this algorithm" without naming it.

## Grading
- 9-10: Excellent (textbook-quality card)
- 7-8: Good (minor improvements possible)
- 5-6: Needs Work (has clear issues that hurt recall)
- 1-4: Poor (should be rewritten)

## Output Format
Respond with ONLY valid JSON:
{
  "scores": [
    {
      "score": 8,
      "grade": "Good",
      "feedback": ["Clear atomic question", "Back could be more concise"],
      "improvedCard": null
    }
  ]
}

- If score < 7, include an "improvedCard" object with the suggested rewrite (same fields as input: front, back, text, extra, tags, noteType).
- If score >= 7, set "improvedCard" to null.
- Provide 2-4 specific, actionable feedback items per card.
- feedback should include both strengths and weaknesses."""


def _describe(card: Card, index: int, note_type: Optional[NoteType]) -> str:
    kind = card.note_type or note_type or "BASIC"
    if kind == "CLOZE":
        fields = f"Text: {card.text or '(empty)'}\nExtra: {card.extra or '(none)'}"
    else:
        fields = (
            f"Front: {card.front or '(empty)'}\n"
            f"Back: {card.back or '(empty)'}\n"
            f"Extra: {card.extra or '(none)'}"
        )
    tags = ", ".join(card.tags) or "(none)"
    return f"### Card {index + 1} ({kind})\n{fields}\nTags: {tags}"


def build_scoring_user_prompt(cards: Sequence[Card], note_type: Optional[NoteType] = None) -> str:
    described = "\n\n".join(_describe(c, i, note_type) for i, c in enumerate(cards))
    return f"Score the following {len(cards)} flashcard(s):\n\n{described}"


def build_scoring_messages(
    cards: Sequence[Card], note_type: Optional[NoteType] = None
) -> list[Message]:
    return [
        Message(role="system", content=SCORING_SYSTEM_PROMPT),
        Message(role="user", content=build_scoring_user_prompt(cards, note_type)),
    ]


def clamp_score(value: Any) -> int:
    """Round half-up into [1, 10]; anything non-numeric scores 5."""
    if not is_number(value):
        return DEFAULT_SCORE
    if isinstance(value, float):
        value = math.floor(value + 0.5)
    return min(10, max(1, value))


def _improved_card(value: Any) -> Optional[Card]:
    if not isinstance(value, dict):
        return None
    data = {
        name: value[name]
        for name in ("front", "back", "text", "extra")
        if isinstance(value.get(name), str)
    }
    return Card(
        **data,
        tags=string_list(value.get("tags")),
        note_type=coerce_note_type(value.get("noteType")),
    )


def coerce_score(entry: Any, index: int) -> ScoreResult:
    if not isinstance(entry, dict):
        entry = {}
    score = clamp_score(entry.get("score"))
    feedback = [f for f in string_list(entry.get("feedback")) if f.strip()][:MAX_FEEDBACK]
    if not feedback:
        feedback = [f"Card {index + 1}: no feedback provided"]
    improved = _improved_card(entry.get("improvedCard")) if score < REWRITE_THRESHOLD else None
    return ScoreResult(
        score=score, grade=grade_for(score), feedback=feedback, improved_card=improved
    )


def parse_scores(raw: str) -> list[ScoreResult]:
    parsed = load_json_object(raw)
    if not isinstance(parsed, dict) or not isinstance(parsed.get("scores"), list):
        raise CardValidationError('Scoring response missing "scores" array')
    return [coerce_score(entry, i) for i, entry in enumerate(parsed["scores"])]
