"""Generation pipeline: classify -> compose -> call provider -> parse.

Functions here take the provider and settings explicitly and hold no state,
so any number of calls can run concurrently. Retrying is left to callers.
"""

from __future__ import annotations

import json
import re
from typing import Optional, Sequence

from cardforge.core.config import GenerationSettings
from cardforge.core.logging import get_logger, with_context
from cardforge.modules.cards.autofill import build_autofill_messages, parse_autofill_response
from cardforge.modules.cards.classifier import ContentCategory, classify
from cardforge.modules.cards.errors import CardForgeError, EmptyContentError, ParseError
from cardforge.modules.cards.models import (
    AutoFillResult,
    Card,
    ExternalSchema,
    GenerationResult,
    Message,
    NoteType,
    ScoreResult,
    check_conversation,
    merge_tags,
)
from cardforge.modules.cards.parser import parse_generation
from cardforge.modules.cards.prompt import Action, ConvertMode, build_messages
from cardforge.modules.cards.providers import Provider
from cardforge.modules.cards.scoring import build_scoring_messages, parse_scores
from cardforge.modules.cards.templates import TEMPLATE_IDS, CardTemplate

logger = get_logger(__name__)

TAG_ARRAY_RE = re.compile(r"\[.*\]", re.DOTALL)
TEMPLATE_SAMPLE_LENGTH = 500

TAGS_SYSTEM_PROMPT = (
    "You are a flashcard organization expert. Given flashcard content, suggest "
    "3-8 relevant tags for categorization and retrieval. Respond with ONLY a JSON "
    'array of lowercase tag strings, e.g. ["tag1", "tag2"]. Use hyphens for '
    "multi-word tags. Be specific and useful."
)

TEMPLATE_SYSTEM_PROMPT = (
    "You classify flashcard content into template categories. Respond with ONLY "
    f"one of these IDs: {', '.join(TEMPLATE_IDS)}, NONE. No explanation, just the ID."
)

CONVERT_POLICIES = {"basic": "basic_only", "cloze": "cloze_only"}


async def complete(
    provider: Provider, messages: Sequence[Message], settings: GenerationSettings
) -> str:
    check_conversation(messages)
    return await provider.generate(messages, settings)


async def run_generation(
    provider: Provider,
    settings: GenerationSettings,
    action: Action,
    content: str,
    *,
    category: Optional[ContentCategory] = None,
    template: Optional[CardTemplate] = None,
    count: Optional[int] = None,
    convert_mode: Optional[ConvertMode] = None,
) -> tuple[GenerationResult, ContentCategory]:
    """Run one generation request end to end.

    ``category`` defaults to the classifier's verdict on ``content``. A
    convert to basic or cloze forces the matching ``*_only`` policy.
    """
    if not content.strip():
        raise EmptyContentError("Enter draft notes or field content first")

    if category is None:
        category = classify(content)
    if action == "convert" and convert_mode in CONVERT_POLICIES:
        settings = settings.with_policy(CONVERT_POLICIES[convert_mode])

    log = with_context(logger, provider=provider.name, action=action)
    log.info("Generating with %s (category=%s)", settings.resolved_model, category.value)

    messages = build_messages(
        action,
        content,
        settings,
        category=category,
        template=template,
        count=count,
        convert_mode=convert_mode,
    )
    raw = await complete(provider, messages, settings)
    log.debug("Received %d characters", len(raw))
    result = parse_generation(raw)
    if result.needs_review:
        log.info("Model flagged the batch for review")
    return result, category


async def score_cards(
    provider: Provider,
    settings: GenerationSettings,
    cards: Sequence[Card],
    note_type: Optional[NoteType] = None,
) -> list[ScoreResult]:
    if not cards:
        raise EmptyContentError("No cards to score")
    raw = await complete(provider, build_scoring_messages(cards, note_type), settings)
    scores = parse_scores(raw)
    with_context(logger, provider=provider.name, action="score").info(
        "Scored %d card(s): %s", len(scores), [s.score for s in scores]
    )
    return scores


async def suggest_tags(
    provider: Provider, settings: GenerationSettings, content: str
) -> list[str]:
    if not content.strip():
        raise EmptyContentError("Fill in card fields first")
    messages = [
        Message(role="system", content=TAGS_SYSTEM_PROMPT),
        Message(role="user", content=f"Suggest tags for this flashcard:\n\n{content}"),
    ]
    raw = await complete(provider, messages, settings)
    match = TAG_ARRAY_RE.search(raw)
    if not match:
        raise ParseError("Could not parse tag suggestions", raw)
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise ParseError("Could not parse tag suggestions", raw) from e
    if not isinstance(parsed, list):
        raise ParseError("Could not parse tag suggestions", raw)
    return merge_tags(t.lower() for t in parsed if isinstance(t, str))


async def detect_template(
    provider: Provider, settings: GenerationSettings, text: str
) -> Optional[str]:
    """Best-effort template id for ``text``; ``None`` when unsure or on failure."""
    if not text.strip():
        return None
    messages = [
        Message(role="system", content=TEMPLATE_SYSTEM_PROMPT),
        Message(
            role="user",
            content=f"Classify this content:\n\n{text[:TEMPLATE_SAMPLE_LENGTH]}",
        ),
    ]
    try:
        raw = await complete(provider, messages, settings)
    except CardForgeError as e:
        logger.warning("Template detection failed: %s", e)
        return None
    candidate = raw.strip().strip('"').upper()
    return candidate if candidate in TEMPLATE_IDS else None


async def auto_fill(
    provider: Provider,
    settings: GenerationSettings,
    clipboard_text: str,
    *,
    deck_names: Sequence[str],
    schemas: Sequence[ExternalSchema],
    existing_tags: Sequence[str] = (),
    last_deck: Optional[str] = None,
    last_model: Optional[str] = None,
) -> AutoFillResult:
    if not clipboard_text.strip():
        raise EmptyContentError("Clipboard is empty")
    messages = build_autofill_messages(
        clipboard_text,
        deck_names,
        schemas,
        existing_tags,
        settings,
        last_deck=last_deck,
        last_model=last_model,
    )
    return parse_autofill_response(await complete(provider, messages, settings))
