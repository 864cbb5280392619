"""Flashcard-store collaborator and the map-then-write batch helper.

The store itself (an AnkiConnect-style RPC client with its own retry policy)
lives outside this package; anything implementing :class:`FlashcardStore`
can be passed in.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Protocol, Sequence

from cardforge.core.config import GenerationSettings
from cardforge.core.logging import get_logger
from cardforge.modules.cards.field_mapper import map_card
from cardforge.modules.cards.models import (
    Deck,
    DeckSuggestion,
    ExternalSchema,
    GenerationResult,
    MappedFields,
    MappingResult,
    merge_tags,
)

logger = get_logger(__name__)


class FlashcardStore(Protocol):
    async def list_schemas(self) -> list[ExternalSchema]: ...

    async def list_decks(self) -> list[Deck]: ...

    async def list_tags(self) -> list[str]: ...

    async def add_card(
        self, schema_name: str, fields: dict[str, str], deck_name: str, tags: list[str]
    ) -> int: ...


@dataclass
class CardOutcome:
    index: int
    mapping: MappingResult
    tags: list[str]
    deck_name: str
    note_id: Optional[int] = None

    @property
    def written(self) -> bool:
        return self.note_id is not None


def map_result(
    result: GenerationResult,
    schemas: Sequence[ExternalSchema],
    settings: GenerationSettings,
) -> list[MappingResult]:
    """One mapping per card, in card order."""
    return [map_card(card, result.selected_note_type, schemas, settings) for card in result.cards]


async def add_generated_cards(
    store: FlashcardStore,
    result: GenerationResult,
    settings: GenerationSettings,
    deck_name: str,
    tags: Iterable[str] = (),
) -> list[CardOutcome]:
    """Map every card first, then write the ones that mapped.

    A card whose mapping fails is reported and skipped; its siblings are
    still written. Nothing is written when ``settings.dry_run`` is set.
    """
    caller_tags = list(tags)
    schemas = await store.list_schemas()
    outcomes = [
        CardOutcome(
            index=i,
            mapping=mapping,
            tags=merge_tags(caller_tags, card.tags),
            deck_name=card.deck_name or deck_name,
        )
        for i, (card, mapping) in enumerate(zip(result.cards, map_result(result, schemas, settings)))
    ]

    if settings.dry_run:
        logger.info("Dry run: %d card(s) mapped, nothing written", len(outcomes))
        return outcomes

    for outcome in outcomes:
        if not isinstance(outcome.mapping, MappedFields):
            continue
        outcome.note_id = await store.add_card(
            outcome.mapping.model_name,
            outcome.mapping.fields,
            outcome.deck_name,
            outcome.tags,
        )
    written = sum(1 for o in outcomes if o.written)
    logger.info("Wrote %d of %d card(s) to deck %s", written, len(outcomes), deck_name)
    return outcomes


def resolve_deck_suggestion(
    result: GenerationResult, known_decks: Iterable[str]
) -> Optional[DeckSuggestion]:
    """Match the model's deck suggestion against the store's decks.

    Known decks come back with the store's spelling; unknown ones are kept as
    new-deck suggestions for the caller to confirm.
    """
    if not result.deck:
        return None
    wanted = result.deck.strip()
    for name in known_decks:
        if name.strip().lower() == wanted.lower():
            return DeckSuggestion(name=name, exists=True)
    return DeckSuggestion(name=wanted, exists=False)
