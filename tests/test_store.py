import asyncio

from cardforge.modules.cards.models import (
    Card,
    Deck,
    DeckSuggestion,
    GenerationResult,
    MappedFields,
    MappingError,
)
from cardforge.modules.cards.store import add_generated_cards, map_result, resolve_deck_suggestion


class MemoryStore:
    def __init__(self, schemas, decks=("Default",)):
        self.schemas = list(schemas)
        self.decks = [Deck(id=i + 1, name=n) for i, n in enumerate(decks)]
        self.notes = []

    async def list_schemas(self):
        return self.schemas

    async def list_decks(self):
        return self.decks

    async def list_tags(self):
        return sorted({t for note in self.notes for t in note["tags"]})

    async def add_card(self, schema_name, fields, deck_name, tags):
        self.notes.append({"model": schema_name, "fields": fields, "deck": deck_name, "tags": tags})
        return 1000 + len(self.notes)


def mixed_batch():
    return GenerationResult(
        selected_note_type="BASIC",
        cards=[
            Card(front="Q1", back="A1", tags=["redis"]),
            Card(text="{{c1::x}}", note_type="CLOZE"),
            Card(front="Q3", back="A3", deck_name="Databases"),
        ],
    )


def test_failed_mapping_does_not_block_siblings(settings, basic_schema):
    impostor = basic_schema.model_copy(update={"name": "Cloze"})
    store = MemoryStore([basic_schema, impostor])

    outcomes = asyncio.run(add_generated_cards(store, mixed_batch(), settings, "Default", tags=["ai"]))

    assert [o.written for o in outcomes] == [True, False, True]
    assert isinstance(outcomes[1].mapping, MappingError)
    assert outcomes[1].note_id is None
    assert [n["fields"]["Front"] for n in store.notes] == ["Q1", "Q3"]


def test_tags_and_deck_hints(settings, schemas):
    store = MemoryStore(schemas)

    outcomes = asyncio.run(add_generated_cards(store, mixed_batch(), settings, "Default", tags=["ai", "redis"]))

    assert outcomes[0].tags == ["ai", "redis"]
    assert outcomes[2].deck_name == "Databases"
    assert [n["deck"] for n in store.notes] == ["Default", "Default", "Databases"]
    assert outcomes[1].note_id == 1002


def test_dry_run_maps_but_never_writes(settings, schemas):
    store = MemoryStore(schemas)
    dry = settings.model_copy(update={"dry_run": True})

    outcomes = asyncio.run(add_generated_cards(store, mixed_batch(), dry, "Default"))

    assert store.notes == []
    assert all(isinstance(o.mapping, MappedFields) for o in outcomes)
    assert not any(o.written for o in outcomes)


def test_map_result_keeps_card_order(settings, schemas):
    mappings = map_result(mixed_batch(), schemas, settings)

    assert [m.model_name for m in mappings] == ["Basic", "Cloze", "Basic"]


def test_deck_suggestion_matches_known_deck_case_insensitively():
    result = GenerationResult(cards=[Card(front="Q")], deck="system design ")

    suggestion = resolve_deck_suggestion(result, ["Default", "System Design"])

    assert suggestion == DeckSuggestion(name="System Design", exists=True)


def test_unknown_deck_is_surfaced_as_new():
    result = GenerationResult(cards=[Card(front="Q")], deck="Kafka")

    assert resolve_deck_suggestion(result, ["Default"]) == DeckSuggestion(name="Kafka", exists=False)


def test_no_deck_suggestion():
    assert resolve_deck_suggestion(GenerationResult(cards=[Card(front="Q")]), ["Default"]) is None
