import pytest

from cardforge.modules.cards.field_mapper import map_card, strip_cloze
from cardforge.modules.cards.models import Card, ExternalSchema, MappedFields, MappingError


def test_basic_card_fills_front_back_and_optionals(settings):
    schema = ExternalSchema(name="Basic", fields=["Front", "Back", "Extra", "Code", "Timestamp/Source"])
    card = Card(front="Q", back="A", extra="E", code="print(1)", timestamp="CS50 W2 12:34")

    result = map_card(card, "BASIC", [schema], settings)

    assert isinstance(result, MappedFields)
    assert result.model_name == "Basic"
    assert result.fields == {
        "Front": "Q",
        "Back": "A",
        "Extra": "E",
        "Code": "print(1)",
        "Timestamp/Source": "CS50 W2 12:34",
    }


def test_every_schema_field_is_present(settings):
    schema = ExternalSchema(name="Basic", fields=["A", "B", "C"])

    result = map_card(Card(front="Q", back="Ans"), "BASIC", [schema], settings)

    assert result.fields == {"A": "Q", "B": "Ans", "C": ""}


def test_field_names_match_case_insensitively(settings):
    schema = ExternalSchema(name="Basic", fields=["  back ", "Notes", "FRONT", "Back Extra"])

    result = map_card(Card(front="Q", back="A", extra="E"), "BASIC", [schema], settings)

    assert result.fields == {"  back ": "A", "Notes": "", "FRONT": "Q", "Back Extra": "E"}


def test_basic_front_falls_back_to_text(settings, schemas):
    result = map_card(Card(text="Just a statement"), "BASIC", schemas, settings)

    assert result.fields["Front"] == "Just a statement"


def test_single_field_schema_is_an_error(settings):
    schema = ExternalSchema(name="Basic", fields=["Only"])

    result = map_card(Card(front="Q", back="A"), "BASIC", [schema], settings)

    assert isinstance(result, MappingError)
    assert "at least 2 fields" in result.error


def test_missing_basic_schema_is_an_error(settings, cloze_schema):
    result = map_card(Card(front="Q", back="A"), "BASIC", [cloze_schema], settings)

    assert isinstance(result, MappingError)
    assert '"Basic"' in result.error


def test_schema_names_match_exactly(settings):
    schema = ExternalSchema(name="basic", fields=["Front", "Back"])

    assert isinstance(map_card(Card(front="Q"), "BASIC", [schema], settings), MappingError)


def test_cloze_card_on_cloze_schema(settings):
    schema = ExternalSchema(name="Cloze", type=1, fields=["Text", "Back Extra", "Timestamp"])
    card = Card(text="{{c1::Paris}} is the capital of France", extra="Since 508", timestamp="Atlas p.3", code="x")

    result = map_card(card, "CLOZE", [schema], settings)

    assert result.fields == {
        "Text": "{{c1::Paris}} is the capital of France",
        "Back Extra": "Since 508",
        "Timestamp": "Atlas p.3",
    }


def test_cloze_falls_back_to_basic_without_cloze_markup(settings, basic_schema):
    card = Card(text="{{c1::Redis}} is an in-memory {{c2::key-value store}}")

    result = map_card(card, "CLOZE", [basic_schema], settings)

    assert isinstance(result, MappedFields)
    assert result.model_name == "Basic"
    assert result.fields["Front"] == "Redis is an in-memory key-value store"
    assert all("{{" not in value for value in result.fields.values())


def test_fallback_moves_extra_into_empty_back(settings, basic_schema):
    card = Card(text="{{c1::TCP}} is connection-oriented", extra="UDP is not")

    result = map_card(card, "CLOZE", [basic_schema], settings)

    assert result.fields == {"Front": "TCP is connection-oriented", "Back": "UDP is not", "Extra": ""}


def test_fallback_keeps_extra_when_back_is_present(settings, basic_schema):
    card = Card(text="{{c1::TCP}} is reliable", back="Yes", extra="Retransmits")

    result = map_card(card, "CLOZE", [basic_schema], settings)

    assert result.fields == {"Front": "TCP is reliable", "Back": "Yes", "Extra": "Retransmits"}


@pytest.mark.parametrize(
    "text, expected",
    [
        ("{{c1::inner::a hint}} stays", "inner stays"),
        ("{{c1::a}} and {{c12::b}}", "a and b"),
        ("multi\n{{c1::line\nanswer}}", "multi\nline\nanswer"),
        ("no markup", "no markup"),
    ],
)
def test_strip_cloze(text, expected):
    assert strip_cloze(text) == expected


def test_cloze_named_schema_with_wrong_type_is_an_error(settings, basic_schema):
    impostor = ExternalSchema(name="Cloze", type=0, fields=["Text", "Extra"])

    result = map_card(Card(text="{{c1::x}}"), "CLOZE", [basic_schema, impostor], settings)

    assert isinstance(result, MappingError)
    assert "not a Cloze-type model (type=0)" in result.error


def test_cloze_schema_without_text_field_is_an_error(settings):
    schema = ExternalSchema(name="Cloze", type=1, fields=["Sentence", "Extra"])

    result = map_card(Card(text="{{c1::x}}"), "CLOZE", [schema], settings)

    assert isinstance(result, MappingError)
    assert 'no "Text" field' in result.error


def test_card_override_beats_batch_type(settings, schemas):
    card = Card(text="{{c1::HTTP/2}} multiplexes streams", note_type="CLOZE")

    result = map_card(card, "BASIC", schemas, settings)

    assert result.model_name == "Cloze"
    assert result.fields["Text"] == "{{c1::HTTP/2}} multiplexes streams"


def test_custom_model_names_come_from_settings(settings):
    custom = settings.model_copy(update={"basic_model_name": "Interview Q"})
    schema = ExternalSchema(name="Interview Q", fields=["Prompt", "Answer"])

    result = map_card(Card(front="Q", back="A"), "BASIC", [schema], custom)

    assert result.fields == {"Prompt": "Q", "Answer": "A"}


def test_fallback_strips_cloze_markup_from_moved_extra(settings, basic_schema):
    card = Card(text="{{c1::Redis}} is fast", extra="See {{c2::RAM}}")

    result = map_card(card, "CLOZE", [basic_schema], settings)

    assert result.fields == {"Front": "Redis is fast", "Back": "See RAM", "Extra": ""}
    assert all("{{" not in value for value in result.fields.values())


def test_fallback_strips_cloze_markup_from_back_and_extra(settings, basic_schema):
    card = Card(text="{{c1::TCP}} is reliable", back="via {{c1::ACKs}}", extra="{{c2::Retransmits}} lost segments")

    result = map_card(card, "CLOZE", [basic_schema], settings)

    assert result.fields == {
        "Front": "TCP is reliable",
        "Back": "via ACKs",
        "Extra": "Retransmits lost segments",
    }
