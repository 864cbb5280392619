"""Map semantic card fields onto the literal fields of a store schema.

Users rename and customise their note types, so field names are matched
after normalisation (trim + lowercase) and the Basic path has a positional
fallback. Structural problems (missing schema, wrong type tag, too few
fields, no text field on a cloze schema) come back as :class:`MappingError`
values, never as exceptions, and never as a silently degraded mapping.

Successful results always carry exactly one entry per schema field.
"""

from __future__ import annotations

import re
from typing import Optional, Sequence

from cardforge.core.config import GenerationSettings
from cardforge.core.logging import get_logger
from cardforge.modules.cards.models import (
    Card,
    ExternalSchema,
    MappedFields,
    MappingError,
    MappingResult,
    NoteType,
)

logger = get_logger(__name__)

CLOZE_RE = re.compile(r"\{\{c\d+::(.*?)(?:::[^}]*)?\}\}", re.DOTALL)

EXTRA_NAMES = ("extra", "back extra")


def normalize(name: str) -> str:
    return name.strip().lower()


def strip_cloze(text: str) -> str:
    """``{{c1::inner}}`` and ``{{c1::inner::hint}}`` both become ``inner``."""
    return CLOZE_RE.sub(r"\1", text)


def find_schema(schemas: Sequence[ExternalSchema], name: str) -> Optional[ExternalSchema]:
    return next((s for s in schemas if s.name == name), None)


def find_field(field_names: Sequence[str], *candidates: str) -> Optional[str]:
    wanted = set(candidates)
    return next((f for f in field_names if normalize(f) in wanted), None)


def find_field_containing(field_names: Sequence[str], fragment: str) -> Optional[str]:
    return next((f for f in field_names if fragment in normalize(f)), None)


def _fill_optional(fields: dict[str, str], schema: ExternalSchema, card: Card, *, code: bool) -> None:
    """Populate Extra / Code / Timestamp fields that the card supplies and nothing claimed yet."""
    names = [f for f in schema.fields if f not in fields]
    targets = [(find_field(names, *EXTRA_NAMES), card.extra)]
    if code:
        targets.append((find_field(names, "code"), card.code))
    targets.append((find_field_containing(names, "timestamp"), card.timestamp))
    for field_name, value in targets:
        if field_name and value:
            fields[field_name] = value


def _complete(fields: dict[str, str], schema: ExternalSchema) -> MappedFields:
    return MappedFields(
        model_name=schema.name,
        fields={name: fields.get(name, "") for name in schema.fields},
    )


def map_basic(card: Card, schemas: Sequence[ExternalSchema], basic_name: str) -> MappingResult:
    schema = find_schema(schemas, basic_name)
    if schema is None:
        return MappingError(error=f'Basic model "{basic_name}" not found in the flashcard store')

    front_value = card.front or card.text or ""
    back_value = card.back or ""
    fields: dict[str, str] = {}

    front_field = find_field(schema.fields, "front")
    back_field = find_field(schema.fields, "back")
    if front_field and back_field:
        fields[front_field] = front_value
        fields[back_field] = back_value
    elif len(schema.fields) >= 2:
        # Renamed schema: first field is the prompt, second the answer
        fields[schema.fields[0]] = front_value
        fields[schema.fields[1]] = back_value
    else:
        return MappingError(
            error=(
                f'Basic model "{basic_name}" needs at least 2 fields. '
                f"Has: {', '.join(schema.fields) or '(none)'}"
            )
        )

    _fill_optional(fields, schema, card, code=True)
    return _complete(fields, schema)


def map_cloze_as_basic(
    card: Card, schemas: Sequence[ExternalSchema], basic_name: str
) -> MappingResult:
    stripped = strip_cloze(card.text or "")
    back = strip_cloze(card.back or card.extra or "")
    synthesized = card.model_copy(
        update={
            "front": strip_cloze(card.front) if card.front else stripped,
            "back": back,
            "text": None,
            # extra already moved into back; keep it out of a second field
            "extra": strip_cloze(card.extra) if card.back and card.extra else None,
        }
    )
    return map_basic(synthesized, schemas, basic_name)


def map_cloze(
    card: Card, schemas: Sequence[ExternalSchema], cloze_name: str, basic_name: str
) -> MappingResult:
    schema = find_schema(schemas, cloze_name)
    if schema is None:
        logger.info('Cloze model "%s" missing, falling back to "%s"', cloze_name, basic_name)
        return map_cloze_as_basic(card, schemas, basic_name)

    if not schema.is_cloze:
        return MappingError(
            error=f'Model "{cloze_name}" is not a Cloze-type model (type={schema.type})'
        )

    text_field = find_field(schema.fields, "text")
    if text_field is None:
        return MappingError(
            error=(
                f'Cloze model "{cloze_name}" has no "Text" field. '
                f"Fields: {', '.join(schema.fields) or '(none)'}"
            )
        )

    fields = {text_field: card.text or card.front or ""}
    _fill_optional(fields, schema, card, code=False)
    return _complete(fields, schema)


def map_card(
    card: Card,
    batch_type: NoteType,
    schemas: Sequence[ExternalSchema],
    settings: GenerationSettings,
) -> MappingResult:
    """Map one card using its own note type override, else the batch type."""
    if card.effective_type(batch_type) == "CLOZE":
        result = map_cloze(card, schemas, settings.cloze_model_name, settings.basic_model_name)
    else:
        result = map_basic(card, schemas, settings.basic_model_name)
    if isinstance(result, MappingError):
        logger.warning("Card mapping failed: %s", result.error)
    return result
