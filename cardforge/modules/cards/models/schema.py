"""Models for the flashcard store's side: schemas, decks and mapping results."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

SCHEMA_TYPE_STANDARD = 0
SCHEMA_TYPE_CLOZE = 1


class ExternalSchema(BaseModel):
    """A note type as defined by the flashcard store. Read-only here."""

    name: str
    type: int = SCHEMA_TYPE_STANDARD
    fields: list[str] = Field(default_factory=list)

    @property
    def is_cloze(self) -> bool:
        return self.type == SCHEMA_TYPE_CLOZE

    @classmethod
    def from_store_model(cls, raw: dict[str, Any]) -> "ExternalSchema":
        """Build from a store payload such as ``{"name", "type", "flds": [{"name"}]}``."""
        flds = raw.get("flds") or raw.get("fields") or []
        names = [f["name"] if isinstance(f, dict) else str(f) for f in flds]
        return cls(name=raw["name"], type=int(raw.get("type", 0)), fields=names)


class Deck(BaseModel):
    id: int
    name: str


class MappedFields(BaseModel):
    """Successful mapping: one entry per schema field, in schema order."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    kind: Literal["fields"] = "fields"
    model_name: str = Field(alias="modelName")
    fields: dict[str, str]


class MappingError(BaseModel):
    """Recoverable per-card mismatch between a card and the available schemas."""

    kind: Literal["error"] = "error"
    error: str


MappingResult = Annotated[Union[MappedFields, MappingError], Field(discriminator="kind")]


class DeckSuggestion(BaseModel):
    name: str
    exists: bool
