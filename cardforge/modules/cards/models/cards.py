"""Pydantic models for the provider-independent side of the pipeline.

JSON produced by the model uses camelCase keys (``selectedNoteType``,
``noteType``, ...); the models accept both those aliases and the Python field
names, and dump with ``by_alias=True`` when talking to clients.
"""

from __future__ import annotations

from typing import Iterable, Literal, Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator

NoteType = Literal["BASIC", "CLOZE"]
NOTE_TYPES: tuple[str, ...] = ("BASIC", "CLOZE")
NEEDS_REVIEW_MARKER = "NEEDS_REVIEW"

Role = Literal["system", "user", "assistant"]


class Message(BaseModel):
    role: Role
    content: str


def check_conversation(messages: Sequence[Message]) -> None:
    """Exactly one system message, first, followed by user/assistant turns."""
    if not messages or messages[0].role != "system":
        raise ValueError("conversation must start with a system message")
    if any(m.role == "system" for m in messages[1:]):
        raise ValueError("conversation must contain exactly one system message")


def merge_tags(*groups: Iterable[str]) -> list[str]:
    """Union of tag groups, first occurrence wins, blanks dropped."""
    merged: list[str] = []
    for group in groups:
        for tag in group:
            tag = tag.strip()
            if tag and tag not in merged:
                merged.append(tag)
    return merged


class Card(BaseModel):
    """One flashcard's content before it is mapped onto a concrete schema."""

    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    front: str | None = None
    back: str | None = None
    text: str | None = None
    extra: str | None = None
    code: str | None = None
    timestamp: str | None = None
    tags: list[str] = Field(default_factory=list)
    note_type: NoteType | None = Field(default=None, alias="noteType")
    model_name: str | None = Field(default=None, alias="modelName")
    deck_name: str | None = Field(default=None, alias="deckName")

    @field_validator("tags")
    @classmethod
    def _dedupe_tags(cls, v: list[str]) -> list[str]:
        return merge_tags(v)

    def effective_type(self, batch_type: NoteType) -> NoteType:
        return self.note_type or batch_type

    def with_tags(self, tags: Iterable[str]) -> "Card":
        """Copy of the card with caller tags merged in front of its own."""
        return self.model_copy(update={"tags": merge_tags(tags, self.tags)})


class GenerationResult(BaseModel):
    """A validated batch of cards plus the model's commentary."""

    model_config = ConfigDict(populate_by_name=True)

    selected_note_type: NoteType = Field(default="BASIC", alias="selectedNoteType")
    cards: list[Card] = Field(min_length=1)
    notes: str = ""
    deck: str | None = None
    score: float | None = None
    score_feedback: list[str] | None = Field(default=None, alias="scoreFeedback")

    @property
    def needs_review(self) -> bool:
        return NEEDS_REVIEW_MARKER in self.notes
