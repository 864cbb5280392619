"""Models for quality scores and clipboard auto-fill results."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .cards import Card, NoteType

Grade = Literal["Excellent", "Good", "Needs Work", "Poor"]
REWRITE_THRESHOLD = 7


def grade_for(score: int) -> Grade:
    if score >= 9:
        return "Excellent"
    if score >= 7:
        return "Good"
    if score >= 5:
        return "Needs Work"
    return "Poor"


class ScoreResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    score: int = Field(ge=1, le=10)
    grade: Grade
    feedback: list[str] = Field(default_factory=list)
    improved_card: Card | None = Field(default=None, alias="improvedCard")

    @model_validator(mode="after")
    def _rewrite_only_when_weak(self) -> "ScoreResult":
        # A good score never comes with a suggested rewrite
        if self.score >= REWRITE_THRESHOLD:
            self.improved_card = None
        return self


class AutoFillResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    deck: str | None = None
    note_type: NoteType = Field(default="BASIC", alias="noteType")
    fields: dict[str, str] = Field(default_factory=dict)
    tags: list[str] = Field(default_factory=list)
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)
