from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from cardforge.modules.cards.models import (
    AutoFillResult,
    Card,
    ExternalSchema,
    GenerationResult,
    MappingResult,
    NoteType,
    ScoreResult,
)
from cardforge.modules.cards.prompt import Action, ConvertMode


class ClassifyRequest(BaseModel):
    text: str = Field(..., description="Raw study text")


class ClassifyResponse(BaseModel):
    category: str
    label: str


class GenerateRequest(BaseModel):
    text: str = Field(..., description="Draft notes or existing field content")
    action: Action = "generate"
    count: Optional[int] = Field(None, ge=1, le=50, description="Cards to request")
    convert_mode: Optional[ConvertMode] = None
    template_id: Optional[str] = None


class GenerateResponse(BaseModel):
    category: str
    result: GenerationResult
    needs_review: bool = False


class ScoreRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cards: list[Card] = Field(..., min_length=1)
    note_type: Optional[NoteType] = Field(None, alias="noteType")


class ScoreResponse(BaseModel):
    scores: list[ScoreResult]


class MapRequest(BaseModel):
    result: GenerationResult
    schemas: list[ExternalSchema] = Field(default_factory=list)


class MapResponse(BaseModel):
    mappings: list[MappingResult]


class SuggestTagsRequest(BaseModel):
    content: str


class SuggestTagsResponse(BaseModel):
    tags: list[str]


class AutoFillRequest(BaseModel):
    text: str
    decks: list[str] = Field(default_factory=list)
    schemas: list[ExternalSchema] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    last_deck: Optional[str] = None
    last_model: Optional[str] = None


class AutoFillResponse(BaseModel):
    result: AutoFillResult

