from .cards import (
    NEEDS_REVIEW_MARKER,
    NOTE_TYPES,
    Card,
    GenerationResult,
    Message,
    NoteType,
    check_conversation,
    merge_tags,
)
from .schema import (
    SCHEMA_TYPE_CLOZE,
    SCHEMA_TYPE_STANDARD,
    Deck,
    DeckSuggestion,
    ExternalSchema,
    MappedFields,
    MappingError,
    MappingResult,
)
from .scoring import AutoFillResult, Grade, ScoreResult, grade_for

__all__ = [
    "NEEDS_REVIEW_MARKER",
    "NOTE_TYPES",
    "Card",
    "GenerationResult",
    "Message",
    "NoteType",
    "check_conversation",
    "merge_tags",
    "SCHEMA_TYPE_CLOZE",
    "SCHEMA_TYPE_STANDARD",
    "Deck",
    "DeckSuggestion",
    "ExternalSchema",
    "MappedFields",
    "MappingError",
    "MappingResult",
    "AutoFillResult",
    "Grade",
    "ScoreResult",
    "grade_for",
]
