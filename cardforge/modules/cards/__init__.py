"""Card generation module exports."""

from .classifier import ContentCategory, category_label, classify
from .errors import (
    CardForgeError,
    CardValidationError,
    ConfigurationError,
    EmptyContentError,
    ParseError,
    ProviderError,
    display_message,
)
from .field_mapper import map_card, strip_cloze
from .main import CardGenerator
from .parser import extract_json, parse_generation
from .scoring import parse_scores

__all__ = [
    "ContentCategory",
    "category_label",
    "classify",
    "CardForgeError",
    "CardValidationError",
    "ConfigurationError",
    "EmptyContentError",
    "ParseError",
    "ProviderError",
    "display_message",
    "map_card",
    "strip_cloze",
    "CardGenerator",
    "extract_json",
    "parse_generation",
    "parse_scores",
]
