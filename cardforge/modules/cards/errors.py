"""Error taxonomy for the card generation pipeline.

Request-level failures (provider, parse, validation) are raised. Per-card
schema mismatches are *returned* as the ``error`` variant of a mapping result
and live in :mod:`cardforge.modules.cards.models.schema` instead.
"""

from __future__ import annotations

from typing import Optional

RAW_EXCERPT_LENGTH = 200
DISPLAY_LIMIT = 120


def _excerpt(text: str, limit: int) -> str:
    text = text.strip()
    if len(text) <= limit:
        return text
    return text[: max(0, limit - 1)].rstrip() + "…"


class CardForgeError(Exception):
    """Base class for every error raised by the pipeline."""


class ConfigurationError(CardForgeError):
    """Settings are unusable, e.g. no API key or an unknown provider."""


class EmptyContentError(CardForgeError):
    """There is no text to generate cards from."""


class ProviderError(CardForgeError):
    """The backend answered with a non-2xx status, or could not be reached."""

    def __init__(self, provider: str, status_code: Optional[int], body: str) -> None:
        self.provider = provider
        self.status_code = status_code
        self.body = body
        if status_code is None:
            message = f"{provider} API request failed: {body}"
        else:
            message = f"{provider} API error ({status_code}): {body}"
        super().__init__(message)


class ParseError(CardForgeError):
    """No JSON object could be extracted or decoded from model output."""

    def __init__(self, message: str, raw: str = "") -> None:
        self.raw = raw
        if raw:
            message = f"{message}. Raw response: {_excerpt(raw, RAW_EXCERPT_LENGTH)!r}"
        super().__init__(message)


class CardValidationError(CardForgeError):
    """The decoded JSON does not have the structure of a card batch."""

    def __init__(self, message: str, index: Optional[int] = None) -> None:
        self.index = index
        super().__init__(message)


def display_message(exc: BaseException, limit: int = DISPLAY_LIMIT) -> str:
    """Render an error for a toast, status line or HTTP detail."""
    return _excerpt(str(exc) or exc.__class__.__name__, limit)
