"""Provider registry: one adapter per backend wire format."""

from __future__ import annotations

from typing import Optional

import httpx

from cardforge.core.config import GenerationSettings
from cardforge.modules.cards.errors import ConfigurationError
from cardforge.modules.cards.providers.anthropic import AnthropicProvider
from cardforge.modules.cards.providers.base import Provider, split_system
from cardforge.modules.cards.providers.gemini import GeminiProvider
from cardforge.modules.cards.providers.openai import OpenAIProvider

PROVIDERS: dict[str, type[Provider]] = {
    OpenAIProvider.name: OpenAIProvider,
    AnthropicProvider.name: AnthropicProvider,
    GeminiProvider.name: GeminiProvider,
}


def get_provider(
    settings: GenerationSettings, *, client: Optional[httpx.AsyncClient] = None
) -> Provider:
    try:
        cls = PROVIDERS[settings.provider]
    except KeyError:
        raise ConfigurationError(f"Unknown AI provider: {settings.provider!r}") from None
    return cls(client=client)


__all__ = [
    "PROVIDERS",
    "AnthropicProvider",
    "GeminiProvider",
    "OpenAIProvider",
    "Provider",
    "get_provider",
    "split_system",
]
