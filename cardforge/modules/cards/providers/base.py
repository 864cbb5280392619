"""Common call surface for LLM backends.

Every adapter turns the uniform message list into its backend's wire shape,
attaches credentials where that backend expects them, performs a single POST
(no retry, no streaming) and unwraps the first textual completion. Non-2xx
responses and transport failures become :class:`ProviderError`; a successful
response without completion text yields ``""``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

import httpx

from cardforge.core.config import GenerationSettings
from cardforge.core.logging import get_logger, with_context
from cardforge.modules.cards.errors import ConfigurationError, ProviderError
from cardforge.modules.cards.models import Message

logger = get_logger(__name__)


def split_system(messages: Sequence[Message]) -> tuple[Optional[str], list[Message]]:
    """Separate the system instruction from the user/assistant turns."""
    system = next((m.content for m in messages if m.role == "system"), None)
    turns = [m for m in messages if m.role != "system"]
    return system, turns


class Provider(ABC):
    name: str = "provider"
    default_base_url: str = ""

    def __init__(self, *, client: Optional[httpx.AsyncClient] = None) -> None:
        self._client = client

    @abstractmethod
    async def generate(
        self, messages: Sequence[Message], settings: GenerationSettings
    ) -> str:
        """Send one conversation and return the first completion text."""

    def base_url(self, settings: GenerationSettings) -> str:
        return (settings.base_url or self.default_base_url).rstrip("/")

    def require_key(self, settings: GenerationSettings) -> str:
        if not settings.api_key:
            raise ConfigurationError(f"No API key configured for {self.name}")
        return settings.api_key

    async def post_json(
        self,
        url: str,
        payload: dict[str, Any],
        settings: GenerationSettings,
        *,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, str]] = None,
    ) -> Any:
        log = with_context(logger, provider=self.name)
        request_headers = {"Content-Type": "application/json", **(headers or {})}
        try:
            if self._client is not None:
                response = await self._client.post(
                    url, json=payload, headers=request_headers, params=params,
                    timeout=settings.timeout_seconds,
                )
            else:
                async with httpx.AsyncClient(timeout=settings.timeout_seconds) as client:
                    response = await client.post(
                        url, json=payload, headers=request_headers, params=params
                    )
        except httpx.HTTPError as e:
            log.warning("Request to %s failed: %s", self.name, e.__class__.__name__)
            raise ProviderError(self.name, None, str(e) or e.__class__.__name__) from e

        if not response.is_success:
            log.warning("%s answered %s", self.name, response.status_code)
            raise ProviderError(self.name, response.status_code, response.text)

        log.debug("%s answered %s (%d bytes)", self.name, response.status_code, len(response.content))
        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(self.name, response.status_code, response.text) from e
