"""Turn-separated wire format: system prompt travels outside the turn list."""

from __future__ import annotations

from typing import Any, Sequence

from cardforge.core.config import GenerationSettings
from cardforge.modules.cards.models import Message
from cardforge.modules.cards.providers.base import Provider, split_system

ANTHROPIC_VERSION = "2023-06-01"


class AnthropicProvider(Provider):
    name = "anthropic"
    default_base_url = "https://api.anthropic.com/v1"

    def build_payload(
        self, messages: Sequence[Message], settings: GenerationSettings
    ) -> dict[str, Any]:
        system, turns = split_system(messages)
        return {
            "model": settings.resolved_model,
            "max_tokens": settings.max_output_tokens,
            "temperature": settings.temperature,
            "system": system or "",
            "messages": [{"role": m.role, "content": m.content} for m in turns],
        }

    async def generate(
        self, messages: Sequence[Message], settings: GenerationSettings
    ) -> str:
        api_key = self.require_key(settings)
        data = await self.post_json(
            f"{self.base_url(settings)}/messages",
            self.build_payload(messages, settings),
            settings,
            headers={"x-api-key": api_key, "anthropic-version": ANTHROPIC_VERSION},
        )
        blocks = data.get("content") if isinstance(data, dict) else None
        if not isinstance(blocks, list):
            return ""
        for block in blocks:
            if isinstance(block, dict) and block.get("type") == "text":
                text = block.get("text")
                return text if isinstance(text, str) else ""
        return ""
