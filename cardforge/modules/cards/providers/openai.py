"""Chat-completion wire format (OpenAI and compatible gateways)."""

from __future__ import annotations

from typing import Any, Sequence

from cardforge.core.config import GenerationSettings
from cardforge.modules.cards.models import Message
from cardforge.modules.cards.providers.base import Provider


class OpenAIProvider(Provider):
    name = "openai"
    default_base_url = "https://api.openai.com/v1"

    def build_payload(
        self, messages: Sequence[Message], settings: GenerationSettings
    ) -> dict[str, Any]:
        return {
            "model": settings.resolved_model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "max_tokens": settings.max_output_tokens,
            "temperature": settings.temperature,
            "response_format": {"type": "json_object"},
        }

    async def generate(
        self, messages: Sequence[Message], settings: GenerationSettings
    ) -> str:
        api_key = self.require_key(settings)
        data = await self.post_json(
            f"{self.base_url(settings)}/chat/completions",
            self.build_payload(messages, settings),
            settings,
            headers={"Authorization": f"Bearer {api_key}"},
        )
        choices = data.get("choices") if isinstance(data, dict) else None
        if not isinstance(choices, list) or not choices or not isinstance(choices[0], dict):
            return ""
        message = choices[0].get("message")
        if not isinstance(message, dict) or not isinstance(message.get("content"), str):
            return ""
        return message["content"]
