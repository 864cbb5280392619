"""Parts-based wire format with the key passed as a query parameter."""

from __future__ import annotations

from typing import Any, Sequence

from cardforge.core.config import GenerationSettings
from cardforge.modules.cards.models import Message
from cardforge.modules.cards.providers.base import Provider, split_system


class GeminiProvider(Provider):
    name = "gemini"
    default_base_url = "https://generativelanguage.googleapis.com/v1beta"

    def build_payload(
        self, messages: Sequence[Message], settings: GenerationSettings
    ) -> dict[str, Any]:
        system, turns = split_system(messages)
        payload: dict[str, Any] = {
            "contents": [
                {
                    "role": "model" if m.role == "assistant" else "user",
                    "parts": [{"text": m.content}],
                }
                for m in turns
            ],
            "generationConfig": {
                "maxOutputTokens": settings.max_output_tokens,
                "temperature": settings.temperature,
                "responseMimeType": "application/json",
            },
        }
        if system is not None:
            payload["systemInstruction"] = {"parts": [{"text": system}]}
        return payload

    async def generate(
        self, messages: Sequence[Message], settings: GenerationSettings
    ) -> str:
        api_key = self.require_key(settings)
        data = await self.post_json(
            f"{self.base_url(settings)}/models/{settings.resolved_model}:generateContent",
            self.build_payload(messages, settings),
            settings,
            params={"key": api_key},
        )
        candidates = data.get("candidates") if isinstance(data, dict) else None
        if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
            return ""
        content = candidates[0].get("content")
        parts = content.get("parts") if isinstance(content, dict) else None
        if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
            return ""
        text = parts[0].get("text")
        return text if isinstance(text, str) else ""
