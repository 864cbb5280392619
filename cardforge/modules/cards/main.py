"""Card generation service class.

Wraps the pipeline functions with a fixed settings object and provider so
API handlers, the CLI and scripts share one entrypoint.

Example (async):
    svc = CardGenerator()
    result, category = await svc.generate("Notes on consistent hashing...", count=3)

Example (sync):
    svc = CardGenerator()
    result, category = svc.generate_sync("Notes on consistent hashing...")
"""

from __future__ import annotations

import asyncio
from typing import Optional, Sequence

from cardforge.core.config import GenerationSettings, settings as app_settings
from cardforge.modules.cards import generator
from cardforge.modules.cards.classifier import ContentCategory
from cardforge.modules.cards.errors import ConfigurationError
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
from cardforge.modules.cards.providers import Provider, get_provider
from cardforge.modules.cards.store import map_result
from cardforge.modules.cards.templates import CardTemplate, get_template


class CardGenerator:
    """High-level service for generating, scoring and mapping cards."""

    def __init__(
        self,
        settings: Optional[GenerationSettings] = None,
        *,
        provider: Optional[Provider] = None,
    ) -> None:
        self.settings = settings or app_settings.ai
        self.provider = provider or get_provider(self.settings)

    def _ensure_key(self) -> None:
        if not self.settings.api_key:
            raise ConfigurationError(
                "AI API key not configured. Set AI_API_KEY in your environment."
            )

    async def run(
        self,
        action: Action,
        content: str,
        *,
        count: Optional[int] = None,
        convert_mode: Optional[ConvertMode] = None,
        template: Optional[CardTemplate | str] = None,
        category: Optional[ContentCategory] = None,
    ) -> tuple[GenerationResult, ContentCategory]:
        self._ensure_key()
        if isinstance(template, str):
            template = get_template(template)
        return await generator.run_generation(
            self.provider,
            self.settings,
            action,
            content,
            category=category,
            template=template,
            count=count,
            convert_mode=convert_mode,
        )

    async def autocomplete(self, draft: str, **kwargs) -> tuple[GenerationResult, ContentCategory]:
        return await self.run("autocomplete", draft, **kwargs)

    async def improve(self, fields_text: str, **kwargs) -> tuple[GenerationResult, ContentCategory]:
        return await self.run("improve", fields_text, **kwargs)

    async def generate(
        self, draft: str, count: int = 5, **kwargs
    ) -> tuple[GenerationResult, ContentCategory]:
        return await self.run("generate", draft, count=count, **kwargs)

    async def convert(
        self, fields_text: str, mode: ConvertMode = "auto", **kwargs
    ) -> tuple[GenerationResult, ContentCategory]:
        return await self.run("convert", fields_text, convert_mode=mode, **kwargs)

    async def score(
        self, cards: Sequence[Card], note_type: Optional[NoteType] = None
    ) -> list[ScoreResult]:
        self._ensure_key()
        return await generator.score_cards(self.provider, self.settings, cards, note_type)

    async def suggest_tags(self, content: str) -> list[str]:
        self._ensure_key()
        return await generator.suggest_tags(self.provider, self.settings, content)

    async def detect_template(self, text: str) -> Optional[str]:
        if not self.settings.api_key:
            return None
        return await generator.detect_template(self.provider, self.settings, text)

    async def auto_fill(
        self,
        clipboard_text: str,
        *,
        deck_names: Sequence[str],
        schemas: Sequence[ExternalSchema],
        existing_tags: Sequence[str] = (),
        last_deck: Optional[str] = None,
        last_model: Optional[str] = None,
    ) -> AutoFillResult:
        self._ensure_key()
        return await generator.auto_fill(
            self.provider,
            self.settings,
            clipboard_text,
            deck_names=deck_names,
            schemas=schemas,
            existing_tags=existing_tags,
            last_deck=last_deck,
            last_model=last_model,
        )

    def map(
        self, result: GenerationResult, schemas: Sequence[ExternalSchema]
    ) -> list[MappingResult]:
        return map_result(result, schemas, self.settings)

    def generate_sync(self, draft: str, count: int = 5, **kwargs) -> tuple[GenerationResult, ContentCategory]:
        return asyncio.run(self.generate(draft, count=count, **kwargs))

    def run_sync(self, action: Action, content: str, **kwargs) -> tuple[GenerationResult, ContentCategory]:
        return asyncio.run(self.run(action, content, **kwargs))

    def score_sync(
        self, cards: Sequence[Card], note_type: Optional[NoteType] = None
    ) -> list[ScoreResult]:
        return asyncio.run(self.score(cards, note_type))
