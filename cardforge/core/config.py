from typing import Literal, Optional

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


ProviderName = Literal["openai", "anthropic", "gemini"]
NoteTypePolicy = Literal[
    "auto", "prefer_basic", "prefer_cloze", "basic_only", "cloze_only"
]

DEFAULT_MODELS: dict[str, str] = {
    "openai": "gpt-4o-mini",
    "anthropic": "claude-3-5-haiku-latest",
    "gemini": "gemini-2.0-flash",
}


class GenerationSettings(BaseSettings):
    """Everything a generation or scoring call needs to know about the backend."""

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )
    provider: ProviderName = Field(default="openai", alias="AI_PROVIDER")
    api_key: Optional[str] = Field(default=None, alias="AI_API_KEY")
    model: Optional[str] = Field(default=None, alias="AI_MODEL")
    base_url: Optional[str] = Field(default=None, alias="AI_BASE_URL")
    max_output_tokens: int = Field(default=1024, ge=1, alias="AI_MAX_OUTPUT_TOKENS")
    temperature: float = Field(default=0.3, ge=0.0, le=2.0, alias="AI_TEMPERATURE")
    note_type_policy: NoteTypePolicy = Field(default="auto", alias="AI_NOTE_TYPE_MODE")
    max_clozes_per_card: int = Field(default=2, ge=1, alias="AI_MAX_CLOZES_PER_CARD")
    dry_run: bool = Field(default=False, alias="AI_DRY_RUN")
    basic_model_name: str = Field(default="Basic", alias="BASIC_MODEL_NAME")
    cloze_model_name: str = Field(default="Cloze", alias="CLOZE_MODEL_NAME")
    timeout_seconds: float = Field(default=60.0, gt=0, alias="AI_TIMEOUT_SECONDS")

    @computed_field
    def resolved_model(self) -> str:
        return self.model or DEFAULT_MODELS[self.provider]

    def with_policy(self, policy: NoteTypePolicy) -> "GenerationSettings":
        return self.model_copy(update={"note_type_policy": policy})


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )
    name: str = Field(default="cardforge", alias="APP_NAME")
    version: str = Field(default="v1", alias="API_VERSION")
    port: int = Field(default=9000, alias="APP_PORT")
    mode: str = Field(default="prod", alias="MODE")

    @computed_field
    def is_production(self) -> bool:
        return self.mode != "dev"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )

    app: AppSettings = Field(default_factory=lambda: AppSettings())
    ai: GenerationSettings = Field(default_factory=lambda: GenerationSettings())

    log_level: str = Field(default="INFO", alias="LOG_LEVEL")


settings = Settings()
