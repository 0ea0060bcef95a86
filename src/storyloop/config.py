from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


_PROJECT_ROOT = Path(__file__).resolve().parents[2]

_KEY_ATTRS = {
    "openai": "openai_api_key",
    "anthropic": "anthropic_api_key",
}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Provider API keys ---
    openai_api_key: str = ""
    anthropic_api_key: str = ""

    # --- Story generation ---
    story_provider: str = "openai"  # openai | anthropic
    story_model: str = ""  # empty = provider default
    story_temperature: float = 0.9
    story_max_tokens: int = 1024

    # --- Illustration ---
    image_provider: str = "openai"
    image_model: str = "gpt-image-1"
    image_size: str = "1024x1024"

    # --- Paths ---
    prompts_dir: str = str(Path(__file__).parent / "prompts" / "templates")

    log_level: str = "INFO"

    def api_key_for(self, provider: str) -> str:
        """Return the stripped API key configured for *provider* ("" if none)."""
        attr = _KEY_ATTRS.get(provider)
        if attr is None:
            return ""
        return getattr(self, attr).strip()

    @property
    def service_configured(self) -> bool:
        """Whether the story backend credential is present and non-blank."""
        return bool(self.api_key_for(self.story_provider))


settings = Settings()
