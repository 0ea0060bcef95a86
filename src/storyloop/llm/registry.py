from __future__ import annotations

import logging

from storyloop.config import Settings, settings as default_settings
from storyloop.errors import ConfigurationError
from storyloop.llm.anthropic import AnthropicProvider
from storyloop.llm.base import ImageProvider, LLMProvider
from storyloop.llm.openai import OpenAIImageProvider, OpenAIProvider

log = logging.getLogger(__name__)

_PROVIDER_MAP = {
    "openai": OpenAIProvider,
    "anthropic": AnthropicProvider,
}

_IMAGE_PROVIDER_MAP = {
    "openai": OpenAIImageProvider,
}


def _api_key(name: str, settings: Settings) -> str:
    api_key = settings.api_key_for(name)
    if not api_key:
        raise ConfigurationError(
            f"API key for provider '{name}' is not configured "
            f"(set {name.upper()}_API_KEY in .env)."
        )
    return api_key


def get_provider(
    name: str | None = None,
    model: str | None = None,
    temperature: float | None = None,
    settings: Settings | None = None,
) -> LLMProvider:
    """Instantiate the story provider.

    Parameters
    ----------
    name:
        ``"openai"`` | ``"anthropic"``.  Defaults to ``settings.story_provider``.
    model:
        Explicit model id.  Falls back to ``settings.story_model`` and then
        the provider default.
    temperature:
        Override; falls back to ``settings.story_temperature``.
    """
    settings = settings or default_settings
    name = name or settings.story_provider
    if name not in _PROVIDER_MAP:
        raise ValueError(
            f"Unknown provider '{name}'. Choose from: {list(_PROVIDER_MAP)}"
        )
    cls = _PROVIDER_MAP[name]
    api_key = _api_key(name, settings)
    chosen_model = model or settings.story_model or cls.DEFAULT_MODEL
    temp = temperature if temperature is not None else settings.story_temperature

    log.info("Creating %s story provider: model=%s, temperature=%.2f", name, chosen_model, temp)
    return cls(api_key=api_key, model=chosen_model, temperature=temp)


def get_image_provider(
    name: str | None = None,
    settings: Settings | None = None,
) -> ImageProvider:
    """Instantiate the illustration provider named by ``settings.image_provider``."""
    settings = settings or default_settings
    name = name or settings.image_provider
    if name not in _IMAGE_PROVIDER_MAP:
        raise ValueError(
            f"Unknown image provider '{name}'. Choose from: {list(_IMAGE_PROVIDER_MAP)}"
        )
    cls = _IMAGE_PROVIDER_MAP[name]
    api_key = _api_key(name, settings)

    log.info("Creating %s image provider: model=%s, size=%s",
             name, settings.image_model, settings.image_size)
    return cls(api_key=api_key, model=settings.image_model, size=settings.image_size)


def list_providers(settings: Settings | None = None) -> dict:
    """Return info about every known provider and whether it is configured."""
    settings = settings or default_settings
    result = {}
    for name, cls in _PROVIDER_MAP.items():
        result[name] = {
            "configured": bool(settings.api_key_for(name)),
            "default_model": cls.DEFAULT_MODEL,
            "models": cls.MODELS,
            "images": name in _IMAGE_PROVIDER_MAP,
            "is_story_provider": name == settings.story_provider,
            "is_image_provider": name == settings.image_provider,
        }
    return result
