"""Process-wide game controller and its service wiring."""

from __future__ import annotations

import logging
from typing import Optional

from storyloop.config import Settings, settings as default_settings
from storyloop.errors import ConfigurationError
from storyloop.llm.registry import get_image_provider, get_provider
from storyloop.prompts.loader import PromptLoader
from storyloop.services.game import GameController
from storyloop.services.image import ImageService
from storyloop.services.story import StoryService

log = logging.getLogger(__name__)

# One session per process
_controller: Optional[GameController] = None


def build_controller(settings: Settings | None = None) -> GameController:
    """Wire a controller from *settings*, degraded when the key is missing."""
    settings = settings or default_settings
    if not settings.service_configured:
        return GameController(None, service_available=False)

    story = StoryService(
        get_provider(settings=settings),
        PromptLoader(settings.prompts_dir),
        max_tokens=settings.story_max_tokens,
    )
    try:
        images: Optional[ImageService] = ImageService(get_image_provider(settings=settings))
    except ConfigurationError as exc:
        log.warning("Illustrations disabled: %s", exc)
        images = None
    return GameController(story, images)


def get_game_controller() -> GameController:
    global _controller
    if _controller is None:
        _controller = build_controller()
    return _controller
