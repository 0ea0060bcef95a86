from __future__ import annotations

import logging

from storyloop.errors import ImageFetchError
from storyloop.llm.base import ImageProvider

log = logging.getLogger(__name__)


class ImageService:
    """Render the illustration for a story turn."""

    def __init__(self, provider: ImageProvider):
        self._provider = provider

    async def generate(self, prompt: str) -> str:
        try:
            return await self._provider.generate_image(prompt)
        except Exception as exc:
            raise ImageFetchError(str(exc)) from exc
