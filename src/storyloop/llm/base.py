from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


class LLMProvider(ABC):
    """A text model that answers one story turn as a validated model."""

    DEFAULT_MODEL: str = ""
    MODELS: List[str] = []

    def __init__(self, model: str, temperature: float = 0.9):
        self.model = model
        self.temperature = temperature

    def _temperature(self, override: float | None) -> float:
        return override if override is not None else self.temperature

    @abstractmethod
    async def complete_structured(
        self,
        system_prompt: str,
        user_prompt: str,
        response_model: type[T],
        *,
        temperature: float | None = None,
        max_tokens: int = 1024,
    ) -> T:
        """Answer *user_prompt* under *system_prompt* as a *response_model*."""


class ImageProvider(ABC):
    """An image model that paints one prompt."""

    DEFAULT_MODEL: str = ""
    MODELS: List[str] = []

    def __init__(self, model: str, size: str = "1024x1024"):
        self.model = model
        self.size = size

    @abstractmethod
    async def generate_image(self, prompt: str) -> str:
        """Return the generated image as a ``data:`` URI."""
