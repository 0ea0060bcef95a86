from __future__ import annotations


class ServiceError(RuntimeError):
    """Raised when a generative backend call fails (network, parse, quota)."""


class ConfigurationError(ServiceError):
    """The backend credential is missing; the session cannot recover."""


class StoryFetchError(ServiceError):
    """Story text generation failed."""


class ImageFetchError(ServiceError):
    """Image generation failed after the story segment arrived."""
