from __future__ import annotations

from fastapi import APIRouter

from storyloop.config import settings
from storyloop.llm.registry import list_providers

router = APIRouter(prefix="/api/providers", tags=["providers"])


@router.get("")
def get_providers():
    """List the known providers and which ones are configured."""
    return {
        "story_provider": settings.story_provider,
        "image_provider": settings.image_provider,
        "service_configured": settings.service_configured,
        "providers": list_providers(),
    }
