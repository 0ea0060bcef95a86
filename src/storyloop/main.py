"""storyloop: an illustrated choose-your-path adventure.

Run with:  uvicorn storyloop.main:app --reload
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

from storyloop.config import settings

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
)

from fastapi import FastAPI

from storyloop.api.dependencies import get_game_controller
from storyloop.api.game import router as game_router
from storyloop.api.providers import router as providers_router

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Kick off the opening story in the background; the view shows it loading."""
    controller = get_game_controller()
    opening = None
    if not controller.degraded:
        opening = asyncio.create_task(controller.start())
    yield
    if opening is not None and not opening.done():
        opening.cancel()


app = FastAPI(
    title="storyloop",
    description="Interactive illustrated text adventure driven by generative models.",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(game_router)
app.include_router(providers_router)
