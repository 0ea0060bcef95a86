from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from storyloop.api.dependencies import get_game_controller
from storyloop.services.game import GameController, GameEvent

router = APIRouter(prefix="/api/game", tags=["game"])


@router.get("")
async def get_view(ctl: GameController = Depends(get_game_controller)):
    """Current session view for rendering."""
    return ctl.view().model_dump()


@router.post("/events")
async def post_event(
    body: GameEvent,
    ctl: GameController = Depends(get_game_controller),
):
    """Start, choose or restart; answers with the view after the cycle."""
    if ctl.degraded:
        return JSONResponse(status_code=503, content=ctl.view().model_dump())
    view = await ctl.dispatch(body)
    return view.model_dump()
