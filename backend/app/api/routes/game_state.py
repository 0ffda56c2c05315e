"""Game State — REST snapshot of the current period, outcomes and round id.

Invariants:
    - Read-only: never mutates controller state
    - Same payload as the WebSocket `snapshot` event data
"""

from fastapi import APIRouter, Depends

from app.api.dependencies import get_controller
from app.services.round_controller import RoundController

router = APIRouter(prefix="/api/v1/game", tags=["game"])


@router.get("/period")
async def get_game_period(
    controller: RoundController = Depends(get_controller),
):
    """Current GamePeriod plus live outcomes, seed and round id."""
    return controller.snapshot()["data"]
