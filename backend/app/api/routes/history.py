"""History — read and append the round outcome log.

Invariants:
    - GET returns entries newest first with limit/offset pagination
    - POST requires all six outcome values within the configured bounds
    - POST never touches the in-memory round state

Design Decisions:
    - Bounds checked with OutcomeSet: same rule and same INVALID_OUTCOME error
      as WebSocket outcome reports
"""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Query, status

from app.config import Settings, get_settings
from app.core.outcome_set import OutcomeSet
from app.infrastructure.round_repository import SqlHistoryRepository
from app.schemas.history import HistoryCreate, HistoryEntryResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/history", tags=["history"])


def get_history_repository() -> SqlHistoryRepository:
    return SqlHistoryRepository()


@router.get("")
async def list_history(
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
    repo: SqlHistoryRepository = Depends(get_history_repository),
):
    """List history entries with pagination."""
    entries = await repo.list_recent(limit=limit, offset=offset)
    return {
        "entries": entries,
        "pagination": {"limit": limit, "offset": offset},
    }


@router.post(
    "", response_model=HistoryEntryResponse,
    status_code=status.HTTP_201_CREATED,
)
async def append_history(
    body: HistoryCreate,
    repo: SqlHistoryRepository = Depends(get_history_repository),
    settings: Settings = Depends(get_settings),
):
    """Append one entry to the history log."""
    outcomes = body.outcomes()
    OutcomeSet(settings.outcome_min, settings.outcome_max).update(outcomes)

    started_at = body.round_started_at or datetime.now(timezone.utc)
    if started_at.tzinfo is None:
        started_at = started_at.replace(tzinfo=timezone.utc)
    entry_id = await repo.append(started_at, outcomes, round_id=body.round_id)
    logger.info("History entry appended", extra={"round_id": body.round_id})
    return HistoryEntryResponse(
        id=entry_id,
        round_id=body.round_id,
        round_started_at=started_at.isoformat(),
        outcomes=outcomes,
    )
