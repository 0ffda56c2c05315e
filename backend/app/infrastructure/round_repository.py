"""Round Repositories — SQLAlchemy implementations of the persistence gateway.

Invariants:
    - create_round returns the storage-assigned integer id
    - update_round writes only non-null outcome values (partial update)
    - update_round on a missing id raises ResourceNotFoundError
    - Driver failures surface as DatabaseError (mapped by DatabaseSessionManager)
    - History rows are only ever inserted

Design Decisions:
    - Session per call via db_manager.session(): the controller holds no DB state
      between ticks, so a long-lived session would only hold a pool slot
    - Manager resolved lazily through a callable so tests can swap the singleton
"""

import logging
from datetime import datetime
from typing import Callable

from sqlalchemy import select

from app.core.domain_types import (
    OUTCOME_CATEGORIES, HistoryEntryId, RoundId, RoundStatus,
)
from app.core.errors import ResourceNotFoundError
from app.infrastructure.database import DatabaseSessionManager, get_db_manager
from app.models.game_round import GameRound
from app.models.history_entry import HistoryEntry

logger = logging.getLogger(__name__)


class SqlRoundRepository:
    """RoundRepository over the game_rounds table."""

    def __init__(
        self,
        manager_factory: Callable[[], DatabaseSessionManager] = get_db_manager,
    ):
        self._manager_factory = manager_factory

    async def create_round(
        self,
        round_index: int,
        started_at: datetime,
        ends_at: datetime,
        outcomes: dict[str, int | None],
        status: RoundStatus,
        seed: dict[str, int | None] | None = None,
    ) -> RoundId:
        row = GameRound(
            round_index=round_index,
            started_at=started_at,
            ends_at=ends_at,
            seed=dict(seed) if seed else None,
            status=status.value,
            **{k: outcomes.get(k) for k in OUTCOME_CATEGORIES},
        )
        async with self._manager_factory().session() as db:
            db.add(row)
            await db.commit()
            await db.refresh(row)
        logger.info(
            "Round persisted",
            extra={"round_id": row.id, "round_index": round_index},
        )
        return RoundId(row.id)

    async def update_round(
        self,
        round_id: RoundId,
        outcomes: dict[str, int | None],
        status: RoundStatus,
    ) -> None:
        async with self._manager_factory().session() as db:
            row = await db.get(GameRound, round_id)
            if row is None:
                raise ResourceNotFoundError("Round", str(round_id))
            for key in OUTCOME_CATEGORIES:
                value = outcomes.get(key)
                if value is not None:
                    setattr(row, key, value)
            row.status = status.value
            await db.commit()


class SqlHistoryRepository:
    """HistoryRepository over the round_history table."""

    def __init__(
        self,
        manager_factory: Callable[[], DatabaseSessionManager] = get_db_manager,
    ):
        self._manager_factory = manager_factory

    async def append(
        self,
        round_started_at: datetime,
        outcomes: dict[str, int],
        round_id: RoundId | None = None,
    ) -> HistoryEntryId:
        row = HistoryEntry(
            round_id=round_id,
            round_started_at=round_started_at,
            **{k: outcomes[k] for k in OUTCOME_CATEGORIES},
        )
        async with self._manager_factory().session() as db:
            db.add(row)
            await db.commit()
            await db.refresh(row)
        return HistoryEntryId(row.id)

    async def list_recent(self, limit: int = 20, offset: int = 0) -> list[dict]:
        """Newest first."""
        query = (
            select(HistoryEntry)
            .order_by(HistoryEntry.created_at.desc(), HistoryEntry.id.desc())
            .limit(limit)
            .offset(offset)
        )
        async with self._manager_factory().session() as db:
            result = await db.execute(query)
            rows = result.scalars().all()
        return [history_entry_to_dict(r) for r in rows]


def history_entry_to_dict(row: HistoryEntry) -> dict:
    return {
        "id": row.id,
        "round_id": row.round_id,
        "round_started_at": row.round_started_at.isoformat(),
        "outcomes": {k: getattr(row, k) for k in OUTCOME_CATEGORIES},
        "created_at": row.created_at.isoformat(),
    }
