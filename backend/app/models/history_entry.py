"""HistoryEntry ORM — append-only log of finished round outcomes.

Invariants:
    - Rows are only ever inserted; no code path updates or deletes them
    - All six outcome columns are non-null
    - round_id is nullable: entries appended over HTTP have no owning round

Design Decisions:
    - No FK to game_rounds: the log survives round cleanup and accepts
      manual entries
"""

from datetime import datetime, timezone

from sqlalchemy import Integer, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base


class HistoryEntry(Base):
    """HistoryEntry — one finished round's outcomes."""
    __tablename__ = "round_history"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    round_id: Mapped[int | None] = mapped_column(
        Integer, nullable=True, index=True,
    )
    round_started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    a1: Mapped[int] = mapped_column(Integer, nullable=False)
    a2: Mapped[int] = mapped_column(Integer, nullable=False)
    b1: Mapped[int] = mapped_column(Integer, nullable=False)
    b2: Mapped[int] = mapped_column(Integer, nullable=False)
    c1: Mapped[int] = mapped_column(Integer, nullable=False)
    c2: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        index=True,
    )
