"""GameRound ORM — one persisted betting round.

Invariants:
    - id is an autoincrement integer assigned by storage — the only round identity
    - round_index repeats every window and every day: indexed, never unique
    - Outcome columns a1..c2 are nullable until the round is completed
    - status ∈ RoundStatus values ("active" | "completed")

Design Decisions:
    - One column per outcome category over a JSON blob: history queries and
      partial updates address categories directly
    - seed as JSON: starting wheel values are display data, never queried
"""

from datetime import datetime, timezone

from sqlalchemy import Integer, String, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from app.core.domain_types import RoundStatus
from app.db.base import Base


def _now() -> datetime:
    return datetime.now(timezone.utc)


class GameRound(Base):
    """GameRound entity — created active, completed at most once."""
    __tablename__ = "game_rounds"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    round_index: Mapped[int] = mapped_column(
        Integer, nullable=False, index=True,
    )
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    ends_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    a1: Mapped[int | None] = mapped_column(Integer, nullable=True)
    a2: Mapped[int | None] = mapped_column(Integer, nullable=True)
    b1: Mapped[int | None] = mapped_column(Integer, nullable=True)
    b2: Mapped[int | None] = mapped_column(Integer, nullable=True)
    c1: Mapped[int | None] = mapped_column(Integer, nullable=True)
    c2: Mapped[int | None] = mapped_column(Integer, nullable=True)
    seed: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=RoundStatus.ACTIVE.value,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now, onupdate=_now,
    )
