"""ORM Models — SQLAlchemy declarative models for persisted rounds and history.

Invariants:
    - All models inherit from Base (db/base.py)
    - GameRound.id is the only stable round identity

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all
      or alembic autogenerate runs
"""

from app.models.game_round import GameRound  # noqa: F401
from app.models.history_entry import HistoryEntry  # noqa: F401
