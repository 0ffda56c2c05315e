"""History Schemas — request/response models for the history endpoints.

Invariants:
    - HistoryCreate requires all six outcome values
    - Range is checked against configured bounds in the route, not here
"""

from datetime import datetime

from pydantic import BaseModel, StrictInt

from app.core.domain_types import OUTCOME_CATEGORIES


class HistoryCreate(BaseModel):
    """Manual history append — all six values required."""
    a1: StrictInt
    a2: StrictInt
    b1: StrictInt
    b2: StrictInt
    c1: StrictInt
    c2: StrictInt
    round_started_at: datetime | None = None
    round_id: int | None = None

    def outcomes(self) -> dict[str, int]:
        return {key: getattr(self, key) for key in OUTCOME_CATEGORIES}


class HistoryEntryResponse(BaseModel):
    id: int
    round_id: int | None
    round_started_at: str
    outcomes: dict[str, int]
