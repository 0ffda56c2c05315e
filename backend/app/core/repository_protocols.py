"""Boundary Protocols — contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core pure functions never call them — RoundController orchestrates the
      awaits around the pure lifecycle step and completion guard
    - The hot loop never reads rounds back: RoundRepository has no query method
"""

from datetime import datetime
from typing import Protocol

from app.core.domain_types import (
    HistoryEntryId, ObserverId, RoundId, RoundStatus,
)


class RoundRepository(Protocol):
    """Contract for round persistence — implemented by shell."""
    async def create_round(
        self,
        round_index: int,
        started_at: datetime,
        ends_at: datetime,
        outcomes: dict[str, int | None],
        status: RoundStatus,
        seed: dict[str, int | None] | None = None,
    ) -> RoundId: ...
    async def update_round(
        self,
        round_id: RoundId,
        outcomes: dict[str, int | None],
        status: RoundStatus,
    ) -> None: ...


class HistoryRepository(Protocol):
    """Contract for the append-only history log — implemented by shell."""
    async def append(
        self,
        round_started_at: datetime,
        outcomes: dict[str, int],
        round_id: RoundId | None = None,
    ) -> HistoryEntryId: ...
    async def list_recent(self, limit: int = 20, offset: int = 0) -> list[dict]: ...


class Broadcaster(Protocol):
    """Contract for observer fan-out — implemented by shell."""
    async def broadcast(self, event: dict) -> None: ...
    async def send_to(self, observer_id: ObserverId, event: dict) -> None: ...
