"""Round State — the single owned struct for all mutable round/outcome/lock state.

Invariants:
    - phase == CLOSED implies round_index, round_started_at and current_round_id are None
    - begin_round resets outcomes, seed, current_round_id and the completion lock together
    - CompletionLock.completed implies CompletionLock.round_id names the finalized round
    - The lock is reset on new round / window open, NEVER on completion failure
      (failure uses release_completion in completion_guard, which is a rollback)

Design Decisions:
    - Dataclass with mutating methods, no IO, no async: every mutation is a single
      synchronous step on the event loop, so no mutex is needed
    - Owned by RoundController and passed by reference into lifecycle and guard
      functions (no module-level globals)
"""

import math
from dataclasses import dataclass, field
from datetime import datetime

from app.core.domain_types import LifecyclePhase, RoundId
from app.core.outcome_set import OutcomeSet


@dataclass
class CompletionLock:
    """Single-slot at-most-once marker for the most recent round."""

    completed: bool = False
    round_id: RoundId | None = None

    def reset(self) -> None:
        self.completed = False
        self.round_id = None


@dataclass
class RoundState:
    """Per-process round state — pure dataclass, no IO."""

    outcome_min: int = 0
    outcome_max: int = 9

    phase: LifecyclePhase = LifecyclePhase.CLOSED
    round_index: int | None = None
    round_started_at: datetime | None = None
    current_round_id: RoundId | None = None

    outcomes: OutcomeSet = field(init=False, default_factory=OutcomeSet)
    seed: OutcomeSet = field(init=False, default_factory=OutcomeSet)
    completion_lock: CompletionLock = field(default_factory=CompletionLock)

    # Set before the create call is awaited, like the lock
    persist_in_flight: bool = False

    def __post_init__(self):
        self.outcomes = OutcomeSet(self.outcome_min, self.outcome_max)
        self.seed = OutcomeSet(self.outcome_min, self.outcome_max)

    # --- Transitions -----------------------------------------------------------

    def open_window(self) -> None:
        self.phase = LifecyclePhase.OPEN
        self.completion_lock.reset()

    def begin_round(
        self, round_index: int, started_at: datetime, seed: dict[str, int],
    ) -> None:
        self.round_index = round_index
        self.round_started_at = started_at
        self.current_round_id = None
        self.persist_in_flight = False
        self.outcomes.reset()
        self.seed.reset()
        self.seed.update(seed)
        self.completion_lock.reset()

    def close_window(self) -> None:
        self.phase = LifecyclePhase.CLOSED
        self.round_index = None
        self.round_started_at = None
        self.current_round_id = None
        self.persist_in_flight = False
        self.outcomes.reset()
        self.seed.reset()

    # --- Computed --------------------------------------------------------------

    def round_time_left(
        self, now: datetime, round_duration: int,
        window_time_left: int | None = None,
    ) -> int:
        """Countdown from the recorded start instant, clamped to [0, duration]."""
        if self.round_started_at is None:
            return 0
        elapsed = math.floor((now - self.round_started_at).total_seconds())
        left = min(round_duration, max(0, round_duration - elapsed))
        if window_time_left is not None:
            left = min(left, window_time_left)
        return left

    def is_current_round(self, round_index: int, started_at: datetime | None) -> bool:
        """True if (index, start) still identify the round in progress."""
        return (
            self.phase is LifecyclePhase.OPEN
            and self.round_index == round_index
            and self.round_started_at == started_at
        )
