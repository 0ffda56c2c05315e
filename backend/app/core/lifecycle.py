"""Round Lifecycle — one tick of the closed/open state machine.

Invariants:
    - advance_lifecycle mutates only the RoundState it is given; returns events, never sends them
    - closed → open emits window-opened BEFORE the first round-start of the window
    - Any round_index change (first one included) starts a new round
    - Countdown comes from the recorded start instant, not from the period formula
    - open → closed emits window-closed BEFORE the first closed-timer

Design Decisions:
    - Pure step + async shell (RoundController): ticks are testable with fixed instants
      and no event loop
    - seed_factory injected: the step never touches `random` itself
"""

from datetime import datetime
from typing import Callable

from app.core.domain_types import LifecyclePhase
from app.core.events import (
    closed_timer_event,
    round_start_event,
    round_timer_event,
    window_closed_event,
    window_opened_event,
)
from app.core.period_calculator import GamePeriod
from app.core.round_state import RoundState


def advance_lifecycle(
    state: RoundState,
    period: GamePeriod,
    now: datetime,
    round_duration: int,
    seed_factory: Callable[[], dict[str, int]],
) -> list[dict]:
    """Apply one tick's GamePeriod to `state`. Returns events to broadcast."""
    if period.is_active:
        return _advance_open(state, period, now, round_duration, seed_factory)
    return _advance_closed(state, period)


def _advance_open(state, period, now, round_duration, seed_factory):
    events = []
    if state.phase is LifecyclePhase.CLOSED:
        state.open_window()
        events.append(window_opened_event(
            period, state.outcomes.snapshot(), state.current_round_id,
        ))

    if state.round_index != period.round_index:
        state.begin_round(period.round_index, now, seed_factory())
        events.append(round_start_event(
            period.round_index, round_duration,
            state.seed.snapshot(), round_duration,
        ))

    events.append(round_timer_event(
        state.round_index,
        state.round_time_left(now, round_duration, period.window_time_left_seconds),
    ))
    return events


def _advance_closed(state, period):
    events = []
    if state.phase is LifecyclePhase.OPEN:
        state.close_window()
        events.append(window_closed_event(period))
    events.append(closed_timer_event(period))
    return events
