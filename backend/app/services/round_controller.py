"""Round Controller — async shell around the pure lifecycle step and completion guard.

Invariants:
    - Owns the single RoundState; nothing else mutates it
    - Every state mutation runs synchronously between awaits (one event loop)
    - Completion lock and persist-in-flight marker are published BEFORE gateway I/O
    - Every gateway call is bounded by persistence_timeout; a timeout is a failure
    - Gateway calls are shielded: a timeout stops waiting, it never cancels the write
    - Persistence failures become failure events, never exceptions out of tick()
    - A create/update result is applied only if its round is still current

Design Decisions:
    - Impureim sandwich: read clock → pure step → await hub/gateway
    - Clock and seed factory injected: tests drive ticks with fixed instants
    - History append after completion is best-effort: its failure is logged
      and never undoes the completion
"""

import asyncio
import logging
from datetime import datetime, timedelta, timezone
from functools import partial
from typing import Awaitable, Callable, TypeVar

from app.config import Settings
from app.core.completion_guard import (
    CompletionVerdict, release_completion, try_acquire_completion,
)
from app.core.domain_types import (
    EventType, LifecyclePhase, ObserverId, RoundId, RoundStatus,
)
from app.core.errors import PersistenceTimeoutError, WheelhouseError
from app.core.events import (
    completion_failed_event,
    outcome_update_event,
    round_completed_event,
    round_saved_event,
    seed_update_event,
    snapshot_event,
)
from app.core.lifecycle import advance_lifecycle
from app.core.outcome_generator import generate_seed_values
from app.core.outcome_set import OutcomeSet
from app.core.period_calculator import (
    GamePeriod, OperatingWindow, compute_game_period,
)
from app.core.repository_protocols import (
    Broadcaster, HistoryRepository, RoundRepository,
)
from app.core.round_state import RoundState

logger = logging.getLogger(__name__)

T = TypeVar("T")

_TRANSITION_EVENTS = frozenset({
    EventType.WINDOW_OPENED.value,
    EventType.ROUND_START.value,
    EventType.WINDOW_CLOSED.value,
})


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _public_error(exc: Exception) -> str:
    if isinstance(exc, WheelhouseError):
        return exc.context.user_message or exc.message
    return "Persistence failed"


def _log_late_result(operation: str, task: asyncio.Future) -> None:
    """Surface the outcome of a gateway call that finished after its timeout."""
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error(f"Late {operation} failed: {exc}")
    else:
        logger.warning(f"Late {operation} succeeded after timeout")


class RoundController:
    """Drives the round lifecycle and handles observer-originated requests."""

    def __init__(
        self,
        rounds: RoundRepository,
        history: HistoryRepository,
        hub: Broadcaster,
        window: OperatingWindow,
        round_duration: int = 60,
        outcome_min: int = 0,
        outcome_max: int = 9,
        persistence_timeout: float = 5.0,
        clock: Callable[[], datetime] = utc_now,
        seed_factory: Callable[[], dict[str, int]] | None = None,
    ):
        self._rounds = rounds
        self._history = history
        self._hub = hub
        self._window = window
        self._duration = round_duration
        self._timeout = persistence_timeout
        self._clock = clock
        self._seed_factory = seed_factory or partial(
            generate_seed_values, outcome_min, outcome_max,
        )
        self.state = RoundState(outcome_min=outcome_min, outcome_max=outcome_max)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        rounds: RoundRepository,
        history: HistoryRepository,
        hub: Broadcaster,
        **kwargs,
    ) -> "RoundController":
        return cls(
            rounds, history, hub,
            window=settings.operating_window(),
            round_duration=settings.round_duration_seconds,
            outcome_min=settings.outcome_min,
            outcome_max=settings.outcome_max,
            persistence_timeout=settings.persistence_timeout_seconds,
            **kwargs,
        )

    @property
    def round_duration(self) -> int:
        return self._duration

    def current_period(self, now: datetime | None = None) -> GamePeriod:
        return compute_game_period(now or self._clock(), self._window, self._duration)

    # --- Tick ------------------------------------------------------------------

    async def tick(self) -> list[dict]:
        """One scheduling step: compute period, advance state, fan out events."""
        now = self._clock()
        period = compute_game_period(now, self._window, self._duration)
        events = advance_lifecycle(
            self.state, period, now, self._duration, self._seed_factory,
        )
        for event in events:
            if event["type"] in _TRANSITION_EVENTS:
                logger.info(
                    f"Lifecycle transition: {event['type']}",
                    extra={
                        "event_type": event["type"],
                        "round_index": self.state.round_index,
                    },
                )
            await self._hub.broadcast(event)
        return events

    # --- Snapshot --------------------------------------------------------------

    def snapshot(self, now: datetime | None = None) -> dict:
        """Reconciliation event for one observer, from live state."""
        now = now or self._clock()
        period = compute_game_period(now, self._window, self._duration)
        state = self.state
        if state.phase is LifecyclePhase.OPEN and state.round_started_at is not None:
            time_left = state.round_time_left(
                now, self._duration, period.window_time_left_seconds,
            )
        else:
            time_left = period.round_time_left_seconds
        return snapshot_event(
            period, state.outcomes.snapshot(), state.seed.snapshot(),
            state.current_round_id, time_left,
        )

    async def send_snapshot(self, observer_id: ObserverId) -> None:
        await self._hub.send_to(observer_id, self.snapshot())

    # --- Observer inputs -------------------------------------------------------

    async def report_outcome(
        self, category: str, value: int, timestamp: str | None = None,
    ) -> None:
        """Assign one category, then re-broadcast the full set. Raises OutcomeValueError."""
        self.state.outcomes.assign(category, value)
        await self._hub.broadcast(outcome_update_event(
            self.state.outcomes.snapshot(), timestamp or self._clock().isoformat(),
        ))

    async def select_seed(
        self, values: dict[str, int], timestamp: str | None = None,
    ) -> None:
        self.state.seed.update(values)
        await self._hub.broadcast(seed_update_event(
            self.state.seed.snapshot(), timestamp or self._clock().isoformat(),
        ))

    async def persist_round(
        self,
        round_index: int,
        seed: dict[str, int] | None = None,
        observer_id: ObserverId | None = None,
    ) -> RoundId | None:
        """Create the storage row for the open round. Returns the id or None."""
        state = self.state
        if seed is not None:
            OutcomeSet(state.outcome_min, state.outcome_max).update(seed)
        rejection = self._persist_rejection(round_index)
        if rejection:
            logger.info(
                f"Persist request rejected: {rejection}",
                extra={"round_index": round_index, "observer_id": observer_id},
            )
            await self._reply(observer_id, round_saved_event(round_index, error=rejection))
            return None
        if state.current_round_id is not None:
            await self._reply(observer_id, round_saved_event(
                round_index, round_id=state.current_round_id,
            ))
            return state.current_round_id
        if state.persist_in_flight:
            logger.info(
                "Persist already in flight, request ignored",
                extra={"round_index": round_index, "observer_id": observer_id},
            )
            return None

        state.persist_in_flight = True
        started_at = state.round_started_at
        ends_at = self._round_end(started_at)
        seed_values = dict(seed) if seed is not None else state.seed.snapshot()
        try:
            round_id = await self._call_gateway(
                "create_round",
                self._rounds.create_round(
                    round_index, started_at, ends_at,
                    state.outcomes.snapshot(), RoundStatus.ACTIVE, seed_values,
                ),
            )
        except Exception as exc:
            logger.error(
                f"Round persistence failed: {exc}",
                extra={"round_index": round_index},
                exc_info=True,
            )
            if state.is_current_round(round_index, started_at):
                state.persist_in_flight = False
            await self._hub.broadcast(
                round_saved_event(round_index, error=_public_error(exc)),
            )
            return None

        if state.is_current_round(round_index, started_at):
            state.persist_in_flight = False
            state.current_round_id = round_id
        else:
            logger.warning(
                "Round changed while persisting, id not attached",
                extra={"round_id": round_id, "round_index": round_index},
            )
        await self._hub.broadcast(round_saved_event(round_index, round_id=round_id))
        return round_id

    async def complete_round(
        self, requested_round_id: int | None = None,
    ) -> CompletionVerdict:
        """Finalize the current round at most once."""
        state = self.state
        verdict = try_acquire_completion(state, requested_round_id)
        if verdict is not CompletionVerdict.ACQUIRED:
            logger.info(
                f"Completion ignored: {verdict.value}",
                extra={
                    "round_id": state.current_round_id,
                    "verdict": verdict.value,
                },
            )
            return verdict

        round_id = state.current_round_id
        round_index = state.round_index
        started_at = state.round_started_at
        outcomes = state.outcomes.snapshot()
        complete = state.outcomes.is_complete
        try:
            await self._call_gateway(
                "update_round",
                self._rounds.update_round(round_id, outcomes, RoundStatus.COMPLETED),
            )
        except Exception as exc:
            logger.error(
                f"Round completion failed: {exc}",
                extra={"round_id": round_id, "round_index": round_index},
                exc_info=True,
            )
            release_completion(state, round_id)
            await self._hub.broadcast(
                completion_failed_event(round_id, _public_error(exc)),
            )
            return CompletionVerdict.FAILED

        if state.current_round_id == round_id:
            state.outcomes.reset()
            state.current_round_id = None
        logger.info(
            "Round completed",
            extra={"round_id": round_id, "round_index": round_index},
        )
        await self._hub.broadcast(
            round_completed_event(round_index, round_id, outcomes),
        )
        if complete:
            await self._append_history(round_id, started_at, outcomes)
        else:
            logger.info(
                "History skipped: outcome set incomplete",
                extra={"round_id": round_id},
            )
        return CompletionVerdict.COMPLETED

    # --- Helpers ---------------------------------------------------------------

    def _persist_rejection(self, round_index: int) -> str | None:
        state = self.state
        if state.phase is not LifecyclePhase.OPEN:
            return "Operating window is closed"
        if state.round_index != round_index:
            return f"Round {round_index} is not the active round"
        lock = state.completion_lock
        if lock.completed and lock.round_id is not None:
            return f"Round {round_index} is already completed"
        return None

    def _round_end(self, started_at: datetime) -> datetime:
        local_day = started_at.astimezone(self._window.tz).date()
        _, window_end = self._window.bounds_on(local_day)
        return min(started_at + timedelta(seconds=self._duration), window_end)

    async def _call_gateway(self, operation: str, call: Awaitable[T]) -> T:
        task = asyncio.ensure_future(call)
        try:
            return await asyncio.wait_for(asyncio.shield(task), self._timeout)
        except asyncio.TimeoutError:
            task.add_done_callback(partial(_log_late_result, operation))
            raise PersistenceTimeoutError(operation, self._timeout)

    async def _reply(self, observer_id: ObserverId | None, event: dict) -> None:
        if observer_id is not None:
            await self._hub.send_to(observer_id, event)

    async def _append_history(
        self, round_id: RoundId, started_at: datetime, outcomes: dict,
    ) -> None:
        try:
            await self._call_gateway(
                "append_history",
                self._history.append(started_at, outcomes, round_id=round_id),
            )
        except Exception as exc:
            logger.error(
                f"History append failed: {exc}",
                extra={"round_id": round_id},
                exc_info=True,
            )
