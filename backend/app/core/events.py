"""Observer Event Builders — pure constructors for every outbound event.

Invariants:
    - Every event is {"type": EventType value, "data": dict} — JSON-serializable
    - Builders never read clocks or state beyond their arguments
    - Outcome/seed dicts are copied, so later mutation never leaks into a queued event
"""

from datetime import datetime

from app.core.domain_types import EventType
from app.core.period_calculator import GamePeriod


def _event(event_type: EventType, data: dict) -> dict:
    return {"type": event_type.value, "data": data}


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


# -- Tick-driven ---------------------------------------------------------------

def window_opened_event(
    period: GamePeriod, outcomes: dict, round_id: int | None,
) -> dict:
    return _event(EventType.WINDOW_OPENED, {
        "period": period.to_payload(),
        "outcomes": dict(outcomes),
        "round_id": round_id,
    })


def round_start_event(
    round_index: int, duration: int, seed: dict, round_time_left: int,
) -> dict:
    return _event(EventType.ROUND_START, {
        "round_index": round_index,
        "duration": duration,
        "seed": dict(seed),
        "round_time_left_seconds": round_time_left,
    })


def round_timer_event(round_index: int, round_time_left: int) -> dict:
    return _event(EventType.ROUND_TIMER, {
        "round_index": round_index,
        "round_time_left_seconds": round_time_left,
        "is_active": True,
    })


def window_closed_event(period: GamePeriod) -> dict:
    return _event(EventType.WINDOW_CLOSED, {
        "seconds_until_next_window": period.seconds_until_next_window,
        "next_window_start": _iso(period.next_window_start),
    })


def closed_timer_event(period: GamePeriod) -> dict:
    return _event(EventType.CLOSED_TIMER, {
        "seconds_until_next_window": period.seconds_until_next_window,
        "next_window_start": _iso(period.next_window_start),
        "is_active": False,
    })


# -- Observer-driven -----------------------------------------------------------

def outcome_update_event(outcomes: dict, timestamp: str | None) -> dict:
    return _event(EventType.OUTCOME_UPDATE, {
        "outcomes": dict(outcomes),
        "timestamp": timestamp,
    })


def seed_update_event(seed: dict, timestamp: str | None) -> dict:
    return _event(EventType.SEED_UPDATE, {
        "seed": dict(seed),
        "timestamp": timestamp,
    })


def round_saved_event(
    round_index: int | None, round_id: int | None = None,
    error: str | None = None,
) -> dict:
    data: dict = {"success": error is None, "round_index": round_index}
    if error is None:
        data["round_id"] = round_id
    else:
        data["error"] = error
    return _event(EventType.ROUND_SAVED, data)


def round_completed_event(
    round_index: int | None, round_id: int, outcomes: dict,
) -> dict:
    return _event(EventType.ROUND_COMPLETED, {
        "round_index": round_index,
        "round_id": round_id,
        "outcomes": dict(outcomes),
    })


def completion_failed_event(round_id: int, error: str) -> dict:
    return _event(EventType.COMPLETION_FAILED, {
        "round_id": round_id,
        "error": error,
    })


def snapshot_event(
    period: GamePeriod, outcomes: dict, seed: dict,
    round_id: int | None, round_time_left: int,
) -> dict:
    """Reconciliation payload for one late-joining or resyncing observer."""
    return _event(EventType.SNAPSHOT, {
        "period": period.to_payload(),
        "outcomes": dict(outcomes),
        "seed": dict(seed),
        "round_id": round_id,
        "round_time_left_seconds": round_time_left,
    })
