"""Period Calculator — pure wall-clock → GamePeriod mapping for the daily operating window.

Invariants:
    - compute_game_period is PURE: same (now, window, duration) → same GamePeriod
    - Window is half-open [start, end): the instant at start is open, at end is closed
    - round_index = floor(elapsed / duration) + 1, 1-based, recomputed (never stored)
    - round_time_left_seconds ∈ [0, duration] and never exceeds window_time_left_seconds
    - All differences taken between UTC instants (aware subtraction with a shared
      tzinfo ignores utcoffset changes)

Design Decisions:
    - OperatingWindow holds time-of-day values + tzinfo: boundaries rebuilt per call
      for the local date of `now`, so DST-observing zones still get wall-clock starts
    - Seconds are floored (never rounded): a countdown never shows time it doesn't have
"""

import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo

from app.core.errors import ConfigurationError


@dataclass(frozen=True)
class OperatingWindow:
    """Daily window [start, end) in a fixed reference timezone."""

    start: time
    end: time
    tz: tzinfo = timezone.utc

    def __post_init__(self):
        if self.start >= self.end:
            raise ConfigurationError(
                f"Window start {self.start.isoformat()} must precede "
                f"end {self.end.isoformat()}",
            )

    def bounds_on(self, day: date) -> tuple[datetime, datetime]:
        """Start and end of the window on `day`, as UTC instants."""
        start = datetime.combine(day, self.start, tzinfo=self.tz)
        end = datetime.combine(day, self.end, tzinfo=self.tz)
        return start.astimezone(timezone.utc), end.astimezone(timezone.utc)


@dataclass(frozen=True)
class GamePeriod:
    """Snapshot of where `as_of` falls relative to the operating window."""

    is_active: bool
    round_index: int | None
    round_time_left_seconds: int
    window_time_left_seconds: int | None
    next_window_start: datetime | None
    seconds_until_next_window: int | None
    window_start: datetime
    window_end: datetime
    as_of: datetime

    def to_payload(self) -> dict:
        """JSON-ready dict for event payloads."""
        return {
            "is_active": self.is_active,
            "round_index": self.round_index,
            "round_time_left_seconds": self.round_time_left_seconds,
            "window_time_left_seconds": self.window_time_left_seconds,
            "next_window_start": (
                self.next_window_start.isoformat()
                if self.next_window_start else None
            ),
            "seconds_until_next_window": self.seconds_until_next_window,
            "window_start": self.window_start.isoformat(),
            "window_end": self.window_end.isoformat(),
            "as_of": self.as_of.isoformat(),
        }


def _floor_seconds(delta: timedelta) -> int:
    return math.floor(delta.total_seconds())


def compute_game_period(
    now: datetime, window: OperatingWindow, round_duration: int,
) -> GamePeriod:
    """Map an aware instant to the current GamePeriod. Pure, no IO."""
    if now.tzinfo is None:
        raise ValueError("compute_game_period requires a timezone-aware instant")
    if round_duration <= 0:
        raise ConfigurationError(
            f"Round duration must be positive, got {round_duration}",
        )

    now_utc = now.astimezone(timezone.utc)
    local_day = now.astimezone(window.tz).date()
    start, end = window.bounds_on(local_day)

    if start <= now_utc < end:
        elapsed = _floor_seconds(now_utc - start)
        window_left = max(0, _floor_seconds(end - now_utc))
        round_left = max(0, round_duration - elapsed % round_duration)
        return GamePeriod(
            is_active=True,
            round_index=elapsed // round_duration + 1,
            round_time_left_seconds=min(round_left, window_left),
            window_time_left_seconds=window_left,
            next_window_start=None,
            seconds_until_next_window=None,
            window_start=start,
            window_end=end,
            as_of=now_utc,
        )

    if now_utc < start:
        next_start = start
    else:
        next_start, _ = window.bounds_on(local_day + timedelta(days=1))
    return GamePeriod(
        is_active=False,
        round_index=None,
        round_time_left_seconds=0,
        window_time_left_seconds=None,
        next_window_start=next_start,
        seconds_until_next_window=max(0, _floor_seconds(next_start - now_utc)),
        window_start=start,
        window_end=end,
        as_of=now_utc,
    )
