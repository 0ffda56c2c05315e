"""Completion Guard — at-most-once finalization per round id.

Invariants:
    - try_acquire_completion checks AND sets the lock in one synchronous call:
      no await can interleave, so a concurrent second caller sees the lock
    - The lock is published BEFORE any persistence I/O starts
    - release_completion only rolls back a lock that still names the given round
      (a new round may already have reset it while the I/O was in flight)
    - No current round id → NO_ACTIVE_ROUND and the lock is left untouched

Design Decisions:
    - Verdict enum over bool: the shell logs *why* a request was ignored
    - Pure functions over RoundState, no IO — the async part lives in RoundController
"""

from enum import Enum

from app.core.round_state import RoundState


class CompletionVerdict(str, Enum):
    """Outcome of a completion request, as seen by the caller."""
    NO_ACTIVE_ROUND = "no_active_round"
    STALE_REQUEST = "stale_request"
    ALREADY_COMPLETED = "already_completed"
    ACQUIRED = "acquired"
    COMPLETED = "completed"
    FAILED = "failed"


def try_acquire_completion(
    state: RoundState, requested_round_id: int | None = None,
) -> CompletionVerdict:
    """Check-and-set the completion lock. Pure state mutation, never awaits."""
    round_id = state.current_round_id
    if round_id is None:
        return CompletionVerdict.NO_ACTIVE_ROUND
    if requested_round_id is not None and requested_round_id != round_id:
        return CompletionVerdict.STALE_REQUEST

    lock = state.completion_lock
    if lock.completed and lock.round_id == round_id:
        return CompletionVerdict.ALREADY_COMPLETED

    lock.completed = True
    lock.round_id = round_id
    return CompletionVerdict.ACQUIRED


def release_completion(state: RoundState, round_id: int) -> bool:
    """Roll back after a failed persist. Returns False if the lock moved on."""
    lock = state.completion_lock
    if lock.round_id != round_id:
        return False
    lock.reset()
    return True
