"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - RoundId wraps the integer id assigned by storage — the only stable round identity
    - round_index is NOT an identity: it repeats every window and every day
    - OUTCOME_CATEGORIES is the single source of truth for category keys
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders (event payloads are JSON)
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

RoundId = NewType("RoundId", int)
HistoryEntryId = NewType("HistoryEntryId", int)
ObserverId = NewType("ObserverId", str)


# ─── Value Types ─────────────────────────────────────────────────

OUTCOME_CATEGORIES: tuple[str, ...] = ("a1", "a2", "b1", "b2", "c1", "c2")


# ─── Enums ───────────────────────────────────────────────────────

class RoundStatus(str, Enum):
    """Persisted round states — maps to DB `status` column."""
    ACTIVE = "active"
    COMPLETED = "completed"


class LifecyclePhase(str, Enum):
    """Controller state machine: closed outside the window, open inside."""
    CLOSED = "closed"
    OPEN = "open"


class EventType(str, Enum):
    """Outbound event names delivered to observers."""
    WINDOW_OPENED = "window-opened"
    ROUND_START = "round-start"
    ROUND_TIMER = "round-timer"
    OUTCOME_UPDATE = "outcome-update"
    SEED_UPDATE = "seed-update"
    ROUND_COMPLETED = "round-completed"
    COMPLETION_FAILED = "completion-failed"
    WINDOW_CLOSED = "window-closed"
    CLOSED_TIMER = "closed-timer"
    ROUND_SAVED = "round-saved"
    SNAPSHOT = "snapshot"
    ERROR = "error"


class InboundType(str, Enum):
    """Observer-originated message types."""
    REQUEST_SNAPSHOT = "request-snapshot"
    REPORT_OUTCOME = "report-outcome"
    SELECT_SEED = "select-seed"
    REQUEST_PERSIST_ROUND = "request-persist-round"
    REQUEST_COMPLETE_ROUND = "request-complete-round"
