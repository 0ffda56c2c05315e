"""Inbound Observer Messages — Pydantic models validating WebSocket input at the boundary.

Invariants:
    - Every message carries a `type` discriminator from InboundType
    - Category keys are restricted to the known outcome categories
    - Values must be real JSON integers (no bools, floats or numeric strings)
    - Range checks are NOT done here: bounds come from Settings and are
      enforced by OutcomeSet, so one rule covers every entry point

Design Decisions:
    - Literal discriminator + TypeAdapter over a hand-written type switch:
      Pydantic reports the offending field for free
    - Unknown extra fields ignored: older clients send extra keys
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, StrictInt, TypeAdapter

OutcomeCategory = Literal["a1", "a2", "b1", "b2", "c1", "c2"]


class RequestSnapshot(BaseModel):
    """Ask for the current state; answered to the requester only."""
    type: Literal["request-snapshot"]


class ReportOutcome(BaseModel):
    type: Literal["report-outcome"]
    category: OutcomeCategory
    value: StrictInt
    timestamp: str | None = Field(None, max_length=64)


class SelectSeed(BaseModel):
    type: Literal["select-seed"]
    values: dict[OutcomeCategory, StrictInt] = Field(min_length=1)
    timestamp: str | None = Field(None, max_length=64)


class RequestPersistRound(BaseModel):
    type: Literal["request-persist-round"]
    round_index: StrictInt = Field(ge=1)
    seed: dict[OutcomeCategory, StrictInt] | None = None


class RequestCompleteRound(BaseModel):
    """round_id is optional: server state decides which round completes."""
    type: Literal["request-complete-round"]
    round_id: StrictInt | None = None


InboundMessage = Annotated[
    Union[
        RequestSnapshot,
        ReportOutcome,
        SelectSeed,
        RequestPersistRound,
        RequestCompleteRound,
    ],
    Field(discriminator="type"),
]

inbound_adapter: TypeAdapter[InboundMessage] = TypeAdapter(InboundMessage)
