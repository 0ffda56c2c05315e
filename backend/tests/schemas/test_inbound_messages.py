"""Inbound Messages — discriminated-union validation of observer frames."""

import pytest
from pydantic import ValidationError

from app.schemas.history import HistoryCreate
from app.schemas.inbound import (
    ReportOutcome, RequestCompleteRound, RequestPersistRound, SelectSeed,
    inbound_adapter,
)


def _parse(data):
    return inbound_adapter.validate_python(data)


def test_report_outcome_parsed():
    message = _parse({"type": "report-outcome", "category": "a1", "value": 4})
    assert isinstance(message, ReportOutcome)
    assert message.timestamp is None


def test_complete_round_id_optional():
    message = _parse({"type": "request-complete-round"})
    assert isinstance(message, RequestCompleteRound)
    assert message.round_id is None


def test_persist_round_with_seed():
    message = _parse({
        "type": "request-persist-round", "round_index": 3, "seed": {"b1": 5},
    })
    assert isinstance(message, RequestPersistRound)
    assert message.seed == {"b1": 5}


def test_extra_fields_ignored():
    message = _parse({"type": "request-snapshot", "client": "v1"})
    assert message.type == "request-snapshot"


@pytest.mark.parametrize("payload", [
    {"type": "report-outcome", "category": "z9", "value": 1},
    {"type": "report-outcome", "category": "a1", "value": True},
    {"type": "report-outcome", "category": "a1", "value": "4"},
    {"type": "report-outcome", "category": "a1", "value": 4.5},
    {"type": "request-persist-round", "round_index": 0},
    {"type": "select-seed", "values": {}},
    {"type": "no-such-type"},
    {"category": "a1", "value": 1},
])
def test_invalid_messages_rejected(payload):
    with pytest.raises(ValidationError):
        _parse(payload)


def test_select_seed_values():
    message = _parse({"type": "select-seed", "values": {"a2": 1, "c1": 9}})
    assert isinstance(message, SelectSeed)
    assert message.values == {"a2": 1, "c1": 9}


def test_history_create_requires_every_category():
    with pytest.raises(ValidationError):
        HistoryCreate(a1=1, a2=2, b1=3, b2=4, c1=5)
    body = HistoryCreate(a1=1, a2=2, b1=3, b2=4, c1=5, c2=6)
    assert body.outcomes() == {"a1": 1, "a2": 2, "b1": 3, "b2": 4, "c1": 5, "c2": 6}
