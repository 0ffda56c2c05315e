"""Outcome Set — tests for category/range enforcement and reset semantics."""

import pytest

from app.core.domain_types import OUTCOME_CATEGORIES
from app.core.errors import OutcomeValueError
from app.core.outcome_set import OutcomeSet


def test_new_set_has_every_category_unassigned():
    outcomes = OutcomeSet()
    assert tuple(outcomes.values) == OUTCOME_CATEGORIES
    assert all(v is None for v in outcomes.values.values())
    assert not outcomes.is_complete


def test_two_reports_leave_others_null():
    outcomes = OutcomeSet()
    outcomes.assign("a1", 4)
    outcomes.assign("b2", 7)
    assert outcomes.snapshot() == {
        "a1": 4, "a2": None, "b1": None, "b2": 7, "c1": None, "c2": None,
    }
    assert outcomes.assigned == {"a1": 4, "b2": 7}


def test_unknown_category_rejected_and_not_added():
    outcomes = OutcomeSet()
    with pytest.raises(OutcomeValueError) as exc:
        outcomes.assign("d1", 3)
    assert exc.value.category_key == "d1"
    assert "d1" not in outcomes.values


@pytest.mark.parametrize("value", [-1, 10])
def test_out_of_range_rejected(value):
    outcomes = OutcomeSet()
    with pytest.raises(OutcomeValueError):
        outcomes.assign("a1", value)
    assert outcomes.values["a1"] is None


def test_bool_is_not_an_integer_outcome():
    with pytest.raises(OutcomeValueError):
        OutcomeSet().assign("a1", True)


def test_custom_bounds():
    outcomes = OutcomeSet(minimum=1, maximum=3)
    outcomes.assign("c2", 3)
    with pytest.raises(OutcomeValueError):
        outcomes.assign("c1", 0)


def test_update_is_all_or_nothing():
    outcomes = OutcomeSet()
    with pytest.raises(OutcomeValueError):
        outcomes.update({"a1": 2, "a2": 42})
    assert outcomes.values["a1"] is None


def test_reassign_overwrites_but_never_clears():
    outcomes = OutcomeSet()
    outcomes.assign("a1", 4)
    outcomes.assign("a1", 5)
    assert outcomes.values["a1"] == 5


def test_reset_clears_everything():
    outcomes = OutcomeSet()
    outcomes.update({k: 1 for k in OUTCOME_CATEGORIES})
    assert outcomes.is_complete
    outcomes.reset()
    assert outcomes.assigned == {}


def test_snapshot_is_a_copy():
    outcomes = OutcomeSet()
    snap = outcomes.snapshot()
    snap["a1"] = 9
    assert outcomes.values["a1"] is None
