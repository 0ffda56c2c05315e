"""Round State — tests for transitions and the recorded-start countdown."""

from datetime import timedelta

from app.core.domain_types import LifecyclePhase
from app.core.round_state import RoundState
from tests.clock import utc

SEED = {"a1": 1, "a2": 2, "b1": 3, "b2": 4, "c1": 5, "c2": 6}


def _open_round(index=2, started_at=None):
    state = RoundState()
    state.open_window()
    state.begin_round(index, started_at or utc(3, 31, 5), SEED)
    return state


def test_new_state_is_closed_and_empty():
    state = RoundState()
    assert state.phase is LifecyclePhase.CLOSED
    assert state.round_index is None
    assert state.current_round_id is None
    assert not state.completion_lock.completed


def test_bounds_flow_into_outcome_sets():
    state = RoundState(outcome_min=1, outcome_max=3)
    assert state.outcomes.maximum == 3
    assert state.seed.minimum == 1


def test_begin_round_resets_round_scoped_state():
    state = _open_round()
    state.outcomes.assign("a1", 4)
    state.current_round_id = 12
    state.completion_lock.completed = True
    state.completion_lock.round_id = 12
    state.persist_in_flight = True

    state.begin_round(3, utc(3, 32), SEED)

    assert state.round_index == 3
    assert state.outcomes.assigned == {}
    assert state.seed.snapshot() == SEED
    assert state.current_round_id is None
    assert not state.completion_lock.completed
    assert not state.persist_in_flight


def test_close_window_clears_round_fields():
    state = _open_round()
    state.current_round_id = 5
    state.outcomes.assign("b1", 2)
    state.close_window()
    assert state.phase is LifecyclePhase.CLOSED
    assert state.round_index is None
    assert state.round_started_at is None
    assert state.current_round_id is None
    assert state.outcomes.assigned == {}
    assert state.seed.assigned == {}


def test_time_left_counts_from_recorded_start():
    state = _open_round(started_at=utc(3, 31, 5))
    assert state.round_time_left(utc(3, 31, 5), 60) == 60
    assert state.round_time_left(utc(3, 31, 6), 60) == 59
    assert state.round_time_left(utc(3, 33), 60) == 0


def test_time_left_never_exceeds_duration():
    state = _open_round(started_at=utc(3, 31, 5))
    # clock stepped backwards
    assert state.round_time_left(utc(3, 30), 60) == 60


def test_time_left_capped_by_window():
    state = _open_round(started_at=utc(15, 31, 30))
    assert state.round_time_left(utc(15, 31, 40), 60, window_time_left=20) == 20


def test_time_left_without_round_is_zero():
    assert RoundState().round_time_left(utc(4, 0), 60) == 0


def test_is_current_round_matches_index_and_start():
    start = utc(3, 31, 5)
    state = _open_round(2, start)
    assert state.is_current_round(2, start)
    assert not state.is_current_round(2, start + timedelta(seconds=1))
    assert not state.is_current_round(3, start)
    state.close_window()
    assert not state.is_current_round(2, start)
