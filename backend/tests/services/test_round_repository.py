"""Round Repositories — SQLAlchemy gateway against in-memory SQLite.

Tests cover:
    - create_round returns storage-assigned integer ids
    - update_round writes only non-null outcomes and sets status
    - update_round on a missing row raises ResourceNotFoundError
    - History append and newest-first pagination
"""

import pytest
from sqlalchemy import select

from app.core.domain_types import OUTCOME_CATEGORIES, RoundStatus
from app.core.errors import ResourceNotFoundError
from app.infrastructure.round_repository import (
    SqlHistoryRepository, SqlRoundRepository,
)
from app.models.game_round import GameRound
from tests.clock import utc

EMPTY = {k: None for k in OUTCOME_CATEGORIES}


@pytest.fixture
def round_repo(test_manager):
    return SqlRoundRepository(lambda: test_manager)


@pytest.fixture
def history_repo(test_manager):
    return SqlHistoryRepository(lambda: test_manager)


async def _fetch(test_db, round_id):
    result = await test_db.execute(select(GameRound).where(GameRound.id == round_id))
    return result.scalar_one()


async def test_create_round_assigns_increasing_ids(round_repo):
    first = await round_repo.create_round(
        2, utc(3, 31, 5), utc(3, 32, 5), EMPTY, RoundStatus.ACTIVE,
    )
    second = await round_repo.create_round(
        2, utc(3, 31, 5, day=16), utc(3, 32, 5, day=16), EMPTY, RoundStatus.ACTIVE,
    )
    assert isinstance(first, int)
    assert second > first


async def test_create_round_stores_fields(round_repo, test_db):
    round_id = await round_repo.create_round(
        2, utc(3, 31, 5), utc(3, 32, 5), EMPTY, RoundStatus.ACTIVE,
        seed={"a1": 1, "b1": 2},
    )
    row = await _fetch(test_db, round_id)
    assert row.round_index == 2
    assert row.status == "active"
    assert row.seed == {"a1": 1, "b1": 2}
    assert row.a1 is None
    assert row.started_at.replace(tzinfo=None) == utc(3, 31, 5).replace(tzinfo=None)


async def test_update_round_writes_only_non_null(round_repo, test_session_factory):
    round_id = await round_repo.create_round(
        2, utc(3, 31, 5), utc(3, 32, 5), EMPTY, RoundStatus.ACTIVE,
    )
    await round_repo.update_round(round_id, {**EMPTY, "a1": 4}, RoundStatus.ACTIVE)
    await round_repo.update_round(round_id, {**EMPTY, "b2": 7}, RoundStatus.COMPLETED)

    async with test_session_factory() as db:
        row = await _fetch(db, round_id)
    assert (row.a1, row.b2, row.c1) == (4, 7, None)
    assert row.status == "completed"


async def test_update_missing_round_raises(round_repo):
    with pytest.raises(ResourceNotFoundError):
        await round_repo.update_round(999, EMPTY, RoundStatus.COMPLETED)


async def test_history_append_and_list_newest_first(history_repo):
    for value in (1, 2, 3):
        await history_repo.append(
            utc(3, 30 + value), {k: value for k in OUTCOME_CATEGORIES}, round_id=value,
        )

    entries = await history_repo.list_recent(limit=2)

    assert [e["round_id"] for e in entries] == [3, 2]
    assert entries[0]["outcomes"] == {k: 3 for k in OUTCOME_CATEGORIES}


async def test_history_offset(history_repo):
    for value in (1, 2, 3):
        await history_repo.append(utc(4, value), {k: value for k in OUTCOME_CATEGORIES})
    entries = await history_repo.list_recent(limit=10, offset=2)
    assert [e["outcomes"]["a1"] for e in entries] == [1]
