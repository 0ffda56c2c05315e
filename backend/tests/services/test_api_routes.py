"""HTTP Routes — health probes, game period snapshot and history endpoints."""

import app.infrastructure.database as db_module


async def test_liveness(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json()["service"] == "wheelhouse-api"


async def test_readiness_with_database(client):
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"]["database"] == "healthy"


async def test_readiness_without_database(client, monkeypatch):
    monkeypatch.setattr(db_module, "db_manager", None)
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 503


async def test_game_period_reflects_controller(client, controller):
    await controller.tick()
    await controller.report_outcome("a1", 4)

    res = await client.get("/api/v1/game/period")

    body = res.json()
    assert res.status_code == 200
    assert body["period"]["is_active"] is True
    assert body["period"]["round_index"] == 2
    assert body["outcomes"]["a1"] == 4
    assert body["round_id"] is None


async def test_history_empty(client):
    res = await client.get("/api/v1/history")
    assert res.status_code == 200
    assert res.json()["entries"] == []


async def test_history_append_then_list(client):
    payload = {"a1": 1, "a2": 2, "b1": 3, "b2": 4, "c1": 5, "c2": 6}
    res = await client.post("/api/v1/history", json=payload)
    assert res.status_code == 201
    created = res.json()
    assert created["outcomes"] == payload
    assert set(created) == {"id", "round_id", "round_started_at", "outcomes"}

    listed = (await client.get("/api/v1/history")).json()["entries"]
    assert len(listed) == 1
    assert listed[0]["outcomes"] == payload


async def test_history_requires_all_values(client):
    res = await client.post("/api/v1/history", json={"a1": 1})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_history_rejects_out_of_range(client):
    payload = {"a1": 1, "a2": 2, "b1": 3, "b2": 4, "c1": 5, "c2": 60}
    res = await client.post("/api/v1/history", json=payload)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "INVALID_OUTCOME"


async def test_history_pagination_bounds(client):
    res = await client.get("/api/v1/history?limit=0")
    assert res.status_code == 400
