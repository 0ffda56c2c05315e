"""Round Socket — WebSocket channel end to end with Starlette's TestClient.

Design Decisions:
    - TestClient used without its context manager: no lifespan, so no tick
      driver and no database; the runtime is installed on fakes per test
"""

import pytest
from fastapi.testclient import TestClient

from app.api.dependencies import install_runtime
from app.infrastructure.broadcast_hub import BroadcastHub
from app.main import app
from app.services.round_controller import RoundController


@pytest.fixture
def socket_client(rounds, history, window, clock):
    hub = BroadcastHub()
    controller = RoundController(
        rounds, history, hub, window, clock=clock,
        seed_factory=lambda: {"a1": 0, "a2": 0, "b1": 0, "b2": 0, "c1": 0, "c2": 0},
    )
    install_runtime(app, controller, hub)
    return TestClient(app)


def test_snapshot_on_connect(socket_client):
    with socket_client.websocket_connect("/api/v1/socket") as ws:
        message = ws.receive_json()
    assert message["type"] == "snapshot"
    assert message["data"]["period"]["round_index"] == 2


def test_malformed_frame_answered_and_socket_stays_open(socket_client):
    with socket_client.websocket_connect("/api/v1/socket") as ws:
        ws.receive_json()
        ws.send_text("not json")
        error = ws.receive_json()
        ws.send_json({"type": "request-snapshot"})
        snapshot = ws.receive_json()
    assert error["type"] == "error"
    assert error["data"]["code"] == "INVALID_EVENT"
    assert snapshot["type"] == "snapshot"


def test_outcome_report_broadcast_to_all(socket_client):
    with socket_client.websocket_connect("/api/v1/socket") as first:
        first.receive_json()
        with socket_client.websocket_connect("/api/v1/socket") as second:
            second.receive_json()
            first.send_json({"type": "report-outcome", "category": "a1", "value": 4})
            seen_by_first = first.receive_json()
            seen_by_second = second.receive_json()
    assert seen_by_first["type"] == seen_by_second["type"] == "outcome-update"
    assert seen_by_second["data"]["outcomes"]["a1"] == 4
