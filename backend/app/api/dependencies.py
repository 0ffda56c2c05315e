"""Runtime Wiring — per-process controller, hub and dispatch attached to app.state.

Invariants:
    - install_runtime is the only writer of app.state.controller/hub/dispatch
    - Routes read the runtime through these getters, never through module globals

Design Decisions:
    - app.state over module-level singletons: tests install a runtime built on
      fakes without patching imports
"""

from fastapi import FastAPI, Request, WebSocket

from app.infrastructure.broadcast_hub import BroadcastHub
from app.services.inbound_dispatch import InboundDispatch
from app.services.round_controller import RoundController


def install_runtime(
    app: FastAPI, controller: RoundController, hub: BroadcastHub,
) -> InboundDispatch:
    dispatch = InboundDispatch(controller, hub)
    app.state.controller = controller
    app.state.hub = hub
    app.state.dispatch = dispatch
    return dispatch


def get_controller(request: Request) -> RoundController:
    return request.app.state.controller


def socket_runtime(
    ws: WebSocket,
) -> tuple[RoundController, BroadcastHub, InboundDispatch]:
    state = ws.app.state
    return state.controller, state.hub, state.dispatch
