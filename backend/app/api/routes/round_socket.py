"""Round Socket — the observer WebSocket channel.

URL: /api/v1/socket

Connection flow:
  1. Accept and register with the BroadcastHub (observer id assigned)
  2. Send a private `snapshot` so a late joiner starts in sync
  3. Message loop: every frame goes through InboundDispatch
  4. On disconnect: unregister; nothing else to clean up

Invariants:
    - Malformed frames never close the socket: dispatch answers with `error`
"""

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from app.api.dependencies import socket_runtime

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["socket"])


@router.websocket("/socket")
async def round_socket(ws: WebSocket):
    controller, hub, dispatch = socket_runtime(ws)
    observer_id = await hub.connect(ws)
    try:
        await controller.send_snapshot(observer_id)
        while True:
            raw = await ws.receive_text()
            await dispatch.handle(observer_id, raw)
    except WebSocketDisconnect:
        pass
    finally:
        hub.disconnect(observer_id)
