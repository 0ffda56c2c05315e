"""Broadcast Hub — WebSocket connection registry and event fan-out.

Invariants:
    - Every accepted connection gets a unique ObserverId before it can receive events
    - A failed send drops that observer; it never interrupts delivery to the others
    - broadcast iterates over a copy: observers may disconnect mid fan-out

Design Decisions:
    - Single-process registry (dict): one authoritative scheduling process,
      no cross-node pub/sub
    - Safe for the asyncio event loop without extra locking: register/unregister
      are synchronous, only sends await
"""

import logging
import uuid

from fastapi import WebSocket

from app.core.domain_types import ObserverId

logger = logging.getLogger(__name__)


class BroadcastHub:
    """Tracks connected observers and delivers JSON events to them."""

    def __init__(self):
        self._observers: dict[ObserverId, WebSocket] = {}

    async def connect(self, ws: WebSocket) -> ObserverId:
        await ws.accept()
        observer_id = ObserverId(uuid.uuid4().hex)
        self._observers[observer_id] = ws
        logger.debug(
            f"Observer connected ({self.count()} total)",
            extra={"observer_id": observer_id},
        )
        return observer_id

    def disconnect(self, observer_id: ObserverId) -> None:
        if self._observers.pop(observer_id, None) is not None:
            logger.debug(
                f"Observer disconnected ({self.count()} total)",
                extra={"observer_id": observer_id},
            )

    def count(self) -> int:
        return len(self._observers)

    def is_connected(self, observer_id: ObserverId) -> bool:
        return observer_id in self._observers

    async def send_to(self, observer_id: ObserverId, event: dict) -> None:
        """Deliver to a single observer. Unknown ids are ignored."""
        ws = self._observers.get(observer_id)
        if ws is None:
            return
        try:
            await ws.send_json(event)
        except Exception as exc:
            logger.warning(
                f"send_to failed: {exc}",
                extra={"observer_id": observer_id, "event_type": event.get("type")},
            )
            self.disconnect(observer_id)

    async def broadcast(self, event: dict) -> None:
        for observer_id, ws in list(self._observers.items()):
            try:
                await ws.send_json(event)
            except Exception as exc:
                logger.warning(
                    f"broadcast failed: {exc}",
                    extra={
                        "observer_id": observer_id,
                        "event_type": event.get("type"),
                    },
                )
                self.disconnect(observer_id)
