"""Inbound Dispatch — validates observer messages and routes them to the controller.

Invariants:
    - Every message → handler mapping is visible — no getattr magic, no auto-discovery
    - A malformed or unknown message mutates nothing and answers the sender
      with an `error` event (never broadcast)
    - Domain rejections (out-of-range outcome) are answered the same way
    - Infrastructure errors are not caught here: the controller already turns
      persistence failures into events

Design Decisions:
    - Explicit dict over getattr: every mapping visible in one place
    - parse_inbound is a plain function so the WebSocket route and tests share it
"""

import json
import logging

from pydantic import ValidationError

from app.core.domain_types import InboundType, ObserverId
from app.core.errors import InboundEventError, OutcomeValueError
from app.core.repository_protocols import Broadcaster
from app.schemas.inbound import (
    InboundMessage,
    ReportOutcome,
    RequestCompleteRound,
    RequestPersistRound,
    RequestSnapshot,
    SelectSeed,
    inbound_adapter,
)
from app.services.round_controller import RoundController

logger = logging.getLogger(__name__)


def parse_inbound(raw: str | bytes | dict) -> InboundMessage:
    """Decode and validate one observer message. Raises InboundEventError."""
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise InboundEventError("Message is not valid JSON")
    if not isinstance(raw, dict):
        raise InboundEventError("Message must be a JSON object")
    try:
        return inbound_adapter.validate_python(raw)
    except ValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(loc) for loc in first["loc"]) or None
        raise InboundEventError(
            f"Invalid message: {first['msg']}", field=field,
        )


class InboundDispatch:
    """Routes inbound message type → controller call. Explicit registration."""

    def __init__(self, controller: RoundController, hub: Broadcaster):
        self._controller = controller
        self._hub = hub

        # Every mapping explicit; a new message type means editing this dict
        self._handlers = {
            InboundType.REQUEST_SNAPSHOT.value: self._request_snapshot,
            InboundType.REPORT_OUTCOME.value: self._report_outcome,
            InboundType.SELECT_SEED.value: self._select_seed,
            InboundType.REQUEST_PERSIST_ROUND.value: self._request_persist_round,
            InboundType.REQUEST_COMPLETE_ROUND.value: self._request_complete_round,
        }

    async def handle(self, observer_id: ObserverId, raw: str | bytes | dict) -> None:
        try:
            message = parse_inbound(raw)
            await self._handlers[message.type](observer_id, message)
        except (InboundEventError, OutcomeValueError) as exc:
            logger.warning(
                f"Inbound message rejected: {exc.message}",
                extra={"observer_id": observer_id, "error_code": exc.code},
            )
            await self._hub.send_to(observer_id, exc.to_event())

    async def _request_snapshot(
        self, observer_id: ObserverId, message: RequestSnapshot,
    ) -> None:
        await self._controller.send_snapshot(observer_id)

    async def _report_outcome(
        self, observer_id: ObserverId, message: ReportOutcome,
    ) -> None:
        await self._controller.report_outcome(
            message.category, message.value, message.timestamp,
        )

    async def _select_seed(
        self, observer_id: ObserverId, message: SelectSeed,
    ) -> None:
        await self._controller.select_seed(dict(message.values), message.timestamp)

    async def _request_persist_round(
        self, observer_id: ObserverId, message: RequestPersistRound,
    ) -> None:
        await self._controller.persist_round(
            message.round_index,
            dict(message.seed) if message.seed is not None else None,
            observer_id=observer_id,
        )

    async def _request_complete_round(
        self, observer_id: ObserverId, message: RequestCompleteRound,
    ) -> None:
        await self._controller.complete_round(message.round_id)
