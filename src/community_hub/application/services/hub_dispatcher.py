"""Routes typed inbound events to the component that owns them."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from community_hub.application.services.call_signaling import CallSignalingCoordinator
from community_hub.application.services.event_relay import EventRelay
from community_hub.application.services.presence_lifecycle import PresenceLifecycle
from community_hub.domain.contracts import HubEventHandlerProtocol
from community_hub.domain.models import InboundEvent, PresenceSyncResult, UnknownEventError
from community_hub.domain.models.hub_events import (
    INBOUND_EVENTS,
    CallAnswerEvent,
    CallEndEvent,
    CallOfferEvent,
    CallRejectEvent,
    ChatMessageEvent,
    FeedPostEvent,
    FeedVoteEvent,
    IceCandidateEvent,
    JoinEvent,
    LoanNoticeEvent,
    PaymentNoticeEvent,
    PresenceStatusEvent,
)

logger = logging.getLogger(__name__)

Handler = Callable[[str, Any], Awaitable[dict[str, Any]]]


class HubDispatcher(HubEventHandlerProtocol):
    """Exhaustive event-type → operation table.

    Construction fails if any inbound event type lacks a handler, so a new
    event cannot be added without deciding how it is routed.
    """

    def __init__(
        self,
        lifecycle: PresenceLifecycle,
        relay: EventRelay,
        calls: CallSignalingCoordinator,
    ) -> None:
        self.lifecycle = lifecycle
        self.relay = relay
        self.calls = calls
        self._handlers: dict[type[InboundEvent], Handler] = {
            JoinEvent: self._on_join,
            PresenceStatusEvent: self._on_presence_status,
            ChatMessageEvent: self._on_chat_message,
            FeedPostEvent: self._on_feed_post,
            FeedVoteEvent: self._on_feed_vote,
            PaymentNoticeEvent: self._on_payment_notice,
            LoanNoticeEvent: self._on_loan_notice,
            CallOfferEvent: self._on_call_offer,
            CallAnswerEvent: self._on_call_answer,
            CallRejectEvent: self._on_call_reject,
            CallEndEvent: self._on_call_end,
            IceCandidateEvent: self._on_ice_candidate,
        }
        missing = set(INBOUND_EVENTS.values()) - set(self._handlers)
        if missing:
            names = sorted(model.event_name.value for model in missing)
            raise TypeError(f"No handler registered for events: {names}")

    async def dispatch(self, connection_id: str, event: InboundEvent) -> dict[str, Any]:
        """Run the operation for ``event`` on behalf of ``connection_id``.

        Every event except ``join`` requires the connection to have joined.

        Returns:
            Acknowledgement payload for the sender.
        """
        handler = self._handlers.get(type(event))
        if handler is None:
            raise UnknownEventError(f"Unknown event type {type(event).__name__}")
        if not isinstance(event, JoinEvent):
            self.lifecycle.require_joined(connection_id)
        return await handler(connection_id, event)

    async def connection_closed(self, connection_id: str) -> None:
        ended = await self.calls.handle_disconnect(connection_id)
        if ended:
            logger.info(f"Connection {connection_id} dropped, ended {len(ended)} call(s)")
        await self.lifecycle.leave(connection_id)

    async def sweep_stale(self, is_alive: Callable[[str], bool]) -> PresenceSyncResult:
        stale = self.lifecycle.stale_connections(is_alive)
        for connection_id in stale:
            await self.calls.handle_disconnect(connection_id)
        return await self.lifecycle.remove_connections(stale)

    async def _on_join(self, connection_id: str, event: JoinEvent) -> dict[str, Any]:
        record = await self.lifecycle.join(connection_id, event)
        return {"ok": True, "user": record.to_wire()}

    async def _on_presence_status(
        self, connection_id: str, event: PresenceStatusEvent
    ) -> dict[str, Any]:
        record = await self.lifecycle.set_status(connection_id, event.status)
        return {"ok": True, "status": record.status.value}

    async def _on_chat_message(self, connection_id: str, event: ChatMessageEvent) -> dict[str, Any]:
        await self.relay.relay_chat_message(connection_id, event)
        return {"ok": True}

    async def _on_feed_post(self, connection_id: str, event: FeedPostEvent) -> dict[str, Any]:
        await self.relay.relay_feed_post(connection_id, event)
        return {"ok": True}

    async def _on_feed_vote(self, connection_id: str, event: FeedVoteEvent) -> dict[str, Any]:
        await self.relay.relay_feed_vote(connection_id, event)
        return {"ok": True}

    async def _on_payment_notice(
        self, _connection_id: str, event: PaymentNoticeEvent
    ) -> dict[str, Any]:
        delivered = await self.relay.relay_payment_notice(event)
        return {"ok": True, "delivered": delivered}

    async def _on_loan_notice(self, _connection_id: str, event: LoanNoticeEvent) -> dict[str, Any]:
        await self.relay.relay_loan_notice(event)
        return {"ok": True}

    async def _on_call_offer(self, connection_id: str, event: CallOfferEvent) -> dict[str, Any]:
        session = await self.calls.offer(connection_id, event)
        return {
            "ok": True,
            "callId": session.call_id,
            "state": session.state.value,
            "status": session.end_reason.value if session.end_reason else session.state.value,
        }

    async def _on_call_answer(self, connection_id: str, event: CallAnswerEvent) -> dict[str, Any]:
        session = await self.calls.accept(connection_id, event)
        return {"ok": True, "callId": session.call_id, "state": session.state.value}

    async def _on_call_reject(self, connection_id: str, event: CallRejectEvent) -> dict[str, Any]:
        session = await self.calls.reject(connection_id, event)
        return {"ok": True, "callId": session.call_id, "state": session.state.value}

    async def _on_call_end(self, connection_id: str, event: CallEndEvent) -> dict[str, Any]:
        session = await self.calls.end(connection_id, event)
        return {
            "ok": True,
            "callId": session.call_id,
            "state": session.state.value,
            "durationSeconds": session.duration_seconds,
        }

    async def _on_ice_candidate(
        self, connection_id: str, event: IceCandidateEvent
    ) -> dict[str, Any]:
        delivered = await self.calls.ice_candidate(connection_id, event)
        return {"ok": True, "delivered": delivered}
