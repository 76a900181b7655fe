"""Routing of chat, feed, payment and loan events."""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from community_hub.domain.contracts import ConnectionRegistryProtocol, HubEmitterProtocol
from community_hub.domain.models import ChatMessage, HubEventName
from community_hub.domain.models.hub_events import (
    ChatMessageEvent,
    FeedPostEvent,
    FeedVoteEvent,
    LoanNoticeEvent,
    PaymentNoticeEvent,
)
from community_hub.domain.ports import MessageStore

logger = logging.getLogger(__name__)


class EventRelay:
    """Fans events out to other connections.

    The relay never stores anything it depends on: feed posts and votes are
    already durable when their events arrive, chat history is best-effort.
    A recipient that is not connected is an expected outcome, not an error.
    """

    def __init__(
        self,
        registry: ConnectionRegistryProtocol,
        emitter: HubEmitterProtocol,
        message_store: MessageStore | None = None,
    ) -> None:
        self.registry = registry
        self.emitter = emitter
        self.message_store = message_store

    async def relay_chat_message(self, sender_connection_id: str, event: ChatMessageEvent) -> None:
        await self.emitter.broadcast(
            HubEventName.CHAT_MESSAGE.value,
            event.to_wire(),
            skip_connection_id=sender_connection_id,
        )
        await self._persist_chat_message(event)

    async def relay_feed_post(self, sender_connection_id: str, event: FeedPostEvent) -> None:
        await self.emitter.broadcast(
            HubEventName.FEED_POST.value, event.to_wire(), skip_connection_id=sender_connection_id
        )

    async def relay_feed_vote(self, sender_connection_id: str, event: FeedVoteEvent) -> None:
        await self.emitter.broadcast(
            HubEventName.FEED_VOTE.value, event.to_wire(), skip_connection_id=sender_connection_id
        )

    async def relay_loan_notice(self, event: LoanNoticeEvent) -> None:
        # Loan discovery is public, the sender gets it too
        await self.emitter.broadcast(HubEventName.LOAN_NOTICE.value, event.to_wire())

    async def relay_payment_notice(self, event: PaymentNoticeEvent) -> int:
        """Deliver a payment notice to every device of the recipient.

        Returns:
            Number of connections reached; 0 means the recipient is offline and
            will see the payment on their next fetch.
        """
        recipients = self.registry.find_by_logical_id(event.recipient_logical_id)
        if not recipients:
            logger.info(
                f"Payment notice for '{event.recipient_logical_id}' dropped: recipient offline"
            )
            return 0

        payload = event.to_wire()
        for record in recipients:
            await self.emitter.emit_to(
                record.connection_id, HubEventName.PAYMENT_NOTICE.value, payload
            )
        return len(recipients)

    async def _persist_chat_message(self, event: ChatMessageEvent) -> None:
        if self.message_store is None:
            return
        try:
            await self.message_store.append(
                ChatMessage(
                    author_name=event.sender_display_name,
                    content=event.text,
                    created_at=datetime.now(UTC),
                )
            )
        except Exception as e:
            logger.error(f"Chat message persist error: {e}", exc_info=True)
