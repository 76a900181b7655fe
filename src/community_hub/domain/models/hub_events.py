"""Typed hub events.

Inbound events form a closed set: every wire name in ``INBOUND_EVENTS`` maps to
exactly one payload model, and ``parse_inbound_event`` is the only way a raw
transport message becomes a domain event.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from community_hub.domain.models.call_session import CallKind
from community_hub.domain.models.hub_errors import HubError
from community_hub.domain.models.presence_record import PresenceStatus


class HubEventName(str, Enum):
    """Every event name used on the wire, in both directions."""

    JOIN = "join"
    PRESENCE_STATUS = "presence-status"
    ONLINE_USERS = "online-users"
    CHAT_MESSAGE = "chat-message"
    FEED_POST = "feed-post"
    FEED_VOTE = "feed-vote"
    PAYMENT_NOTICE = "payment-notice"
    LOAN_NOTICE = "loan-notice"
    CALL_OFFER = "call-offer"
    CALL_RINGING = "call-ringing"
    CALL_STATUS = "call-status"
    CALL_ANSWER = "call-answer"
    CALL_CLAIMED = "call-claimed"
    CALL_REJECT = "call-reject"
    CALL_END = "call-end"
    ICE_CANDIDATE = "ice-candidate"
    CALL_ENDED = "call-ended"
    LABOUR_APPLIED = "labour-applied"
    HUB_ERROR = "hub-error"


class UnknownEventError(HubError):
    """The client sent an event name the hub does not handle."""

    code = "unknown-event"


class InboundEvent(BaseModel):
    """Base for client-to-hub payloads (camelCase on the wire)."""

    model_config = ConfigDict(
        frozen=True, alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    event_name: ClassVar[HubEventName]

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class _EntityEvent(InboundEvent):
    """An already-persisted entity relayed verbatim."""

    entity: dict[str, Any]

    @model_validator(mode="before")
    @classmethod
    def _wrap_entity(cls, data: Any) -> Any:
        if isinstance(data, dict) and set(data) != {"entity"}:
            return {"entity": data}
        return data

    def to_wire(self) -> dict[str, Any]:
        return dict(self.entity)


class JoinEvent(InboundEvent):
    event_name = HubEventName.JOIN

    logical_user_id: str = Field(min_length=1)
    display_name: str = Field(min_length=1)
    avatar_url: str | None = None


class PresenceStatusEvent(InboundEvent):
    event_name = HubEventName.PRESENCE_STATUS

    status: PresenceStatus


class ChatMessageEvent(InboundEvent):
    event_name = HubEventName.CHAT_MESSAGE

    text: str = Field(min_length=1)
    sender_display_name: str = "Guest"


class FeedPostEvent(_EntityEvent):
    event_name = HubEventName.FEED_POST


class FeedVoteEvent(_EntityEvent):
    event_name = HubEventName.FEED_VOTE


class PaymentNoticeEvent(InboundEvent):
    event_name = HubEventName.PAYMENT_NOTICE

    recipient_logical_id: str = Field(min_length=1)
    amount: float = Field(gt=0)
    from_display_name: str = "Guest"


class LoanNoticeEvent(_EntityEvent):
    event_name = HubEventName.LOAN_NOTICE


class CallOfferEvent(InboundEvent):
    event_name = HubEventName.CALL_OFFER

    callee_logical_id: str = Field(min_length=1)
    kind: CallKind = CallKind.AUDIO
    sdp_offer: Any


class CallAnswerEvent(InboundEvent):
    event_name = HubEventName.CALL_ANSWER

    call_id: str
    sdp_answer: Any


class CallRejectEvent(InboundEvent):
    event_name = HubEventName.CALL_REJECT

    call_id: str


class CallEndEvent(InboundEvent):
    event_name = HubEventName.CALL_END

    call_id: str


class IceCandidateEvent(InboundEvent):
    event_name = HubEventName.ICE_CANDIDATE

    call_id: str
    candidate: Any


INBOUND_EVENTS: dict[str, type[InboundEvent]] = {
    model.event_name.value: model
    for model in (
        JoinEvent,
        PresenceStatusEvent,
        ChatMessageEvent,
        FeedPostEvent,
        FeedVoteEvent,
        PaymentNoticeEvent,
        LoanNoticeEvent,
        CallOfferEvent,
        CallAnswerEvent,
        CallRejectEvent,
        CallEndEvent,
        IceCandidateEvent,
    )
}


def parse_inbound_event(name: str, data: Any) -> InboundEvent:
    """Validate a raw transport message into its typed event.

    Raises:
        UnknownEventError: ``name`` is not a client-to-hub event.
        pydantic.ValidationError: The payload does not match the event's model.
    """
    model = INBOUND_EVENTS.get(name)
    if model is None:
        raise UnknownEventError(f"Unknown event '{name}'")
    return model.model_validate(data if data is not None else {})
