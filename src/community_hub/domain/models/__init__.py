"""Domain models for the community hub."""

from community_hub.domain.models.call_log_entry import CallLogEntry
from community_hub.domain.models.call_session import (
    CallEndReason,
    CallKind,
    CallLogStatus,
    CallSession,
    CallState,
)
from community_hub.domain.models.community_post import ChatMessage, CommunityPost
from community_hub.domain.models.hub_errors import (
    AlreadyAppliedError,
    CallerBusyError,
    CallNotFoundError,
    HubError,
    InvalidCallTransitionError,
    InvalidVoteError,
    JobFilledError,
    LoanNotFoundError,
    LoanUnavailableError,
    NotCallParticipantError,
    NotJoinedError,
    PostNotFoundError,
)
from community_hub.domain.models.hub_events import (
    HubEventName,
    InboundEvent,
    UnknownEventError,
    parse_inbound_event,
)
from community_hub.domain.models.labour_post import (
    ApplyResult,
    LabourPost,
    LabourPostStatus,
    LabourSlotCounter,
)
from community_hub.domain.models.loan_offer import LoanOffer, LoanStatus
from community_hub.domain.models.payment_transaction import (
    STARTING_BALANCE,
    PaymentTransaction,
    running_balance,
)
from community_hub.domain.models.presence_record import (
    PresenceRecord,
    PresenceStatus,
    PresenceSyncResult,
)
from community_hub.domain.models.vote_tally import VoteResult, VoteTally

__all__ = [
    "STARTING_BALANCE",
    "AlreadyAppliedError",
    "ApplyResult",
    "CallEndReason",
    "CallKind",
    "CallLogEntry",
    "CallLogStatus",
    "CallNotFoundError",
    "CallSession",
    "CallState",
    "CallerBusyError",
    "ChatMessage",
    "CommunityPost",
    "HubError",
    "HubEventName",
    "InboundEvent",
    "InvalidCallTransitionError",
    "InvalidVoteError",
    "JobFilledError",
    "LabourPost",
    "LabourPostStatus",
    "LabourSlotCounter",
    "LoanNotFoundError",
    "LoanOffer",
    "LoanStatus",
    "LoanUnavailableError",
    "NotCallParticipantError",
    "NotJoinedError",
    "PaymentTransaction",
    "PostNotFoundError",
    "PresenceRecord",
    "PresenceStatus",
    "PresenceSyncResult",
    "UnknownEventError",
    "VoteResult",
    "VoteTally",
    "parse_inbound_event",
    "running_balance",
]
