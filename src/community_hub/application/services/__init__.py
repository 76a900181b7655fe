"""Application services for the community hub."""

from community_hub.application.services.call_signaling import CallSignalingCoordinator
from community_hub.application.services.event_relay import EventRelay
from community_hub.application.services.hub_dispatcher import HubDispatcher
from community_hub.application.services.labour_slots import LabourSlots
from community_hub.application.services.loan_claims import LoanClaims
from community_hub.application.services.presence_lifecycle import PresenceLifecycle
from community_hub.application.services.vote_counter import VoteCounter

__all__ = [
    "CallSignalingCoordinator",
    "EventRelay",
    "HubDispatcher",
    "LabourSlots",
    "LoanClaims",
    "PresenceLifecycle",
    "VoteCounter",
]
