"""Domain layer - hub models, contracts and ports."""

from community_hub.domain.contracts import (
    ConnectionRegistryProtocol,
    HubEmitterProtocol,
    HubEventHandlerProtocol,
)
from community_hub.domain.models import CallSession, PresenceRecord, VoteTally
from community_hub.domain.ports import LabourStore, PostStore

__all__ = [
    "CallSession",
    "ConnectionRegistryProtocol",
    "HubEmitterProtocol",
    "HubEventHandlerProtocol",
    "LabourStore",
    "PostStore",
    "PresenceRecord",
    "VoteTally",
]
