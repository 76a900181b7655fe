"""Contracts (protocols) between hub components and the transport."""

from community_hub.domain.contracts.connection_registry import ConnectionRegistryProtocol
from community_hub.domain.contracts.hub_emitter import HubEmitterProtocol
from community_hub.domain.contracts.hub_event_handler import HubEventHandlerProtocol

__all__ = [
    "ConnectionRegistryProtocol",
    "HubEmitterProtocol",
    "HubEventHandlerProtocol",
]
