"""In-memory presence adapters."""

from community_hub.adapters.presence.connection_registry import ConnectionRegistry

__all__ = ["ConnectionRegistry"]
