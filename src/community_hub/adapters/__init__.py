"""Adapters layer - external system integrations."""

from community_hub.adapters.config import AppConfig
from community_hub.adapters.presence import ConnectionRegistry

__all__ = ["AppConfig", "ConnectionRegistry"]
