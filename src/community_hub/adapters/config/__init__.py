"""Configuration adapters."""

from community_hub.adapters.config.app_config import AppConfig

__all__ = ["AppConfig"]
