"""Background pollers for the web adapter."""

from community_hub.adapters.web.pollers.stale_connection_sweeper import StaleConnectionSweeper

__all__ = ["StaleConnectionSweeper"]
