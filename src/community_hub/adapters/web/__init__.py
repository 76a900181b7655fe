"""Web adapters: HTTP API, rate limiting and the ASGI server."""

from community_hub.adapters.web.http_api import CommunityHttpApi
from community_hub.adapters.web.hub_server import HubWebServer
from community_hub.adapters.web.rate_limit_middleware import RateLimitMiddleware

__all__ = ["CommunityHttpApi", "HubWebServer", "RateLimitMiddleware"]
