"""Per-IP rate limiting for the HTTP API using throttled-py."""

import logging
from collections.abc import Awaitable, Callable, Iterable
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from throttled import RateLimiterType, Throttled, rate_limiter, store

logger = logging.getLogger(__name__)


def extract_client_ip(request: Request) -> str:
    """Extract the client IP, honouring the first hop of X-Forwarded-For.

    Also used as the anonymous voter identity when a vote carries no voter id.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        client_ip = forwarded_for.split(",")[0].strip()
        if client_ip:
            return client_ip

    if request.client and request.client.host:
        return request.client.host

    logger.warning("Could not determine client IP, using 'unknown'")
    return "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Token-bucket limit per client IP, skipping health checks."""

    def __init__(
        self,
        app: Callable,
        requests_per_minute: int = 100,
        exempt_paths: Iterable[str] = ("/healthz",),
    ) -> None:
        """Initialize rate limiting middleware.

        Args:
            app: The ASGI application to wrap.
            requests_per_minute: Requests allowed per IP per minute (0 disables limiting).
            exempt_paths: Paths that are never limited.
        """
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self.exempt_paths = frozenset(exempt_paths)
        # Every IP gets its own Throttled key against one shared store and quota
        limit = max(requests_per_minute, 1)
        self.quota = rate_limiter.per_min(limit, burst=limit)
        self.rate_limiter_store = store.MemoryStore()
        if requests_per_minute > 0:
            logger.info(f"Rate limiting enabled: {requests_per_minute} requests per minute per IP")

    def _retry_after(self, result: Any) -> float:
        state = getattr(result, "state", None)
        retry_after = getattr(state, "retry_after", None)
        return float(retry_after) if retry_after else 60.0

    def _too_many_requests(self, client_ip: str, retry_after: float) -> Response:
        logger.warning(f"Rate limit exceeded for IP {client_ip}, retry after {retry_after} seconds")
        return JSONResponse(
            {"error": "rate-limited", "message": "Rate limit exceeded. Please try again later."},
            status_code=429,
            headers={"Retry-After": str(int(retry_after))},
        )

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Process request and enforce rate limiting."""
        if self.requests_per_minute <= 0 or request.url.path in self.exempt_paths:
            return await call_next(request)

        client_ip = extract_client_ip(request)
        throttle = Throttled(
            key=client_ip,
            using=RateLimiterType.TOKEN_BUCKET.value,
            quota=self.quota,
            store=self.rate_limiter_store,
        )

        result = throttle.limit()
        if result.limited:
            return self._too_many_requests(client_ip, self._retry_after(result))

        response: Response = await call_next(request)
        return response
