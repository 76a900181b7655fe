"""Tests for per-IP rate limiting in front of the community HTTP API."""

from types import SimpleNamespace

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route
from starlette.testclient import TestClient

from community_hub.adapters.web.rate_limit_middleware import (
    RateLimitMiddleware,
    extract_client_ip,
)


async def _online_users(_request: Request) -> JSONResponse:
    return JSONResponse({"data": []})


async def _healthz(_request: Request) -> Response:
    return Response(content="Ok", media_type="text/plain")


def _client(**middleware_options: object) -> TestClient:
    app = Starlette(
        routes=[
            Route("/healthz", _healthz),
            Route("/api/community/online-users", _online_users),
        ],
        middleware=[Middleware(RateLimitMiddleware, **middleware_options)],
    )
    return TestClient(app)


def _from(ip: str) -> dict[str, str]:
    return {"X-Forwarded-For": ip}


class TestQuotaPerClient:
    """Each client IP gets its own token bucket."""

    def test_request_over_quota_gets_json_429(self) -> None:
        """Given a quota of two, when a third request arrives, then a JSON 429 with Retry-After is returned."""
        client = _client(requests_per_minute=2)

        statuses = [
            client.get("/api/community/online-users", headers=_from("203.0.113.7")).status_code
            for _ in range(2)
        ]
        limited = client.get("/api/community/online-users", headers=_from("203.0.113.7"))

        assert statuses == [200, 200]
        assert limited.status_code == 429
        assert limited.json() == {
            "error": "rate-limited",
            "message": "Rate limit exceeded. Please try again later.",
        }
        assert int(limited.headers["Retry-After"]) > 0

    def test_other_clients_keep_their_own_quota(self) -> None:
        """Given one IP over quota, when another IP calls, then it is served."""
        client = _client(requests_per_minute=1)
        client.get("/api/community/online-users", headers=_from("203.0.113.7"))

        blocked = client.get("/api/community/online-users", headers=_from("203.0.113.7"))
        other = client.get("/api/community/online-users", headers=_from("198.51.100.20"))

        assert blocked.status_code == 429
        assert other.status_code == 200

    def test_proxy_chain_counts_against_the_originating_client(self) -> None:
        """Given requests relayed through a proxy, when the first hop matches, then they share one quota."""
        client = _client(requests_per_minute=1)
        client.get("/api/community/online-users", headers=_from("203.0.113.7"))

        relayed = client.get(
            "/api/community/online-users", headers=_from("203.0.113.7, 10.0.0.1")
        )

        assert relayed.status_code == 429


class TestUnlimitedRequests:
    """Requests that are never counted."""

    def test_zero_requests_per_minute_disables_limiting(self) -> None:
        """Given a limit of zero, when sending many requests, then none are refused."""
        client = _client(requests_per_minute=0)

        statuses = {client.get("/api/community/online-users").status_code for _ in range(20)}

        assert statuses == {200}

    def test_health_check_is_exempt_by_default(self) -> None:
        """Given an exhausted quota, when checking health, then the check still answers."""
        client = _client(requests_per_minute=1)
        client.get("/api/community/online-users", headers=_from("203.0.113.7"))

        responses = [client.get("/healthz", headers=_from("203.0.113.7")) for _ in range(3)]

        assert [r.text for r in responses] == ["Ok", "Ok", "Ok"]

    def test_configured_exempt_paths_replace_the_default(self) -> None:
        """Given online-users marked exempt, when calling it repeatedly, then it is never limited."""
        client = _client(requests_per_minute=1, exempt_paths=["/api/community/online-users"])

        statuses = {client.get("/api/community/online-users").status_code for _ in range(5)}
        health = [client.get("/healthz").status_code for _ in range(2)]

        assert statuses == {200}
        assert health == [200, 429]


class TestRetryAfter:
    """Retry-After comes from the limiter state when it reports one."""

    def test_state_value_is_used(self) -> None:
        """Given a limiter result asking for 12.5s, when reading it, then 12.5 is returned."""
        middleware = RateLimitMiddleware(app=_healthz, requests_per_minute=5)

        result = SimpleNamespace(limited=True, state=SimpleNamespace(retry_after=12.5))

        assert middleware._retry_after(result) == 12.5

    def test_missing_or_zero_value_falls_back_to_a_minute(self) -> None:
        """Given no usable retry hint, when reading it, then one minute is assumed."""
        middleware = RateLimitMiddleware(app=_healthz, requests_per_minute=5)

        assert middleware._retry_after(SimpleNamespace(limited=True)) == 60.0
        no_hint = SimpleNamespace(state=SimpleNamespace(retry_after=0))
        assert middleware._retry_after(no_hint) == 60.0


class TestClientIdentity:
    """The client IP doubles as the anonymous voter and applicant identity."""

    def test_request_without_peer_or_proxy_header_is_unknown(self) -> None:
        """Given a request with no client address, when identifying it, then 'unknown' is used."""
        request = Request({"type": "http", "headers": [], "client": None})

        assert extract_client_ip(request) == "unknown"

    def test_blank_forwarded_header_falls_back_to_peer(self) -> None:
        """Given a blank X-Forwarded-For, when identifying the request, then the peer address is used."""
        request = Request(
            {
                "type": "http",
                "headers": [(b"x-forwarded-for", b" , 10.0.0.1")],
                "client": ("192.0.2.44", 51000),
            }
        )

        assert extract_client_ip(request) == "192.0.2.44"
