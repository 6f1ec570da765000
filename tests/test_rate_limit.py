"""
Tests for rate limit client keying.
"""
from starlette.requests import Request
from app.config import settings
from app.middleware.rate_limit import get_client_ip


def make_request(forwarded_for=None, client_host="10.0.0.1"):
    headers = []
    if forwarded_for:
        headers.append((b"x-forwarded-for", forwarded_for.encode()))
    return Request({
        "type": "http",
        "method": "GET",
        "path": "/api/v1/jobs",
        "query_string": b"",
        "headers": headers,
        "client": (client_host, 50000),
    })


class TestGetClientIp:
    """Tests for get_client_ip."""

    def test_uses_socket_peer(self):
        assert get_client_ip(make_request()) == "10.0.0.1"

    def test_ignores_forwarded_for_by_default(self):
        """Rotating X-Forwarded-For must not yield a fresh bucket."""
        keys = {get_client_ip(make_request(forwarded_for=f"203.0.113.{i}")) for i in range(5)}

        assert keys == {"10.0.0.1"}

    def test_trusted_proxy_uses_first_hop(self, monkeypatch):
        monkeypatch.setattr(settings, "RATE_LIMIT_TRUST_FORWARDED_FOR", True)

        request = make_request(forwarded_for="203.0.113.7, 10.0.0.2")

        assert get_client_ip(request) == "203.0.113.7"
