"""Tests for RateLimitedClient error wrapping."""

import httpx
import pytest

from cashswap.exceptions import ExternalServiceError
from cashswap.infra.http.rate_limited_client import RateLimitedClient


def _client_with(handler) -> RateLimitedClient:
    client = RateLimitedClient(rate_per_second=1000.0)
    client._client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return client


class TestRateLimitedClient:
    async def test_get_passes_params(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            return httpx.Response(200, json={"ok": True})

        client = _client_with(handler)
        resp = await client.get("https://indexer.example/x", params={"token": "abc"})
        await client.close()

        assert resp.json() == {"ok": True}
        assert seen["url"] == "https://indexer.example/x?token=abc"

    async def test_transport_error_wrapped(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        client = _client_with(handler)
        with pytest.raises(ExternalServiceError, match="GET"):
            await client.get("https://indexer.example/x")
        await client.close()

    async def test_http_error_status_not_raised(self):
        client = _client_with(lambda request: httpx.Response(500))
        resp = await client.get("https://indexer.example/x")
        await client.close()
        assert resp.status_code == 500
