"""Tests for the OAuth2 access-token cache (api.google_auth)."""

from __future__ import annotations

import asyncio
from urllib.parse import parse_qs

import httpx
import pytest

from return_claim_bot.api.google_auth import GoogleCredentials
from return_claim_bot.errors import AuthError


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now


def _credentials(handler, clock=None):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GoogleCredentials(
        client_id="cid",
        client_secret="secret",
        refresh_token="rt",
        http=http,
        token_url="https://oauth2.example.test/token",
        clock=clock or FakeClock(),
    )


class TestGetToken:
    def test_refresh_grant_body(self):
        seen = []

        def handler(request):
            seen.append(parse_qs(request.content.decode()))
            return httpx.Response(200, json={"access_token": "tok-1", "expires_in": 3600})

        creds = _credentials(handler)
        assert asyncio.run(creds.get_token()) == "tok-1"
        assert seen[0]["grant_type"] == ["refresh_token"]
        assert seen[0]["refresh_token"] == ["rt"]
        assert seen[0]["client_id"] == ["cid"]

    def test_cached_until_near_expiry(self):
        calls = []
        clock = FakeClock()

        def handler(request):
            calls.append(1)
            return httpx.Response(200, json={"access_token": "tok-{}".format(len(calls)), "expires_in": 3600})

        creds = _credentials(handler, clock)

        async def _run():
            first = await creds.get_token()
            clock.now += 3000
            second = await creds.get_token()
            clock.now += 600  # inside the expiry margin
            third = await creds.get_token()
            return first, second, third

        assert asyncio.run(_run()) == ("tok-1", "tok-1", "tok-2")
        assert creds.refresh_count == 2

    def test_concurrent_callers_share_one_refresh(self):
        calls = []

        async def handler(request):
            calls.append(1)
            for _ in range(5):
                await asyncio.sleep(0)
            return httpx.Response(200, json={"access_token": "shared", "expires_in": 3600})

        creds = _credentials(handler)

        async def _run():
            return await asyncio.gather(*(creds.get_token() for _ in range(10)))

        tokens = asyncio.run(_run())
        assert tokens == ["shared"] * 10
        assert len(calls) == 1

    def test_invalidate_forces_refresh(self):
        calls = []

        def handler(request):
            calls.append(1)
            return httpx.Response(200, json={"access_token": "tok", "expires_in": 3600})

        creds = _credentials(handler)

        async def _run():
            await creds.get_token()
            creds.invalidate()
            assert creds.valid is False
            await creds.get_token()

        asyncio.run(_run())
        assert len(calls) == 2

    def test_auth_headers(self):
        creds = _credentials(lambda r: httpx.Response(200, json={"access_token": "abc"}))
        assert asyncio.run(creds.auth_headers()) == {"Authorization": "Bearer abc"}


class TestRefreshFailures:
    def test_error_status_raises_auth_error(self):
        creds = _credentials(lambda r: httpx.Response(400, text='{"error": "invalid_grant"}'))
        with pytest.raises(AuthError) as exc_info:
            asyncio.run(creds.get_token())
        assert exc_info.value.status_code == 400
        assert "invalid_grant" in exc_info.value.message
        assert creds.valid is False

    def test_missing_access_token_raises(self):
        creds = _credentials(lambda r: httpx.Response(200, json={"expires_in": 3600}))
        with pytest.raises(AuthError):
            asyncio.run(creds.get_token())

    def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("boom", request=request)

        creds = _credentials(handler)
        with pytest.raises(AuthError) as exc_info:
            asyncio.run(creds.get_token())
        assert exc_info.value.status_code == 0
