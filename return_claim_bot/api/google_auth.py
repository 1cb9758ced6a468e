"""OAuth2 access-token cache for Google APIs with single-flight refresh.

WHY: Drive and Sheets calls need a short-lived access token minted from a
long-lived refresh token. Several submissions may run at once; without
coordination each would notice the expired token and refresh it
separately, racing to overwrite the cached value.

HOW: GoogleCredentials keeps the current token and its expiry. get_token()
returns it while it is fresh; otherwise the first caller takes an
asyncio.Lock and performs the refresh-token grant, and callers queued on
the lock find the new token already in place when they get it.

RULES:
- A token is treated as expired EXPIRY_MARGIN_S seconds before its expiry
- Only one refresh request is in flight at a time
- A failed refresh raises AuthError and leaves the cache empty
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, Optional

import httpx

from return_claim_bot.config import GOOGLE_TOKEN_URL
from return_claim_bot.errors import AuthError

logger = logging.getLogger(__name__)

EXPIRY_MARGIN_S = 60.0
DEFAULT_TOKEN_LIFETIME_S = 3600.0


class GoogleCredentials:
    """Refresh-token credential shared by every Google client in the process."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        refresh_token: str,
        http: httpx.AsyncClient,
        token_url: str = GOOGLE_TOKEN_URL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._refresh_token = refresh_token
        self._http = http
        self._token_url = token_url
        self._clock = clock
        self._access_token: Optional[str] = None
        self._expires_at = 0.0
        self._lock = asyncio.Lock()
        self.refresh_count = 0

    @property
    def valid(self) -> bool:
        return bool(self._access_token) and self._clock() < self._expires_at - EXPIRY_MARGIN_S

    async def get_token(self) -> str:
        """Return a usable access token, refreshing it at most once per expiry."""
        if self.valid:
            return self._access_token  # type: ignore[return-value]

        async with self._lock:
            if not self.valid:
                await self._refresh()
            return self._access_token  # type: ignore[return-value]

    async def auth_headers(self) -> dict:
        token = await self.get_token()
        return {"Authorization": "Bearer {}".format(token)}

    def invalidate(self) -> None:
        """Drop the cached token so the next get_token() refreshes."""
        self._access_token = None
        self._expires_at = 0.0

    async def _refresh(self) -> None:
        self.invalidate()
        try:
            resp = await self._http.post(
                self._token_url,
                data={
                    "client_id": self._client_id,
                    "client_secret": self._client_secret,
                    "refresh_token": self._refresh_token,
                    "grant_type": "refresh_token",
                },
            )
        except httpx.HTTPError as exc:
            raise AuthError(0, "token request failed: {}".format(exc)) from exc

        if resp.status_code != 200:
            raise AuthError(resp.status_code, resp.text)

        data = resp.json()
        token = data.get("access_token")
        if not token:
            raise AuthError(resp.status_code, "token response has no access_token")

        self._access_token = token
        self._expires_at = self._clock() + float(data.get("expires_in", DEFAULT_TOKEN_LIFETIME_S))
        self.refresh_count += 1
        logger.info("Refreshed Google access token (expires in %ss)", data.get("expires_in"))
