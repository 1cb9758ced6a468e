"""Shared fixtures for the return_claim_bot test suite.

WHY: Most modules need a realistic modal view payload, a Settings record
and Google clients wired to a fake transport. Centralizing them keeps
tests short and consistent.

HOW: make_view() builds a view_submission "view" dict the way Slack
sends it. Google and Slack HTTP traffic goes through httpx.MockTransport;
the Slack Web API client is an AsyncMock.

RULES:
- No test makes a real network call
- Async code is driven with asyncio.run (no pytest-asyncio)
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock

import httpx
import pytest

from return_claim_bot.api.google_auth import GoogleCredentials
from return_claim_bot.config import Settings


def _view_payload(
    row: Optional[str] = "42",
    status: Optional[str] = "Unsellable",
    notes: Optional[str] = "cracked case",
    file_ids: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """Build a modal "view" dict; a None field omits its block entirely."""
    values = {}  # type: Dict[str, Any]
    if row is not None:
        values["row_block"] = {"row_input": {"type": "plain_text_input", "value": row}}
    if status is not None:
        values["status_block"] = {
            "status_input": {
                "type": "static_select",
                "selected_option": {
                    "text": {"type": "plain_text", "text": status},
                    "value": status,
                },
            }
        }
    if notes is not None:
        values["notes_block"] = {"notes_input": {"type": "plain_text_input", "value": notes}}

    view = {
        "id": "V123",
        "callback_id": "return_claim_modal",
        "state": {"values": values},
    }  # type: Dict[str, Any]
    if file_ids is not None:
        view["files"] = [{"id": fid, "name": "{}.png".format(fid)} for fid in file_ids]
    return view


def _token_response(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"access_token": "ya29.test", "expires_in": 3599})


@pytest.fixture
def settings() -> Settings:
    return Settings(
        slack_bot_token="xoxb-test",
        google_client_id="client-id",
        google_client_secret="client-secret",
        google_refresh_token="refresh-token",
        spreadsheet_id="sheet-123",
        drive_folder_id="folder-abc",
        slack_signing_secret="signing-secret",
    )


@pytest.fixture
def slack_client() -> AsyncMock:
    """Stand-in for slack_sdk's AsyncWebClient."""
    client = AsyncMock()
    client.chat_postMessage.return_value = {"ok": True}
    return client


def _make_credentials(http: httpx.AsyncClient) -> GoogleCredentials:
    return GoogleCredentials(
        client_id="client-id",
        client_secret="client-secret",
        refresh_token="refresh-token",
        http=http,
        token_url="https://oauth2.example.test/token",
    )


@pytest.fixture
def make_view():
    """Factory fixture: make_view(row=..., status=..., notes=..., file_ids=...)."""
    return _view_payload


@pytest.fixture
def make_credentials():
    """Factory fixture: make_credentials(http) -> GoogleCredentials."""
    return _make_credentials


@pytest.fixture
def token_response():
    """MockTransport handler fragment answering the OAuth2 token endpoint."""
    return _token_response
