"""Slack bot: slash command and modal submission handlers.

WHY: This module is the glue between Slack and the claim pipeline. The
slash command opens the claim modal; the modal submission runs the
pipeline and reports back to the user by direct message.

HOW: Uses slack-bolt's AsyncApp so every submission runs as its own
asyncio task and every network call is a suspension point. The pipeline
and its clients are built once in create_app() and captured by the view
handler. main() runs the app over Socket Mode; the HTTP transport lives in
return_claim_bot.server.app.

RULES:
- ack() FIRST, before any processing (Slack retries after 3 seconds)
- Handlers never raise; failures are logged and reported to the user
- One shared httpx.AsyncClient per process, owned by the caller
- Runnable as: python -m return_claim_bot.slack.bot
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx
from slack_bolt.async_app import AsyncApp

from return_claim_bot.api.drive import DriveClient
from return_claim_bot.api.google_auth import GoogleCredentials
from return_claim_bot.api.sheets import SheetsClient
from return_claim_bot.config import COMMAND_NAME, LOG_LEVEL, Settings, load_settings
from return_claim_bot.pipeline.orchestrator import SubmissionPipeline
from return_claim_bot.pipeline.relay import FileRelay
from return_claim_bot.slack.messages import MODAL_CALLBACK_ID, build_claim_modal

logger = logging.getLogger(__name__)

_HTTP_TIMEOUT = httpx.Timeout(120.0, connect=30.0)


# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------


def build_http_client() -> httpx.AsyncClient:
    """Create the process-wide HTTP client used for Slack downloads and Google."""
    return httpx.AsyncClient(timeout=_HTTP_TIMEOUT, follow_redirects=True)


def build_pipeline(
    settings: Settings,
    slack_client: Any,
    http: httpx.AsyncClient,
) -> SubmissionPipeline:
    """Wire credentials, Drive, Sheets and the relay into a pipeline.

    RULES:
    - One GoogleCredentials instance is shared by Drive and Sheets
    - slack_client is the app's AsyncWebClient (files.info, chat.postMessage)
    """
    credentials = GoogleCredentials(
        client_id=settings.google_client_id,
        client_secret=settings.google_client_secret,
        refresh_token=settings.google_refresh_token,
        http=http,
        token_url=settings.google_token_url,
    )
    drive = DriveClient(credentials, http)
    sheets = SheetsClient(
        credentials, http, settings.spreadsheet_id, timeout_s=settings.sheets_timeout_s,
    )
    relay = FileRelay(
        slack_client=slack_client,
        drive=drive,
        http=http,
        bot_token=settings.slack_bot_token,
        folder_id=settings.drive_folder_id,
        download_timeout_s=settings.relay_timeout_s,
    )
    return SubmissionPipeline(
        slack_client=slack_client,
        relay=relay,
        sheets=sheets,
        sheet_name=settings.sheet_name,
        concurrency=settings.relay_concurrency,
        relay_timeout_s=settings.relay_timeout_s,
    )


def create_app(
    settings: Settings,
    http: Optional[httpx.AsyncClient] = None,
    pipeline: Optional[SubmissionPipeline] = None,
) -> AsyncApp:
    """Create and configure the Slack Bolt app with all handlers.

    WHY: Factory function lets tests inject a fake pipeline and avoids
    module-level side effects.

    RULES:
    - Either http or pipeline must be given; pipeline wins
    - Request signature verification is on whenever a signing secret is set
    """
    app = AsyncApp(
        token=settings.slack_bot_token,
        signing_secret=settings.slack_signing_secret or "",
        request_verification_enabled=bool(settings.slack_signing_secret),
    )

    if pipeline is None:
        if http is None:
            raise ValueError("create_app needs an httpx.AsyncClient or a SubmissionPipeline")
        pipeline = build_pipeline(settings, app.client, http)

    app.command(COMMAND_NAME)(handle_return_claim_command)
    app.view(MODAL_CALLBACK_ID)(make_submission_handler(pipeline))

    return app


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


async def handle_return_claim_command(ack: Any, body: Dict[str, Any], client: Any, logger: Any) -> None:
    """Handle /return_claim by opening the claim modal.

    RULES:
    - ack() FIRST
    - The trigger_id expires after 3 seconds, so the modal opens right away
    """
    await ack()

    try:
        await client.views_open(trigger_id=body.get("trigger_id", ""), view=build_claim_modal())
    except Exception:
        logger.exception("Failed to open claim modal")


def make_submission_handler(pipeline: SubmissionPipeline):
    """Return the view_submission listener bound to pipeline."""

    async def handle_claim_submission(ack: Any, body: Dict[str, Any], view: Dict[str, Any]) -> None:
        user_id = (body.get("user") or {}).get("id", "")
        await pipeline.run(user_id, view, ack=ack)

    return handle_claim_submission


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


async def run_socket_mode(settings: Settings) -> None:
    """Serve the app over Socket Mode until cancelled."""
    from slack_bolt.adapter.socket_mode.async_handler import AsyncSocketModeHandler

    if not settings.slack_app_token:
        raise ValueError("SLACK_APP_TOKEN environment variable is required for Socket Mode")

    async with build_http_client() as http:
        app = create_app(settings, http=http)
        handler = AsyncSocketModeHandler(app, settings.slack_app_token)
        logger.info("Starting return-claim bot in Socket Mode...")
        await handler.start_async()


def main() -> None:
    """Start the bot in Socket Mode (no public URL needed)."""
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    asyncio.run(run_socket_mode(load_settings()))


if __name__ == "__main__":
    main()
