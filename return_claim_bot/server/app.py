"""FastAPI application serving Slack requests and health checks.

WHY: In HTTP mode Slack delivers slash commands and modal submissions as
signed POST requests to a public URL. Hosting platforms additionally probe
a liveness URL before routing traffic.

HOW: create_api() builds the shared httpx client, the Bolt AsyncApp and its
FastAPI adapter. One POST route forwards every Slack request to Bolt
(signature check, ack, listener dispatch). GET /, /healthz and /health
return fixed 200 responses. The lifespan hook closes the HTTP client.

RULES:
- Commands and interactivity share the /slack/events request URL
- Health endpoints never touch Slack or Google
- HTTP mode requires SLACK_SIGNING_SECRET
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from slack_bolt.adapter.fastapi.async_handler import AsyncSlackRequestHandler
from slack_bolt.async_app import AsyncApp

from return_claim_bot import __version__
from return_claim_bot.config import LOG_LEVEL, PORT, Settings, load_settings
from return_claim_bot.server.models import HealthResponse
from return_claim_bot.slack.bot import build_http_client, create_app

logger = logging.getLogger(__name__)


def create_api(
    settings: Settings,
    bolt_app: Optional[AsyncApp] = None,
    http: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """Build the FastAPI app around a Bolt app.

    RULES:
    - If bolt_app is None it is created from settings with a new HTTP client
    - The HTTP client is closed on shutdown only if this function created it
    """
    owns_http = http is None and bolt_app is None
    if bolt_app is None:
        http = http or build_http_client()
        bolt_app = create_app(settings, http=http)

    handler = AsyncSlackRequestHandler(bolt_app)

    @asynccontextmanager
    async def lifespan(api: FastAPI):
        yield
        if owns_http and http is not None:
            await http.aclose()

    api = FastAPI(
        lifespan=lifespan,
        title="Return Claim Bot",
        description="Slack return-claim bot: relays claim photos to Drive and updates the tracking sheet.",
        version=__version__,
    )

    @api.post("/slack/events", tags=["slack"], summary="Slack commands and interactivity")
    async def slack_events(req: Request):
        return await handler.handle(req)

    @api.get("/", response_class=PlainTextResponse, tags=["health"], summary="Liveness")
    async def root() -> str:
        return "Slack Sheets Bot is running."

    @api.get("/healthz", response_class=PlainTextResponse, tags=["health"], summary="Health probe")
    async def healthz() -> str:
        return "OK"

    @api.get("/health", response_model=HealthResponse, tags=["health"], summary="Health check")
    async def health_check() -> HealthResponse:
        return HealthResponse(status="ok", version=__version__)

    return api


def run_api() -> None:
    """Entry point for the return-claim-bot console script."""
    import uvicorn

    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    settings = load_settings()
    if not settings.slack_signing_secret:
        raise ValueError("SLACK_SIGNING_SECRET environment variable is required for HTTP mode")

    logger.info("Bolt app is running on port %s", PORT)
    uvicorn.run(create_api(settings), host="0.0.0.0", port=PORT)
