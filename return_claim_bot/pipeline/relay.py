"""File relay: one Slack file → one publicly viewable Drive file.

WHY: The sheet can only show images that live at a public URL. Slack file
URLs need the bot token, so each attachment is copied to Drive and shared.

HOW: Four awaited steps per file: files.info lookup, authenticated
streaming GET against url_private_download, streamed Drive create (the
Slack response body is piped straight into the upload body), and an
anyone/reader permission grant. The public URL is derived from the new
Drive file id.

RULES:
- Each step has its own RelayError subclass; every failure is fatal
- The file body is never fully buffered
- No retries; retry policy belongs to the caller
- FileRelay holds no per-call state, so one instance serves concurrent relays
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from return_claim_bot.api.drive import DriveClient, public_view_url
from return_claim_bot.api.models import AttachmentRef
from return_claim_bot.config import RELAY_TIMEOUT_S
from return_claim_bot.errors import (
    DownloadError,
    GoogleAPIError,
    MetadataError,
    PermissionGrantError,
    UploadError,
)

logger = logging.getLogger(__name__)


class FileRelay:
    """Copies Slack files into a single Drive folder and shares them."""

    def __init__(
        self,
        slack_client: Any,
        drive: DriveClient,
        http: httpx.AsyncClient,
        bot_token: str,
        folder_id: str,
        download_timeout_s: Optional[float] = RELAY_TIMEOUT_S,
    ) -> None:
        self._slack = slack_client
        self._drive = drive
        self._http = http
        self._bot_token = bot_token
        self._folder_id = folder_id
        self._download_timeout_s = download_timeout_s

    async def __call__(self, file_id: str) -> str:
        return await self.relay(file_id)

    async def fetch_metadata(self, file_id: str) -> AttachmentRef:
        """Resolve a Slack file id to its download URL, name and MIME type."""
        try:
            resp = await self._slack.files_info(file=file_id)
        except Exception as exc:
            raise MetadataError(file_id, "files.info failed: {}".format(exc)) from exc

        data = resp.get("file") if resp.get("ok", True) else None
        if not data:
            raise MetadataError(file_id, "could not get file info")

        ref = AttachmentRef.from_slack_file(file_id, data)
        if not ref.download_url:
            raise MetadataError(file_id, "no downloadable URL")
        return ref

    async def relay(self, file_id: str) -> str:
        """Move file_id to Drive and return its public view URL."""
        ref = await self.fetch_metadata(file_id)

        headers = {"Authorization": "Bearer {}".format(self._bot_token)}
        try:
            async with self._http.stream(
                "GET", ref.download_url, headers=headers, timeout=self._download_timeout_s,
            ) as source:
                if source.status_code // 100 != 2:
                    raise DownloadError(
                        file_id, "Slack returned HTTP {}".format(source.status_code),
                    )
                created = await self._upload(ref, source)
        except httpx.HTTPError as exc:
            raise DownloadError(file_id, "download failed: {}".format(exc)) from exc

        if not created:
            raise UploadError(file_id, "Drive did not return a file id")

        try:
            await self._drive.grant_public_read(created)
        except (GoogleAPIError, httpx.HTTPError) as exc:
            raise PermissionGrantError(file_id, str(exc)) from exc

        logger.info("Relayed %s (%s) to Drive file %s", file_id, ref.display_name, created)
        return public_view_url(created)

    async def _upload(self, ref: AttachmentRef, source: httpx.Response) -> str:
        try:
            drive_file = await self._drive.create_file(
                name=ref.display_name,
                mime_type=ref.mime_type,
                content=source.aiter_bytes(),
                parents=[self._folder_id],
            )
        except (GoogleAPIError, httpx.HTTPError) as exc:
            raise UploadError(ref.source_file_id, str(exc)) from exc
        return drive_file.id
