"""Google Drive v3 client: streamed file create and public sharing.

WHY: Claim photos must end up in one Drive folder, readable by anyone with
the link, so the sheet's IMAGE() formula can render them. Photos arrive as
an HTTP stream from Slack and should not be held in memory whole.

HOW: create_file() sends a multipart/related upload whose body is an async
generator: the JSON metadata part, then every chunk of the source stream
as it arrives, then the closing boundary. httpx sends it with chunked
transfer encoding. grant_public_read() adds an anyone/reader permission.

RULES:
- The content iterator is consumed exactly once, in order
- Non-2xx responses raise GoogleAPIError with the response body
- public_view_url() is a pure function of the file id
"""

from __future__ import annotations

import json
import uuid
from typing import AsyncIterator, List, Optional

import httpx

from return_claim_bot.api.google_auth import GoogleCredentials
from return_claim_bot.api.models import DriveFile
from return_claim_bot.config import DRIVE_API_URL, DRIVE_PUBLIC_VIEW_URL, DRIVE_UPLOAD_URL
from return_claim_bot.errors import GoogleAPIError


def public_view_url(file_id: str) -> str:
    """Return the canonical direct-view URL for a Drive file id."""
    return DRIVE_PUBLIC_VIEW_URL.format(file_id=file_id)


class DriveClient:
    """Thin async wrapper over the two Drive endpoints the relay needs."""

    def __init__(
        self,
        credentials: GoogleCredentials,
        http: httpx.AsyncClient,
        api_url: str = DRIVE_API_URL,
        upload_url: str = DRIVE_UPLOAD_URL,
    ) -> None:
        self._credentials = credentials
        self._http = http
        self._api_url = api_url.rstrip("/")
        self._upload_url = upload_url.rstrip("/")

    async def create_file(
        self,
        name: str,
        mime_type: str,
        content: AsyncIterator[bytes],
        parents: Optional[List[str]] = None,
    ) -> DriveFile:
        """Create a file from a byte stream and return its id.

        Returns a DriveFile whose id is "" if Drive answered 2xx without one;
        the caller decides whether that is an error.
        """
        metadata = {"name": name, "mimeType": mime_type}
        if parents:
            metadata["parents"] = list(parents)

        boundary = uuid.uuid4().hex
        headers = await self._credentials.auth_headers()
        headers["Content-Type"] = 'multipart/related; boundary="{}"'.format(boundary)

        resp = await self._http.post(
            "{}/files".format(self._upload_url),
            params={"uploadType": "multipart", "fields": "id"},
            headers=headers,
            content=_multipart_body(boundary, metadata, mime_type, content),
        )
        _raise_for_status(resp)
        return DriveFile.from_dict(resp.json())

    async def grant_public_read(self, file_id: str) -> None:
        """Give "anyone with the link" reader access to file_id."""
        headers = await self._credentials.auth_headers()
        resp = await self._http.post(
            "{}/files/{}/permissions".format(self._api_url, file_id),
            headers=headers,
            json={"role": "reader", "type": "anyone"},
        )
        _raise_for_status(resp)


async def _multipart_body(
    boundary: str,
    metadata: dict,
    mime_type: str,
    content: AsyncIterator[bytes],
) -> AsyncIterator[bytes]:
    head = (
        "--{b}\r\n"
        "Content-Type: application/json; charset=UTF-8\r\n\r\n"
        "{meta}\r\n"
        "--{b}\r\n"
        "Content-Type: {mime}\r\n\r\n"
    ).format(b=boundary, meta=json.dumps(metadata), mime=mime_type)
    yield head.encode("utf-8")

    async for chunk in content:
        if chunk:
            yield chunk

    yield "\r\n--{}--\r\n".format(boundary).encode("utf-8")


def _raise_for_status(resp: httpx.Response) -> None:
    if resp.status_code // 100 != 2:
        raise GoogleAPIError(resp.status_code, resp.text)
