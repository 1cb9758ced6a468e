"""Typed records for Slack file metadata and Drive API responses.

WHY: Slack's files.info and Drive's files.create both return loose JSON.
Converting at the boundary keeps defaults (fallback name, MIME type) in one
place and makes the relay read like the steps it performs.

RULES:
- AttachmentRef.download_url is "" when Slack gives no url_private_download
- display_name falls back to "slack-file-<id>"
- mime_type falls back to "application/octet-stream"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

DEFAULT_MIME_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class AttachmentRef:
    """Where and how to download one Slack file."""

    source_file_id: str
    download_url: str
    display_name: str
    mime_type: str

    @classmethod
    def from_slack_file(cls, file_id: str, data: Dict[str, Any]) -> AttachmentRef:
        """Build from the "file" object of a files.info response."""
        return cls(
            source_file_id=file_id,
            download_url=data.get("url_private_download") or "",
            display_name=data.get("name") or "slack-file-{}".format(file_id),
            mime_type=data.get("mimetype") or DEFAULT_MIME_TYPE,
        )


@dataclass(frozen=True)
class DriveFile:
    """The subset of a Drive File resource the bot asks for (fields=id)."""

    id: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> DriveFile:
        return cls(id=data.get("id") or "")
