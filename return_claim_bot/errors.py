"""Exception taxonomy for the claim-submission pipeline.

WHY: The orchestrator reacts differently to a rejected form, a broken
attachment, a refused sheet write and a failed chat message. Typed
exceptions let it branch on the failure kind without parsing messages.

RULES:
- Relay-stage failures all derive from RelayError and carry the file id
- GoogleAPIError carries the HTTP status code and response body
- NotificationError is never allowed to reopen a finished submission
"""

from __future__ import annotations

from typing import Optional


class ClaimBotError(Exception):
    """Base class for all pipeline errors."""


# ---------------------------------------------------------------------------
# Relay failures
# ---------------------------------------------------------------------------


class RelayError(ClaimBotError):
    """Raised when moving one file from Slack to Drive fails."""

    def __init__(self, file_id: str, message: str) -> None:
        self.file_id = file_id
        self.message = message
        super().__init__("Relay of {} failed: {}".format(file_id, message))


class MetadataError(RelayError):
    """The Slack file lookup failed or returned no downloadable URL."""


class DownloadError(RelayError):
    """The authenticated download from Slack returned a non-2xx status."""


class UploadError(RelayError):
    """Drive did not return an id for the created file."""


class PermissionGrantError(RelayError):
    """Drive refused the anyone-with-link reader permission."""


# ---------------------------------------------------------------------------
# Provider failures
# ---------------------------------------------------------------------------


class GoogleAPIError(ClaimBotError):
    """Raised when a Google API returns an error response."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__("Google API error {}: {}".format(status_code, message))


class AuthError(GoogleAPIError):
    """Raised when the OAuth2 refresh-token grant fails."""


class SpreadsheetError(ClaimBotError):
    """Raised when the row update is rejected."""

    def __init__(self, range_: str, message: str, status_code: Optional[int] = None) -> None:
        self.range = range_
        self.status_code = status_code
        super().__init__("Update of {} failed: {}".format(range_, message))


class NotificationError(ClaimBotError):
    """Raised when a direct message to the submitting user fails."""
