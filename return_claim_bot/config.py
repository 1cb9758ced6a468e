"""Configuration constants, .env loading, and the Settings record.

WHY: The bot talks to three services (Slack, Drive, Sheets), each with its
own credentials and identifiers. Keeping every knob in one module makes
them easy to find and override per deployment.

HOW: python-dotenv loads the .env file on import. Optional values are
module-level defaults read with os.getenv. Required secrets are collected
by load_settings(), which raises a clear ValueError when one is missing.

RULES:
- Secrets are loaded from the environment, never hardcoded
- load_settings() is called once at process start; the result is injected
- Settings is immutable after construction
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load .env from the project root (where the process is started from)
load_dotenv()

# ---------------------------------------------------------------------------
# Slack command / modal identifiers
# ---------------------------------------------------------------------------

COMMAND_NAME = os.getenv("COMMAND_NAME", "/return_claim")

# ---------------------------------------------------------------------------
# Google defaults
# ---------------------------------------------------------------------------

GOOGLE_TOKEN_URL = os.getenv("GOOGLE_TOKEN_URL", "https://oauth2.googleapis.com/token")
DRIVE_API_URL = "https://www.googleapis.com/drive/v3"
DRIVE_UPLOAD_URL = "https://www.googleapis.com/upload/drive/v3"
SHEETS_API_URL = "https://sheets.googleapis.com/v4"
DRIVE_PUBLIC_VIEW_URL = "https://drive.google.com/uc?export=view&id={file_id}"

SHEET_NAME = os.getenv("SHEET_NAME", "Amazon")

# ---------------------------------------------------------------------------
# Pipeline tuning
# ---------------------------------------------------------------------------

RELAY_CONCURRENCY = int(os.getenv("RELAY_CONCURRENCY", "5"))
RELAY_TIMEOUT_S = float(os.getenv("RELAY_TIMEOUT_S", "120"))
SHEETS_TIMEOUT_S = float(os.getenv("SHEETS_TIMEOUT_S", "30"))

# ---------------------------------------------------------------------------
# Process
# ---------------------------------------------------------------------------

PORT = int(os.getenv("PORT", "3000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


@dataclass(frozen=True)
class Settings:
    """Everything a running bot needs, resolved from the environment.

    RULES:
    - slack_signing_secret is required for HTTP mode only
    - slack_app_token is required for Socket Mode only
    """

    slack_bot_token: str
    google_client_id: str
    google_client_secret: str
    google_refresh_token: str
    spreadsheet_id: str
    drive_folder_id: str
    slack_signing_secret: Optional[str] = None
    slack_app_token: Optional[str] = None
    sheet_name: str = SHEET_NAME
    google_token_url: str = GOOGLE_TOKEN_URL
    relay_concurrency: int = RELAY_CONCURRENCY
    relay_timeout_s: float = RELAY_TIMEOUT_S
    sheets_timeout_s: float = SHEETS_TIMEOUT_S


_REQUIRED = (
    ("SLACK_BOT_TOKEN", "slack_bot_token"),
    ("GOOGLE_CLIENT_ID", "google_client_id"),
    ("GOOGLE_CLIENT_SECRET", "google_client_secret"),
    ("GOOGLE_REFRESH_TOKEN", "google_refresh_token"),
    ("SPREADSHEET_ID", "spreadsheet_id"),
    ("DRIVE_FOLDER_ID", "drive_folder_id"),
)


def load_settings() -> Settings:
    """Build Settings from the environment.

    WHY: A missing token otherwise surfaces as an opaque 401 deep inside
    the first submission. Failing at startup names the variable.

    RULES:
    - Raises ValueError listing every missing required variable
    - Empty or whitespace-only values count as missing
    """
    values = {}
    missing = []
    for env_name, field_name in _REQUIRED:
        value = os.getenv(env_name, "").strip()
        if not value:
            missing.append(env_name)
        values[field_name] = value

    if missing:
        raise ValueError(
            "Missing required configuration: {}. "
            "Add them to the .env file or the environment.".format(", ".join(missing))
        )

    return Settings(
        slack_signing_secret=os.getenv("SLACK_SIGNING_SECRET", "").strip() or None,
        slack_app_token=os.getenv("SLACK_APP_TOKEN", "").strip() or None,
        **values,
    )
