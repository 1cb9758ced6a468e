"""HTTP clients for Google OAuth2, Drive v3 and Sheets v4.

All clients share one injected httpx.AsyncClient and one GoogleCredentials
cache so concurrent submissions reuse connections and access tokens.
"""

from return_claim_bot.api.drive import DriveClient
from return_claim_bot.api.google_auth import GoogleCredentials
from return_claim_bot.api.sheets import SheetsClient

__all__ = ["DriveClient", "GoogleCredentials", "SheetsClient"]
