"""Google Sheets v4 client: overwrite one A1 range with user-entered values.

WHY: The bot's only write to the spreadsheet is values.update on a single
row range, interpreted as if typed by a user so =IMAGE() formulas evaluate.

RULES:
- valueInputOption is always USER_ENTERED
- The range is percent-encoded into the URL path
- Any non-2xx response or transport error raises SpreadsheetError
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List
from urllib.parse import quote

import httpx

from return_claim_bot.api.google_auth import GoogleCredentials
from return_claim_bot.config import SHEETS_API_URL, SHEETS_TIMEOUT_S
from return_claim_bot.errors import GoogleAPIError, SpreadsheetError

logger = logging.getLogger(__name__)


class SheetsClient:
    def __init__(
        self,
        credentials: GoogleCredentials,
        http: httpx.AsyncClient,
        spreadsheet_id: str,
        api_url: str = SHEETS_API_URL,
        timeout_s: float = SHEETS_TIMEOUT_S,
    ) -> None:
        self._credentials = credentials
        self._http = http
        self._spreadsheet_id = spreadsheet_id
        self._api_url = api_url.rstrip("/")
        self._timeout_s = timeout_s

    async def update_values(self, range_: str, values: List[List[Any]]) -> Dict[str, Any]:
        """Overwrite range_ with a 2-D array of values; return the API response."""
        url = "{}/spreadsheets/{}/values/{}".format(
            self._api_url, self._spreadsheet_id, quote(range_, safe=""),
        )
        try:
            headers = await self._credentials.auth_headers()
            resp = await self._http.put(
                url,
                params={"valueInputOption": "USER_ENTERED"},
                headers=headers,
                json={"range": range_, "majorDimension": "ROWS", "values": values},
                timeout=self._timeout_s,
            )
        except GoogleAPIError as exc:
            raise SpreadsheetError(range_, exc.message, exc.status_code) from exc
        except httpx.HTTPError as exc:
            raise SpreadsheetError(range_, "request failed: {}".format(exc)) from exc

        if resp.status_code // 100 != 2:
            raise SpreadsheetError(range_, resp.text, resp.status_code)

        data = resp.json() if resp.content else {}
        logger.info(
            "Updated %s (%s cells)", data.get("updatedRange", range_), data.get("updatedCells", "?"),
        )
        return data
