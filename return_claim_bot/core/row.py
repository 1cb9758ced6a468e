"""Row update builder: Submission + public URLs → fixed-width cell block.

WHY: Each claim overwrites columns L through S of its row. The write must
always cover all eight cells so links left over from an earlier, larger
claim on the same row are cleared.

HOW: Pure function. The first URL becomes an =IMAGE() formula in column O,
the next four fill P–S, and every unused slot is an empty string.

RULES:
- values always has exactly ROW_WIDTH entries
- column M is always blank
- URLs beyond the fifth are dropped
- row_number is substituted verbatim (a non-numeric value yields an
  invalid range; the Sheets call rejects it)
- the URL is embedded literally in the formula; quotes are not escaped
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence

from return_claim_bot.config import SHEET_NAME
from return_claim_bot.core.form import Submission

FIRST_COLUMN = "L"
LAST_COLUMN = "S"
ROW_WIDTH = 8
TRAILING_URL_SLOTS = 4


@dataclass(frozen=True)
class RowUpdatePayload:
    """A1 range plus one row of user-entered cell values."""

    range: str
    values: List[str]


def image_formula(url: str) -> str:
    """Return an =IMAGE() formula for url, or "" when url is empty."""
    if not url:
        return ""
    return '=IMAGE("{}", 1)'.format(url)


def build_range(row_number: str, sheet_name: str = SHEET_NAME) -> str:
    return "{}!{}{}:{}{}".format(sheet_name, FIRST_COLUMN, row_number, LAST_COLUMN, row_number)


def build_row(
    submission: Submission,
    urls: Sequence[str],
    sheet_name: str = SHEET_NAME,
) -> RowUpdatePayload:
    """Map a submission and its ordered public URLs to a RowUpdatePayload."""
    first = urls[0] if urls else ""
    trailing = list(urls[1:1 + TRAILING_URL_SLOTS])
    trailing += [""] * (TRAILING_URL_SLOTS - len(trailing))

    values = [
        submission.status,
        "",
        submission.notes,
        image_formula(first),
    ] + trailing

    return RowUpdatePayload(
        range=build_range(submission.row_number, sheet_name),
        values=values,
    )
