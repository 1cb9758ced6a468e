"""Form extraction: Slack modal state → validated Submission record.

WHY: Slack delivers modal input as a nested dict keyed by block_id and
action_id, where any block may be missing (optional inputs that were left
empty are often omitted entirely). The rest of the pipeline needs a flat,
typed record and a clear answer to "is this submission usable?".

HOW: parse_submission() walks view.state.values with .get() at every level
and returns a ParseResult holding either a Submission or the list of
missing required fields. It never raises.

RULES:
- row number is trimmed; empty, absent or non-string → error "row_number"
- a value of the wrong JSON type is treated as absent
- status is passed through as-is (not checked against ClaimStatus)
- notes default to ""
- attachments keep input order; entries without an "id" are dropped
- no cap on attachment count here (the modal enforces max 5)
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# ---------------------------------------------------------------------------
# Block / action identifiers (must match slack.messages.build_claim_modal)
# ---------------------------------------------------------------------------

ROW_BLOCK = "row_block"
ROW_ACTION = "row_input"
STATUS_BLOCK = "status_block"
STATUS_ACTION = "status_input"
NOTES_BLOCK = "notes_block"
NOTES_ACTION = "notes_input"
IMAGE_BLOCK = "image_block"
IMAGE_ACTION = "image_input"


class ClaimStatus(str, enum.Enum):
    """Item status options offered in the modal.

    Values are the literal strings written to the sheet.
    """

    BACK_TO_STOCK = "Back to Stock"
    UNSELLABLE = "Unsellable"
    NEEDS_PARTS = "Needs Parts"
    SELLABLE_OPEN_BOX = "Sellable open box"


@dataclass(frozen=True)
class Submission:
    """One completed claim form from one user."""

    user_id: str
    row_number: str
    status: str = ""
    notes: str = ""
    attachment_ids: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ParseResult:
    """Outcome of parse_submission: a Submission or the missing fields."""

    submission: Optional[Submission] = None
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.submission is not None and not self.errors


def parse_submission(user_id: str, view: Dict[str, Any]) -> ParseResult:
    """Extract a Submission from a view_submission payload's view dict.

    WHY: Centralizes the defensive nested-dict walk so handlers never see
    KeyError/AttributeError from a partially-filled modal.

    HOW: Reads each field through _input_value(); attachments come from the
    view-level "files" list when Slack provides it, else from the file
    input's own state.
    """
    view = view if isinstance(view, dict) else {}
    state = _as_dict(view.get("state"))
    values = _as_dict(state.get("values"))

    row_number = _as_str(_input_value(values, ROW_BLOCK, ROW_ACTION).get("value")).strip()

    selected = _as_dict(_input_value(values, STATUS_BLOCK, STATUS_ACTION).get("selected_option"))
    status = _as_str(selected.get("value"))

    notes = _as_str(_input_value(values, NOTES_BLOCK, NOTES_ACTION).get("value"))

    files = _as_list(view.get("files")) or _as_list(
        _input_value(values, IMAGE_BLOCK, IMAGE_ACTION).get("files")
    )
    attachment_ids = [
        f["id"] for f in files
        if isinstance(f, dict) and f.get("id") and isinstance(f["id"], str)
    ]

    if not row_number:
        return ParseResult(errors=["row_number"])

    return ParseResult(
        submission=Submission(
            user_id=user_id,
            row_number=row_number,
            status=status,
            notes=notes,
            attachment_ids=attachment_ids,
        )
    )


def _input_value(values: Dict[str, Any], block_id: str, action_id: str) -> Dict[str, Any]:
    """Return values[block_id][action_id] or {} if any level is missing."""
    block = values.get(block_id)
    if not isinstance(block, dict):
        return {}
    action = block.get(action_id)
    return action if isinstance(action, dict) else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""
