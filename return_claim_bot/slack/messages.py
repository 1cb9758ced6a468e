"""Modal view builder and user-facing notification texts.

WHY: The modal layout and the three outcome messages are pure data. Keeping
them here leaves bot.py and the orchestrator focused on control flow.

RULES:
- block_id / action_id values must match core.form
- Exactly three outcome messages: validation error, failure, success
"""

from __future__ import annotations

from typing import Any, Dict, List

from return_claim_bot.core.form import (
    IMAGE_ACTION,
    IMAGE_BLOCK,
    NOTES_ACTION,
    NOTES_BLOCK,
    ROW_ACTION,
    ROW_BLOCK,
    STATUS_ACTION,
    STATUS_BLOCK,
    ClaimStatus,
)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MODAL_CALLBACK_ID = "return_claim_modal"

IMAGE_FILETYPES = ["png", "jpg", "jpeg", "gif"]
MAX_IMAGES = 5


# ---------------------------------------------------------------------------
# Modal builder
# ---------------------------------------------------------------------------


def _plain(text: str) -> Dict[str, str]:
    return {"type": "plain_text", "text": text}


def build_claim_modal() -> Dict[str, Any]:
    """Build the "File Return Claim" modal view.

    HOW: Four input blocks: row number (required text), status (required
    static select), notes (optional multiline), images (optional file
    input limited to MAX_IMAGES image files).
    """
    status_options = [
        {"text": _plain(status.value), "value": status.value}
        for status in ClaimStatus
    ]

    return {
        "type": "modal",
        "callback_id": MODAL_CALLBACK_ID,
        "title": _plain("File Return Claim"),
        "submit": _plain("Submit"),
        "blocks": [
            {
                "type": "input",
                "block_id": ROW_BLOCK,
                "label": _plain("Sheet Row Number"),
                "element": {
                    "type": "plain_text_input",
                    "action_id": ROW_ACTION,
                    "placeholder": _plain("e.g., 42"),
                },
            },
            {
                "type": "input",
                "block_id": STATUS_BLOCK,
                "label": _plain("New Item Status"),
                "element": {
                    "type": "static_select",
                    "action_id": STATUS_ACTION,
                    "placeholder": _plain("Select Status"),
                    "options": status_options,
                },
            },
            {
                "type": "input",
                "block_id": NOTES_BLOCK,
                "label": _plain("Notes"),
                "element": {
                    "type": "plain_text_input",
                    "action_id": NOTES_ACTION,
                    "multiline": True,
                },
                "optional": True,
            },
            {
                "type": "input",
                "block_id": IMAGE_BLOCK,
                "label": _plain("Upload Image(s) (Max {})".format(MAX_IMAGES)),
                "element": {
                    "type": "file_input",
                    "action_id": IMAGE_ACTION,
                    "filetypes": list(IMAGE_FILETYPES),
                    "max_files": MAX_IMAGES,
                },
                "optional": True,
            },
        ],
    }


# ---------------------------------------------------------------------------
# Outcome messages
# ---------------------------------------------------------------------------

_FIELD_LABELS = {"row_number": "Row number"}


def validation_error_message(missing: List[str]) -> str:
    labels = [_FIELD_LABELS.get(name, name) for name in missing] or ["A required field"]
    if len(labels) == 1:
        return "❌ Error: {} is required.".format(labels[0])
    return "❌ Error: {} are required.".format(", ".join(labels))


def failure_message(row_number: str) -> str:
    return (
        "❌ ERROR: Your claim for Row {} failed. "
        "Please contact an administrator.".format(row_number)
    )


def success_message(row_number: str, status: str, image_count: int) -> str:
    lines = ["✅ Claim successfully processed for Row {}!".format(row_number)]
    if status:
        lines.append("Status: {}".format(status))
    lines.append("Images uploaded: {}".format(image_count))
    return "\n".join(lines)
