"""Submission orchestrator: the view_submission handler's whole workflow.

WHY: A claim passes through validation, file relay, row building, the
sheet write and a user notification. Each stage can fail differently, and
the user must get exactly one outcome message in every case.

HOW: SubmissionPipeline.run() walks the state machine

    RECEIVED → VALIDATED → RELAYING → BUILDING → WRITING → NOTIFIED
    RECEIVED → REJECTED → NOTIFIED
    RELAYING | BUILDING | WRITING → FAILED → NOTIFIED

recording every state it enters on the returned SubmissionOutcome.

RULES:
- ack() is awaited before any other work
- A rejected submission makes no relay, Drive or Sheets call
- Failures are not rolled back; Drive files already created stay in place
- Notification errors are logged and swallowed
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from return_claim_bot.api.sheets import SheetsClient
from return_claim_bot.config import RELAY_CONCURRENCY, RELAY_TIMEOUT_S, SHEET_NAME
from return_claim_bot.core.form import parse_submission
from return_claim_bot.core.row import build_row
from return_claim_bot.errors import NotificationError
from return_claim_bot.pipeline.fanout import RelayFn, relay_all
from return_claim_bot.slack.messages import (
    failure_message,
    success_message,
    validation_error_message,
)

logger = logging.getLogger(__name__)


class SubmissionState(str, enum.Enum):
    RECEIVED = "received"
    VALIDATED = "validated"
    REJECTED = "rejected"
    RELAYING = "relaying"
    BUILDING = "building"
    WRITING = "writing"
    FAILED = "failed"
    NOTIFIED = "notified"


@dataclass
class SubmissionOutcome:
    """What happened to one submission; returned by SubmissionPipeline.run."""

    user_id: str
    row_number: str = ""
    states: List[SubmissionState] = field(default_factory=list)
    urls: List[str] = field(default_factory=list)
    error: Optional[BaseException] = None
    notified: bool = False

    @property
    def succeeded(self) -> bool:
        return SubmissionState.WRITING in self.states and SubmissionState.FAILED not in self.states

    def enter(self, state: SubmissionState) -> None:
        self.states.append(state)


class SubmissionPipeline:
    """Runs one claim submission end to end against injected clients.

    WHY: Handlers stay thin and tests can swap every collaborator: the
    Slack client (notifications), the relay callable, and the Sheets client.

    RULES:
    - slack_client needs an async chat_postMessage(channel=..., text=...)
    - relay is any async callable mapping a Slack file id to a public URL
    """

    def __init__(
        self,
        slack_client: Any,
        relay: RelayFn,
        sheets: SheetsClient,
        sheet_name: str = SHEET_NAME,
        concurrency: int = RELAY_CONCURRENCY,
        relay_timeout_s: float = RELAY_TIMEOUT_S,
    ) -> None:
        self._slack = slack_client
        self._relay = relay
        self._sheets = sheets
        self._sheet_name = sheet_name
        self._concurrency = concurrency
        self._relay_timeout_s = relay_timeout_s

    async def run(
        self,
        user_id: str,
        view: Dict[str, Any],
        ack: Optional[Callable[[], Awaitable[Any]]] = None,
    ) -> SubmissionOutcome:
        outcome = SubmissionOutcome(user_id=user_id)
        outcome.enter(SubmissionState.RECEIVED)
        if ack is not None:
            await ack()

        parsed = parse_submission(user_id, view)
        if not parsed.ok:
            outcome.enter(SubmissionState.REJECTED)
            logger.info("Rejected submission from %s: missing %s", user_id, parsed.errors)
            await self._notify(outcome, validation_error_message(parsed.errors))
            return outcome

        submission = parsed.submission
        outcome.row_number = submission.row_number
        outcome.enter(SubmissionState.VALIDATED)

        try:
            outcome.enter(SubmissionState.RELAYING)
            urls = await relay_all(
                self._relay,
                submission.attachment_ids,
                concurrency=self._concurrency,
                timeout_s=self._relay_timeout_s,
            )

            outcome.enter(SubmissionState.BUILDING)
            payload = build_row(submission, urls, self._sheet_name)

            outcome.enter(SubmissionState.WRITING)
            await self._sheets.update_values(payload.range, [payload.values])
            outcome.urls = urls
        except Exception as exc:
            outcome.enter(SubmissionState.FAILED)
            outcome.error = exc
            logger.exception("Claim submission failed for row %s", submission.row_number)
            await self._notify(outcome, failure_message(submission.row_number))
            return outcome

        logger.info(
            "Claim processed for row %s (%d image(s))", submission.row_number, len(urls),
        )
        await self._notify(
            outcome, success_message(submission.row_number, submission.status, len(urls)),
        )
        return outcome

    async def _notify(self, outcome: SubmissionOutcome, text: str) -> None:
        try:
            await self.notify(outcome.user_id, text)
        except NotificationError:
            logger.exception("Could not notify %s", outcome.user_id)
            return
        outcome.notified = True
        outcome.enter(SubmissionState.NOTIFIED)

    async def notify(self, user_id: str, text: str) -> None:
        """Send a direct message to user_id; raise NotificationError on failure."""
        try:
            await self._slack.chat_postMessage(channel=user_id, text=text)
        except Exception as exc:
            raise NotificationError("chat.postMessage to {} failed: {}".format(user_id, exc)) from exc
