"""Fan-out coordinator: relay every attachment concurrently, all or nothing.

WHY: A claim can carry up to five photos; relaying them one after another
multiplies latency. A single broken photo must still fail the whole claim
so the sheet never shows a half-populated row.

HOW: One task per file id, gated by an asyncio.Semaphore and wrapped in
asyncio.wait_for. asyncio.wait(FIRST_EXCEPTION) returns as soon as any
task fails; the rest are cancelled and awaited before the error is raised.

RULES:
- Results are returned in input order, not completion order
- An empty input returns [] without scheduling anything
- A timed-out relay raises RelayError for that file id
- When several relays fail, the earliest in input order is raised
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, List, Sequence

from return_claim_bot.config import RELAY_CONCURRENCY, RELAY_TIMEOUT_S
from return_claim_bot.errors import RelayError

logger = logging.getLogger(__name__)

RelayFn = Callable[[str], Awaitable[str]]


async def relay_all(
    relay: RelayFn,
    file_ids: Sequence[str],
    concurrency: int = RELAY_CONCURRENCY,
    timeout_s: float = RELAY_TIMEOUT_S,
) -> List[str]:
    """Relay all file_ids and return their public URLs in input order."""
    if not file_ids:
        return []

    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def _one(file_id: str) -> str:
        async with semaphore:
            try:
                return await asyncio.wait_for(relay(file_id), timeout=timeout_s)
            except asyncio.TimeoutError:
                raise RelayError(file_id, "timed out after {}s".format(timeout_s)) from None

    tasks = [asyncio.ensure_future(_one(file_id)) for file_id in file_ids]
    try:
        await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    finally:
        pending = [t for t in tasks if not t.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    for file_id, task in zip(file_ids, tasks):
        if not task.cancelled() and task.exception() is not None:
            logger.error("Relay batch aborted by %s: %s", file_id, task.exception())
            raise task.exception()  # type: ignore[misc]

    return [task.result() for task in tasks]
