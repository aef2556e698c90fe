"""Status read-model: interval polling and push subscriptions."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Awaitable, Callable

from speechcoach.core.constants import DEFAULT_STATUS_POLL_INTERVAL_SEC, TERMINAL_STATUSES
from speechcoach.db.repository import Repository


async def poll_status(
    repo: Repository,
    recording_id: str,
    interval: float = DEFAULT_STATUS_POLL_INTERVAL_SEC,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> AsyncIterator[str]:
    """Yield the recording's status each time it changes, ending after a terminal one."""
    last: str | None = None
    while True:
        status = repo.get_status(recording_id)
        if status != last:
            last = status
            yield status
        if status in TERMINAL_STATUSES:
            return
        await sleep(interval)


class StatusTracker:
    """Push-based status updates fed by repository listeners."""

    def __init__(self, repo: Repository):
        self.repo = repo

    async def subscribe(self, recording_id: str) -> AsyncIterator[str]:
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue[str] = asyncio.Queue()

        def listener(changed_id: str, status: str) -> None:
            if changed_id == recording_id:
                loop.call_soon_threadsafe(queue.put_nowait, status)

        self.repo.add_status_listener(listener)
        try:
            last = self.repo.get_status(recording_id)
            yield last
            while last not in TERMINAL_STATUSES:
                status = await queue.get()
                # Already reported by the initial read.
                if status == last:
                    continue
                last = status
                yield status
        finally:
            self.repo.remove_status_listener(listener)

    async def wait_for_terminal(self, recording_id: str, timeout: float | None = None) -> str:
        """Block until the recording is completed or failed; returns that status."""

        async def _wait() -> str:
            status = ""
            async for status in self.subscribe(recording_id):
                pass
            return status

        return await asyncio.wait_for(_wait(), timeout)
