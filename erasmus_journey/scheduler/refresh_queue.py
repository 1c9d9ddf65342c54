"""Erasmus Journey — Background Refresh Queue.

Stale-while-revalidate: the read path enqueues a destination id and returns
the cached snapshot right away. A single worker task drains the queue and
recomputes aggregations. Failures are logged and dropped; a later read can
enqueue the destination again.
"""

import asyncio
import time
from typing import Awaitable, Callable, Optional, Set

from erasmus_journey.core.logging import get_logger

logger = get_logger("scheduler.refresh")

RefreshHandler = Callable[[str], Awaitable[object]]


class RefreshQueue:
    """asyncio queue of destination ids awaiting recomputation."""

    def __init__(self, handler: RefreshHandler):
        self._handler = handler
        self._queue: asyncio.Queue = asyncio.Queue()
        self._pending: Set[str] = set()
        self._worker: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def enqueue(self, destination_id: str) -> bool:
        """Schedule a refresh without waiting. False if already pending."""
        if destination_id in self._pending:
            return False
        self._pending.add(destination_id)
        self._queue.put_nowait(destination_id)
        logger.info(
            "Refresh enqueued",
            extra={"destination_id": destination_id},
        )
        return True

    def start(self) -> None:
        """Start the worker on the running event loop."""
        if self.running:
            return
        self._worker = asyncio.get_running_loop().create_task(self._run())
        logger.info("Refresh worker started")

    async def stop(self) -> None:
        if self._worker is None:
            return
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None
        logger.info("Refresh worker stopped")

    async def join(self) -> None:
        """Wait until every enqueued refresh has been attempted."""
        await self._queue.join()

    async def _run(self) -> None:
        while True:
            destination_id = await self._queue.get()
            started = time.perf_counter()
            try:
                await self._handler(destination_id)
                logger.info(
                    "Refresh complete",
                    extra={
                        "destination_id": destination_id,
                        "duration_ms": round((time.perf_counter() - started) * 1000, 1),
                    },
                )
            except Exception as e:
                logger.error(
                    f"Background refresh failed: {e}",
                    extra={"destination_id": destination_id},
                )
            finally:
                self._pending.discard(destination_id)
                self._queue.task_done()
