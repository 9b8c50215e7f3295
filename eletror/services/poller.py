"""Repeating refresh of the pending-registrations list for admin sessions."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)


class PendingUsersPoller:
    """
    Runs fetch() immediately and then every interval seconds until stopped.

    Each tick hands the full list to on_update, so overlapping or repeated
    ticks only cause extra reads. start() and stop() are idempotent.
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable[list[str]]],
        on_update: Callable[[list[str]], None],
        interval: float = 5.0,
    ) -> None:
        if interval <= 0:
            raise ValueError("interval must be greater than 0")
        self.fetch = fetch
        self.on_update = on_update
        self.interval = interval
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def tick(self) -> None:
        self.on_update(await self.fetch())

    async def _run(self) -> None:
        while True:
            try:
                await self.tick()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.exception("Pending users refresh failed: %s", e)
            await asyncio.sleep(self.interval)

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())
        logger.debug("Pending users polling started (interval=%ss)", self.interval)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug("Pending users polling stopped")
