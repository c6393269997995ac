"""
Background expiry sweep.

Best-effort housekeeping only: correctness never depends on it, because
the registry checks expiry on every lookup. Deleting rows that are
already gone is a no-op, so overlapping or repeated sweeps are safe.
"""

import asyncio
import logging
from typing import Optional

from shared.exceptions import QHubError

from .interfaces import ISessionRegistry

logger = logging.getLogger(__name__)


class SessionSweeper:
    """Runs ``registry.sweep_expired()`` every ``interval_seconds``."""

    def __init__(self, registry: ISessionRegistry, interval_seconds: int):
        self._registry = registry
        self._interval = interval_seconds
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self._interval <= 0 or self.running:
            return
        self._task = asyncio.create_task(self._run(), name="session-sweeper")
        logger.info("Session sweeper started (every %ds)", self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Session sweeper stopped")

    async def run_once(self) -> int:
        try:
            return await self._registry.sweep_expired()
        except QHubError as e:
            # Next tick retries; lookups stay correct meanwhile
            logger.warning("Session sweep failed: %s", e.message)
            return 0

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            await self.run_once()
