"""Backup Scheduler: asyncio daemon that periodically backs up every store."""

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from resource_api.application.interfaces import EntityStore

logger = logging.getLogger(__name__)

SECONDS_PER_HOUR = 60 * 60


class BackupScheduler:
    """Calls ``backup()`` on each registered store every ``interval_hours``.

    Runs as an asyncio.Task inside FastAPI's lifespan. A store whose backup
    fails is logged and skipped; the remaining stores and later runs still go
    ahead.
    """

    def __init__(
        self,
        stores: Mapping[str, EntityStore[Any]],
        interval_hours: float,
    ) -> None:
        self._stores = dict(stores)
        self._interval_seconds = interval_hours * SECONDS_PER_HOUR
        self._running = False
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Start the backup loop."""
        self._running = True
        self._task = asyncio.create_task(self._loop())
        logger.info(
            "BackupScheduler started (%d stores, every %ss)",
            len(self._stores),
            self._interval_seconds,
        )

    async def stop(self) -> None:
        """Gracefully stop the backup loop."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("BackupScheduler stopped")

    async def run_backups(self) -> int:
        """Back up every store once. Returns the number of stores that failed."""
        failures = 0
        for name, store in self._stores.items():
            try:
                await store.backup()
            except Exception:
                failures += 1
                logger.exception("Backup of store '%s' failed", name)
        return failures

    async def _loop(self) -> None:
        """Main loop: sleeps for one interval, then runs every backup."""
        while self._running:
            try:
                await asyncio.sleep(self._interval_seconds)
                await self.run_backups()
            except asyncio.CancelledError:
                break
