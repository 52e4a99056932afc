"""Log Cycler: periodically rotates the application log file by size."""

import asyncio
import logging
import os
from logging.handlers import RotatingFileHandler

logger = logging.getLogger(__name__)


class LogCycler:
    """Rotates ``app.log`` to ``app.log.1`` (and so on) once it reaches ``max_bytes``.

    The handler is created with size-based rollover disabled; this task is the
    only thing that rotates it. A log file deleted from under the process is
    reopened on the next cycle.
    """

    def __init__(
        self,
        handler: RotatingFileHandler,
        max_bytes: int,
        interval_minutes: float = 60,
    ) -> None:
        self._handler = handler
        self._max_bytes = max_bytes
        self._interval_seconds = interval_minutes * 60
        self._running = False
        self._task: asyncio.Task | None = None

    async def start(self) -> None:
        self._running = True
        self._task = asyncio.create_task(self._loop())
        logger.info("LogCycler started for %s", self._handler.baseFilename)

    async def stop(self) -> None:
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("LogCycler stopped")

    async def cycle(self) -> bool:
        """Rotate the log file if it is too large. Returns True when it rotated."""
        path = self._handler.baseFilename

        if not os.path.exists(path):
            self._reopen()
            logger.warning("Log file %s was missing; reopened it", path)
            return False

        size = os.path.getsize(path)
        if size < self._max_bytes:
            return False

        self._handler.acquire()
        try:
            self._handler.doRollover()
        finally:
            self._handler.release()
        logger.info("Rotated %s at %d bytes", path, size)
        return True

    def _reopen(self) -> None:
        # FileHandler.emit opens a fresh stream when ``stream`` is None
        self._handler.acquire()
        try:
            if self._handler.stream:
                self._handler.stream.close()
            self._handler.stream = None
        finally:
            self._handler.release()

    async def _loop(self) -> None:
        while self._running:
            try:
                await asyncio.sleep(self._interval_seconds)
                await self.cycle()
            except asyncio.CancelledError:
                break
            except Exception:
                logger.exception("Log cycling failed")
