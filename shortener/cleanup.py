"""Periodic purge of expired short URLs."""

import asyncio
import logging
from typing import Optional

from .service import URLShortenerService


class ExpiryCleanupTask:
    """Run the expiry sweep on a fixed interval in the background.

    Sweeps run sequentially inside one task, so two sweeps never overlap.
    """

    def __init__(
        self,
        service: URLShortenerService,
        interval_seconds: float = 3600,
        logger: Optional[logging.Logger] = None,
    ):
        self.service = service
        self.interval_seconds = interval_seconds
        self.logger = logger or logging.getLogger(__name__)
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run_once(self) -> int:
        """Run a single sweep.

        Returns:
            Number of records removed
        """
        self.logger.info("Running scheduled cleanup of expired URLs")
        removed = await self.service.cleanup_expired()
        if removed:
            self.logger.info(f"Cleanup completed: {removed} expired URLs removed")
        return removed

    def start(self) -> None:
        """Start the sweep loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._loop(), name="expiry-cleanup")
        self.logger.info(f"Expiry cleanup scheduled every {self.interval_seconds}s")

    async def stop(self) -> None:
        """Cancel the sweep loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        self.logger.info("Expiry cleanup stopped")

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await self.run_once()
            except Exception:
                self.logger.exception("Expiry cleanup failed")
