"""
nftgate.core.sweeper — Session Expiry Sweep
============================================

Bounds memory growth by deleting sessions idle for longer than the session
timeout (24 h by default).  Runs as a background asyncio task in the API
process on a fixed interval (1 h by default) and is cancelled on shutdown.

The scan works on a snapshot of the store, and each deletion re-checks
``last_activity`` under the store lock, so concurrent requests are only
ever blocked for a single in-memory delete.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from nftgate.constants import DEFAULT_SWEEP_INTERVAL_MINUTES, SESSION_TIMEOUT_MS
from nftgate.core.models import now_ms
from nftgate.core.sessions import SessionStore

logger = logging.getLogger(__name__)


class ExpirySweeper:
    """Periodic expiry pass over a :class:`SessionStore`."""

    def __init__(
        self,
        store: SessionStore,
        timeout_ms: int = SESSION_TIMEOUT_MS,
        interval_seconds: float = DEFAULT_SWEEP_INTERVAL_MINUTES * 60,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.store = store
        self.timeout_ms = timeout_ms
        self.interval_seconds = interval_seconds
        self._clock = clock
        self._task: asyncio.Task | None = None

    def sweep_once(self, now: int | None = None) -> list[str]:
        """Delete every session idle longer than the timeout.

        Returns the ids that were removed.
        """
        if now is None:
            now = self._clock()
        cutoff = now - self.timeout_ms

        expired: list[str] = []
        for session in self.store.snapshot():
            if session.last_activity < cutoff and self.store.expire(session.id, cutoff):
                logger.info("Cleaning up expired session: %s", session.id)
                expired.append(session.id)

        if expired:
            logger.info(
                "Expiry sweep removed %d session(s), %d remain",
                len(expired), len(self.store),
            )
        return expired

    def start(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        """Start the background sweep task (idempotent)."""
        if self._task is not None:
            return

        async def _sweep_loop() -> None:
            while True:
                await asyncio.sleep(self.interval_seconds)
                try:
                    self.sweep_once()
                except Exception:
                    logger.exception("Expiry sweep error", extra={"task": "expiry_sweep"})

        loop = loop or asyncio.get_running_loop()
        self._task = loop.create_task(_sweep_loop(), name="session-expiry-sweep")

    def stop(self) -> None:
        """Cancel the sweep task."""
        if self._task:
            self._task.cancel()
            self._task = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()
