"""Polling watcher that re-syncs when the source file changes.

The watcher polls the source file's modification time. A change starts (or
restarts) a debounce delay; the sync runs once the source has been quiet for
that long, so a burst of saves produces a single sync. Only one sync runs at a
time and a failed sync does not stop the watcher.
"""

import logging
import time
from collections.abc import Callable
from pathlib import Path

from page_sync.models import SyncReport
from page_sync.orchestrator import SyncOrchestrator

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 0.5
DEFAULT_DEBOUNCE_DELAY = 1.0


class SourceWatcher:
    """Watches a source file and syncs the target after changes settle."""

    def __init__(  # noqa: PLR0913 - clock and sleep are injectable for tests
        self,
        source_path: Path,
        target_path: Path,
        orchestrator: SyncOrchestrator,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        debounce_delay: float = DEFAULT_DEBOUNCE_DELAY,
        on_report: Callable[[SyncReport], None] | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialise the watcher.

        Args:
            source_path: File to watch
            target_path: File to sync into
            orchestrator: Orchestrator that performs each sync
            poll_interval: Seconds between modification time checks
            debounce_delay: Quiet period required before syncing
            on_report: Called with the report of every successful sync
            clock: Monotonic time source
            sleep: Sleep function used between polls

        """
        self._source_path = source_path
        self._target_path = target_path
        self._orchestrator = orchestrator
        self._poll_interval = poll_interval
        self._debounce_delay = debounce_delay
        self._on_report = on_report
        self._clock = clock
        self._sleep = sleep

        self._last_mtime = self._mtime()
        self._pending_since: float | None = None
        self.sync_count = 0

    def _mtime(self) -> float | None:
        try:
            return self._source_path.stat().st_mtime
        except OSError:
            return None

    @property
    def pending(self) -> bool:
        """Whether a change has been seen but not yet synced."""
        return self._pending_since is not None

    def sync_now(self) -> SyncReport | None:
        """Run one sync, logging (not raising) any failure."""
        self.sync_count += 1
        try:
            report = self._orchestrator.sync(self._source_path, self._target_path)
        except Exception as e:
            logger.error("Sync failed: %s", e)
            return None

        if self._on_report is not None:
            self._on_report(report)
        return report

    def poll(self, now: float | None = None) -> SyncReport | None:
        """Check the source once and sync if a change has settled.

        Args:
            now: Current time (from the clock if None)

        Returns:
            The report of a sync run by this poll, or None

        """
        now = self._clock() if now is None else now

        mtime = self._mtime()
        if mtime != self._last_mtime:
            self._last_mtime = mtime
            self._pending_since = now
            logger.debug("Change detected in %s", self._source_path)

        if self._pending_since is None or now - self._pending_since < self._debounce_delay:
            return None

        self._pending_since = None
        logger.info("%s changed, syncing to %s", self._source_path, self._target_path)
        return self.sync_now()

    def run(self) -> None:
        """Sync once, then poll until interrupted."""
        logger.info("Watching for changes in %s", self._source_path)
        logger.info("Performing initial sync")
        self.sync_now()

        try:
            while True:
                self._sleep(self._poll_interval)
                self.poll()
        except KeyboardInterrupt:
            logger.info("Stopping file watcher")
