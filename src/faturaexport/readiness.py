"""
Polling readiness watcher.

Statement pages render their components some time after load. The watcher
polls a probe until it reports the page ready, the timeout elapses or the
watch is cancelled.
"""

import logging
import threading
import time
from collections.abc import Callable

from .exporter import parse_html
from .table_resolver import TableResolver

logger = logging.getLogger(__name__)

Probe = Callable[[], bool]


def snapshot_probe(load_html: Callable[[], str | bytes], resolver: TableResolver) -> Probe:
    """Build a probe that re-reads the page markup and checks it for readiness."""

    def probe() -> bool:
        return resolver.is_ready(parse_html(load_html()))

    return probe


class PollingReadinessWatcher:
    """Polls a probe at a fixed interval until ready, timed out or cancelled."""

    def __init__(self, interval: float = 3.0, timeout: float = 60.0):
        self.interval = interval
        self.timeout = timeout
        self._cancelled = threading.Event()

    def start(self, probe: Probe) -> bool:
        """
        Block until the probe reports ready.

        Args:
            probe: Zero-argument callable returning True once the page is ready

        Returns:
            True when ready, False on timeout or cancellation
        """
        self._cancelled.clear()
        deadline = time.monotonic() + self.timeout
        attempt = 0

        while not self._cancelled.is_set():
            attempt += 1
            if probe():
                logger.debug(f"Page ready after {attempt} checks")
                return True

            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logger.info(f"Page not ready after {self.timeout}s, giving up")
                return False

            self._cancelled.wait(min(self.interval, remaining))

        logger.debug("Readiness watch cancelled")
        return False

    def cancel(self) -> None:
        """Stop a running watch; start() returns False promptly."""
        self._cancelled.set()
