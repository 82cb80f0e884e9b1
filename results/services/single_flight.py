"""
Single-flight guard for scrape cycles.

At most one call runs at a time. While it runs, one more caller asking for
the same key may wait for it and share its result; every other caller fails
fast with ScraperBusyError.
"""

import logging
import threading
from typing import Any, Callable, Optional

from results.services.lottery_scraper import ScraperBusyError

logger = logging.getLogger(__name__)


class _Flight:
    def __init__(self, key: str):
        self.key = key
        self.done = threading.Event()
        self.result: Any = None
        self.error: Optional[BaseException] = None
        self.waiters = 0


class SingleFlight:
    def __init__(self, max_waiters: int = 1):
        self.max_waiters = max_waiters
        self._lock = threading.Lock()
        self._flight: Optional[_Flight] = None

    @property
    def is_running(self) -> bool:
        return self._flight is not None

    @property
    def current_key(self) -> Optional[str]:
        flight = self._flight
        return flight.key if flight else None

    def run(self, key: str, fn: Callable[[], Any], join: bool = True, timeout: Optional[float] = None) -> Any:
        """
        Run ``fn`` unless a call is already in flight

        Args:
            key: Identifies what the call computes; only equal keys may join
            fn: The work to run
            join: Whether to wait for an in-flight call with the same key
            timeout: Seconds a joining caller waits before giving up

        Raises:
            ScraperBusyError: If the call can neither run nor join
        """
        with self._lock:
            flight = self._flight
            if flight is None:
                flight = self._flight = _Flight(key)
                leader = True
            elif join and flight.key == key and flight.waiters < self.max_waiters:
                flight.waiters += 1
                leader = False
            else:
                raise ScraperBusyError(f"A scrape is already in progress ({flight.key})")

        if leader:
            try:
                flight.result = fn()
                return flight.result
            except BaseException as e:
                flight.error = e
                raise
            finally:
                with self._lock:
                    self._flight = None
                flight.done.set()

        logger.info(f"Joining in-flight scrape ({key})")
        if not flight.done.wait(timeout):
            raise ScraperBusyError(f"Timed out waiting for the in-flight scrape ({key})")
        if flight.error is not None:
            raise flight.error
        return flight.result
