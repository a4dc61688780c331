"""
Pacing - Blocking delays between requests on the crawling thread.

Implements a fixed delay between fetches. Waiting happens on an Event so
that another thread can interrupt a sleeping crawl; an interrupted sleep is
a request to stop crawling, not an error.
"""

import logging
import threading
import time
from typing import Callable, Optional


class Pacer:
    """
    Fixed delay pacer.

    ``sleep`` always waits the full interval it is given. ``wait_turn``
    enforces a minimum time between successive fetches, sleeping only the
    remaining deficit since the last ``mark``.
    """

    def __init__(self, interval_seconds: float = 0.0,
                 clock: Callable[[], float] = time.monotonic):
        self.interval_seconds = max(interval_seconds, 0.0)
        self.clock = clock
        self.last_fetch_time: Optional[float] = None
        self.total_slept = 0.0
        self._interrupted = threading.Event()
        self.logger = logging.getLogger(self.__class__.__name__)

    @property
    def interrupted(self) -> bool:
        return self._interrupted.is_set()

    def interrupt(self):
        """Wake up any sleeping crawl and make every further sleep fail."""
        self._interrupted.set()

    def sleep(self, seconds: float) -> bool:
        """
        Block the crawling thread.

        Args:
            seconds: Time to wait; non-positive values return immediately

        Returns:
            False if the wait was interrupted, True otherwise
        """
        if self.interrupted:
            return False

        if seconds <= 0:
            return True

        self.logger.debug(f"Sleeping {seconds:.3f}s")
        try:
            if self._interrupted.wait(seconds):
                self.logger.info("Sleep interrupted, stopping crawl")
                return False
        except KeyboardInterrupt:
            self.logger.info("Sleep interrupted by user, stopping crawl")
            self._interrupted.set()
            return False

        self.total_slept += seconds
        return True

    def wait_turn(self) -> bool:
        """
        Wait until the interval since the previous fetch has elapsed.

        Returns:
            False if the wait was interrupted, True otherwise
        """
        if self.interrupted:
            return False

        if self.last_fetch_time is not None and self.interval_seconds > 0:
            elapsed = self.clock() - self.last_fetch_time
            if elapsed < self.interval_seconds:
                if not self.sleep(self.interval_seconds - elapsed):
                    return False

        self.mark()
        return True

    def mark(self):
        """Record that a fetch is starting now."""
        self.last_fetch_time = self.clock()
