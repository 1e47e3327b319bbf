# howmuch/scrapers/rate_limiter.py

"""Minimum-interval throttle for polite scraping."""

import threading
import time


class RateLimiter:
    """Thread-safe throttle spacing calls by ``1 / requests_per_second``.

    Each scraper owns one; limits are not shared across scrapers.
    """

    def __init__(self, requests_per_second: float = 2.0) -> None:
        self._interval = 1.0 / max(requests_per_second, 0.001)
        self._last_request_time: float = 0.0
        self._lock = threading.Lock()

    @property
    def interval(self) -> float:
        """Minimum seconds between two calls."""
        return self._interval

    def wait(self) -> None:
        """Block until the next request is allowed."""
        with self._lock:
            elapsed = time.monotonic() - self._last_request_time
            if elapsed < self._interval:
                time.sleep(self._interval - elapsed)
            self._last_request_time = time.monotonic()
