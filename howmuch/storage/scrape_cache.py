# howmuch/storage/scrape_cache.py

"""In-memory cache of scraped observations keyed by service and location."""

import logging
import time
from dataclasses import dataclass

from howmuch.config.settings import Settings
from howmuch.models.price_observation import PriceObservation

logger = logging.getLogger("howmuch.cache")


@dataclass
class CacheEntry:
    """Scraped observations and the time they were stored."""

    observations: list[PriceObservation]
    timestamp: float


class ScrapeCache:
    """Time-limited cache of scrape results.

    Entries are keyed by ``(service_id, location)`` and only checked for
    staleness when read; there is no background eviction. Owned by one
    :class:`~howmuch.services.pricing_service.PricingService`.
    """

    def __init__(self, ttl: float | None = None) -> None:
        self._entries: dict[tuple[str, str], CacheEntry] = {}
        self._ttl: float = (
            ttl if ttl is not None else Settings.SCRAPE_CACHE_TTL
        )

    def __len__(self) -> int:
        return len(self._entries)

    def get(
        self, service_id: str, location: str,
    ) -> list[PriceObservation] | None:
        """Return fresh cached observations, or ``None`` on miss/stale."""
        entry = self._entries.get((service_id, location))
        if entry is None:
            return None
        age = time.time() - entry.timestamp
        if age >= self._ttl:
            logger.debug(
                "Stale scrape cache for %s in '%s' (%.0fs old)",
                service_id,
                location,
                age,
            )
            return None
        logger.info(
            "Scrape cache hit for %s in '%s'", service_id, location,
        )
        return list(entry.observations)

    def put(
        self,
        service_id: str,
        location: str,
        observations: list[PriceObservation],
    ) -> None:
        """Store scraped observations, replacing any previous entry."""
        self._entries[(service_id, location)] = CacheEntry(
            observations=list(observations),
            timestamp=time.time(),
        )
        logger.info(
            "Cached %d scraped prices for %s in '%s'",
            len(observations),
            service_id,
            location,
        )

    def clear(self) -> int:
        """Purge all cached entries.

        Returns the number of entries that were removed.
        """
        count = len(self._entries)
        self._entries.clear()
        logger.info("Scrape cache purged (%d entries removed)", count)
        return count
