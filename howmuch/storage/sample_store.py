# howmuch/storage/sample_store.py

"""In-memory store seeded from the static sample catalog."""

import itertools
import logging
from datetime import datetime

from howmuch.data import sample_data
from howmuch.filters.location_matcher import filter_by_location
from howmuch.models.price_observation import PriceObservation
from howmuch.models.service import Service
from howmuch.storage.base_store import PriceStore

logger = logging.getLogger("howmuch.store.sample")


class SampleStore(PriceStore):
    """Fallback store backed by static sample data.

    Submissions are kept in memory for the lifetime of the process so a
    price entered without a database still shows up in later queries.
    Never raises.
    """

    name = "sample"

    def __init__(
        self,
        services: list[Service] | None = None,
        observations: list[PriceObservation] | None = None,
    ) -> None:
        self._services = sorted(
            services if services is not None else sample_data.SERVICES,
            key=lambda s: s.name,
        )
        seed = (
            observations
            if observations is not None
            else sample_data.OBSERVATIONS
        )
        loaded_at = datetime.now()
        self._entries: list[tuple[PriceObservation, datetime]] = [
            (o, loaded_at) for o in seed
        ]
        self._ids = itertools.count(len(self._entries) + 1)

    def list_services(self) -> list[Service]:
        return list(self._services)

    def get_service(self, service_id: str) -> Service | None:
        return next(
            (s for s in self._services if s.id == service_id), None,
        )

    def list_services_by_category(
        self, category: str,
    ) -> list[Service]:
        return [s for s in self._services if s.category == category]

    def insert_observations(
        self,
        observations: list[PriceObservation],
        source: str,
    ) -> int:
        now = datetime.now()
        for o in observations:
            stored = PriceObservation(
                id=f"local_{next(self._ids)}",
                service_id=o.service_id,
                location=o.location,
                price=o.price,
                date=o.date,
                description=o.description,
                source=source,
            )
            self._entries.append((stored, now))
        logger.info(
            "Kept %d %s observations in memory",
            len(observations),
            source,
        )
        return len(observations)

    def find_observations(
        self, service_id: str, location_query: str,
    ) -> list[PriceObservation]:
        newest_first = sorted(
            self._entries, key=lambda e: e[1], reverse=True,
        )
        return filter_by_location(
            [o for o, _ in newest_first], service_id, location_query,
        )

    def source_counts(
        self,
    ) -> tuple[dict[str, int], datetime | None]:
        counts: dict[str, int] = {}
        for o, _ in self._entries:
            counts[o.source] = counts.get(o.source, 0) + 1
        latest = max((ts for _, ts in self._entries), default=None)
        return counts, latest
