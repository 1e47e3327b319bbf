# howmuch/services/query_service.py

"""Query interface used by the presentation layer."""

import asyncio
import logging

from howmuch.data.sample_data import CATEGORY_NAMES
from howmuch.errors import StoreError
from howmuch.models.price_observation import (
    PriceObservation,
    PriceSubmission,
)
from howmuch.models.price_summary import PriceSummary
from howmuch.models.service import Service, ServiceCategory
from howmuch.services.aggregation import summarize
from howmuch.services.fallback import with_fallback
from howmuch.storage.base_store import PriceStore
from howmuch.storage.sample_store import SampleStore

logger = logging.getLogger("howmuch.query")


class PriceQueryService:
    """Catalog browsing, price lookups and submissions.

    Reads go to the configured store and fall back to sample data when
    it is missing or unreachable. Missing data comes back as ``None`` or
    an empty list, never as an exception.
    """

    def __init__(
        self,
        store: PriceStore | None = None,
        sample: SampleStore | None = None,
    ) -> None:
        self.store = store
        self.sample = sample or SampleStore()

    async def list_services(self) -> list[Service]:
        """Return every catalog service."""
        return await with_fallback(
            self.store, self.sample,
            lambda s: s.list_services(),
            "list_services",
        )

    async def get_service(self, service_id: str) -> Service | None:
        """Return one service, or ``None`` if it is not in the catalog."""
        return await with_fallback(
            self.store, self.sample,
            lambda s: s.get_service(service_id),
            "get_service",
        )

    async def list_services_by_category(
        self, category: str,
    ) -> list[Service]:
        """Return the services of one category."""
        return await with_fallback(
            self.store, self.sample,
            lambda s: s.list_services_by_category(category),
            "list_services_by_category",
        )

    async def list_categories(self) -> list[ServiceCategory]:
        """Group the catalog into the fixed category table."""
        services = await self.list_services()
        return [
            ServiceCategory(
                id=category_id,
                name=name,
                services=[s for s in services if s.category == category_id],
            )
            for category_id, name in CATEGORY_NAMES.items()
        ]

    async def submit_price(self, submission: PriceSubmission) -> bool:
        """Record a user's price; ``False`` when it could not be saved."""
        if submission.price <= 0:
            logger.warning(
                "Rejected non-positive price %.2f for %s",
                submission.price,
                submission.service_id,
            )
            return False

        target = self.store or self.sample
        try:
            await asyncio.to_thread(
                target.insert_observations,
                [submission.to_observation()],
                "user",
            )
        except StoreError as exc:
            logger.error(
                "Price submission for %s failed: %s",
                submission.service_id,
                exc,
            )
            return False
        logger.info(
            "Price %.2f submitted for %s in %s (%s)",
            submission.price,
            submission.service_id,
            submission.location.label(),
            target.name,
        )
        return True

    async def get_price_observations(
        self, service_id: str, location_query: str,
    ) -> list[PriceObservation]:
        """Return observations for a service matching a location query."""
        return await with_fallback(
            self.store, self.sample,
            lambda s: s.find_observations(service_id, location_query),
            "get_price_observations",
        )

    async def get_price_summary(
        self, service_id: str, location_query: str,
    ) -> PriceSummary | None:
        """Summarise a service's prices near a location.

        ``None`` when the service is unknown or no prices match.
        """
        observations = await self.get_price_observations(
            service_id, location_query
        )
        if not observations:
            return None
        service = await self.get_service(service_id)
        if service is None:
            return None
        return summarize(
            observations,
            service_id,
            location_query,
            service.national_average,
        )
