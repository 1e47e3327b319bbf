# howmuch/services/pricing_service.py

"""Comprehensive pricing: scraped, sample and submitted prices in one pool."""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime

from howmuch.config.settings import Settings
from howmuch.errors import StoreError
from howmuch.models.price_observation import PriceObservation
from howmuch.models.price_summary import PriceSummary
from howmuch.services.aggregation import summarize
from howmuch.services.scrape_orchestrator import ScrapeOrchestrator
from howmuch.storage.base_store import PriceStore
from howmuch.storage.sample_store import SampleStore
from howmuch.storage.scrape_cache import ScrapeCache

logger = logging.getLogger("howmuch.pricing")


@dataclass
class ComprehensivePricing:
    """Per-source observations, their concatenation and its summary."""

    scraped: list[PriceObservation] = field(
        default_factory=lambda: list[PriceObservation]()
    )
    local: list[PriceObservation] = field(
        default_factory=lambda: list[PriceObservation]()
    )
    database: list[PriceObservation] = field(
        default_factory=lambda: list[PriceObservation]()
    )
    combined: list[PriceObservation] = field(
        default_factory=lambda: list[PriceObservation]()
    )
    summary: PriceSummary | None = None


@dataclass
class ScrapeOutcome:
    """Result of an explicit scrape-and-save run."""

    success: bool
    data_count: int
    message: str


@dataclass
class DataSourceStats:
    """Submission counts split by origin."""

    total_submissions: int
    scraped_data: int
    user_submissions: int
    last_updated: datetime


class PricingService:
    """Assembles the observation pool for one service + location.

    The three sources are queried concurrently and independently: a
    source that raises or exceeds ``SOURCE_TIMEOUT`` contributes nothing
    and the others still count. Scrape results are cached for
    ``SCRAPE_CACHE_TTL`` seconds, and fresh ones are written to the store
    in the background without holding up the summary.

    Call :meth:`close` when done to drain background writes.
    """

    def __init__(
        self,
        store: PriceStore | None = None,
        sample: SampleStore | None = None,
        orchestrator: ScrapeOrchestrator | None = None,
        cache: ScrapeCache | None = None,
    ) -> None:
        self.store = store
        self.sample = sample or SampleStore()
        self.orchestrator = orchestrator or ScrapeOrchestrator()
        self.cache = cache if cache is not None else ScrapeCache()
        self._pending: set[asyncio.Task[int]] = set()

    # ── Sources ──────────────────────────────────────────

    async def _scraped_source(
        self, service_id: str, location: str,
    ) -> tuple[list[PriceObservation], bool]:
        """Return scraped observations and whether they are fresh."""
        cached = self.cache.get(service_id, location)
        if cached is not None:
            return cached, False
        result = await self.orchestrator.scrape_all(service_id, location)
        self.cache.put(service_id, location, result.observations)
        return result.observations, True

    async def _local_source(
        self, service_id: str, location: str,
    ) -> list[PriceObservation]:
        return await asyncio.to_thread(
            self.sample.find_observations, service_id, location,
        )

    async def _database_source(
        self, service_id: str, location: str,
    ) -> list[PriceObservation]:
        if self.store is None:
            return []
        return await asyncio.to_thread(
            self.store.find_observations, service_id, location,
        )

    async def _national_average(self, service_id: str) -> float:
        """Catalog national average, store first and sample second.

        Each lookup is bounded by ``SOURCE_TIMEOUT``; a store that is
        slow or failing falls through to the sample catalog.
        """
        for store in (self.store, self.sample):
            if store is None:
                continue
            try:
                service = await asyncio.wait_for(
                    asyncio.to_thread(store.get_service, service_id),
                    Settings.SOURCE_TIMEOUT,
                )
            except (StoreError, TimeoutError) as exc:
                logger.warning(
                    "Catalog lookup on %s failed: %r", store.name, exc,
                )
                continue
            if service is not None:
                return service.national_average
        return 0.0

    @staticmethod
    def _failed(name: str, outcome: object) -> bool:
        """Log a source that raised or timed out."""
        if isinstance(outcome, BaseException):
            logger.error(
                "Price source '%s' failed: %r",
                name,
                outcome,
                exc_info=outcome,
            )
            return True
        return False

    # ── Background persistence ───────────────────────────

    async def _persist(
        self, observations: list[PriceObservation],
    ) -> int:
        if self.store is None:
            return 0
        try:
            return await asyncio.to_thread(
                self.store.insert_observations,
                observations,
                Settings.SCRAPER_SOURCE_TAG,
            )
        except Exception as exc:
            logger.error(
                "Saving %d scraped prices failed: %s",
                len(observations),
                exc,
                exc_info=True,
            )
            return 0

    def _persist_in_background(
        self, observations: list[PriceObservation],
    ) -> None:
        if self.store is None or not observations:
            return
        task = asyncio.create_task(self._persist(observations))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    # ── Public API ───────────────────────────────────────

    async def get_comprehensive_pricing(
        self, service_id: str, location: str,
    ) -> ComprehensivePricing:
        """Pool every source for a query and summarise the result."""
        timeout = Settings.SOURCE_TIMEOUT
        (
            scraped_out, local_out, database_out, national_out,
        ) = await asyncio.gather(
            asyncio.wait_for(
                self._scraped_source(service_id, location), timeout
            ),
            asyncio.wait_for(
                self._local_source(service_id, location), timeout
            ),
            asyncio.wait_for(
                self._database_source(service_id, location), timeout
            ),
            self._national_average(service_id),
            return_exceptions=True,
        )

        pricing = ComprehensivePricing()
        if not self._failed("scraped", scraped_out):
            pricing.scraped, fresh = scraped_out
            if fresh:
                self._persist_in_background(pricing.scraped)
        if not self._failed("local", local_out):
            pricing.local = local_out
        if not self._failed("database", database_out):
            pricing.database = database_out
        pricing.combined = pricing.scraped + pricing.local + pricing.database

        national = 0.0
        if not self._failed("catalog", national_out):
            national = national_out
        pricing.summary = summarize(
            pricing.combined, service_id, location, national,
        )
        logger.info(
            "Comprehensive pool for %s in '%s': "
            "%d scraped, %d local, %d database",
            service_id,
            location,
            len(pricing.scraped),
            len(pricing.local),
            len(pricing.database),
        )
        return pricing

    async def scrape_and_save(
        self, service_id: str, location: str,
    ) -> ScrapeOutcome:
        """Scrape all marketplaces now and persist what was found."""
        result = await self.orchestrator.scrape_all(service_id, location)
        if not result.observations:
            return ScrapeOutcome(
                success=False,
                data_count=0,
                message="No pricing data found from web scraping",
            )
        self.cache.put(service_id, location, result.observations)
        if self.store is not None:
            try:
                await asyncio.to_thread(
                    self.store.insert_observations,
                    result.observations,
                    Settings.SCRAPER_SOURCE_TAG,
                )
            except StoreError as exc:
                logger.error("Saving scraped prices failed: %s", exc)
                return ScrapeOutcome(
                    success=False,
                    data_count=len(result.observations),
                    message=f"Scraped but not saved: {exc}",
                )
        return ScrapeOutcome(
            success=True,
            data_count=len(result.observations),
            message=(
                f"Successfully scraped {len(result.observations)} prices "
                f"from {result.successful_sources} sources"
            ),
        )

    async def data_source_stats(self) -> DataSourceStats:
        """Count stored submissions by origin."""
        empty = DataSourceStats(0, 0, 0, datetime.now())
        if self.store is None:
            return empty
        try:
            counts, latest = await asyncio.to_thread(
                self.store.source_counts
            )
        except StoreError as exc:
            logger.error("Data source stats failed: %s", exc)
            return empty
        scraped = counts.get(Settings.SCRAPER_SOURCE_TAG, 0)
        total = sum(counts.values())
        return DataSourceStats(
            total_submissions=total,
            scraped_data=scraped,
            user_submissions=total - scraped,
            last_updated=latest or datetime.now(),
        )

    async def close(self) -> None:
        """Wait for background writes, then drop cached scrape results."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        self.cache.clear()
