# howmuch/services/scrape_orchestrator.py

"""Runs every marketplace scraper for one query and merges the results."""

import asyncio
import importlib
import logging
from dataclasses import dataclass, field
from typing import Any

from howmuch.config.settings import Settings
from howmuch.filters.price_validator import PriceValidator
from howmuch.models.price_observation import PriceObservation

logger = logging.getLogger("howmuch.orchestrator")


@dataclass
class ScrapeResult:
    """Container for one scrape across all marketplace sources."""

    service_id: str
    location: str
    observations: list[PriceObservation] = field(
        default_factory=lambda: list[PriceObservation]()
    )
    total_sources: int = 0
    successful_sources: int = 0
    errors: list[str] = field(
        default_factory=lambda: list[str]()
    )

    @property
    def prices(self) -> list[float]:
        """Positive prices across all observations."""
        return [o.price for o in self.observations if o.price > 0]

    @property
    def average_price(self) -> float:
        """Mean scraped price, ``0.0`` when nothing was found."""
        prices = self.prices
        return sum(prices) / len(prices) if prices else 0.0

    @property
    def min_price(self) -> float:
        """Lowest scraped price, ``0.0`` when nothing was found."""
        return min(self.prices, default=0.0)

    @property
    def max_price(self) -> float:
        """Highest scraped price, ``0.0`` when nothing was found."""
        return max(self.prices, default=0.0)


def _load_scraper_class(dotted_path: str) -> type[Any]:
    """Dynamically import a scraper class from its dotted module path."""
    module_path, class_name = dotted_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    cls: type[Any] = getattr(module, class_name)
    return cls


class ScrapeOrchestrator:
    """Dispatches the registered scrapers concurrently.

    Scraper instances are created on first use and kept, so each keeps
    its own rate limiter across queries.
    """

    def __init__(
        self,
        sources: list[dict[str, str]] | None = None,
    ) -> None:
        self.sources = (
            sources if sources is not None
            else Settings.AVAILABLE_SOURCES
        )
        self._scrapers: dict[str, Any] = {}

    def _scraper_for(self, source: dict[str, str]) -> Any:
        scraper = self._scrapers.get(source["id"])
        if scraper is None:
            scraper = _load_scraper_class(source["scraper"])()
            self._scrapers[source["id"]] = scraper
        return scraper

    async def _run_one(
        self,
        source: dict[str, str],
        service_id: str,
        location: str,
    ) -> list[PriceObservation]:
        scraper = self._scraper_for(source)
        observations: list[PriceObservation] = await asyncio.wait_for(
            asyncio.to_thread(scraper.search, service_id, location),
            timeout=Settings.SOURCE_TIMEOUT,
        )
        return observations

    async def scrape_all(
        self, service_id: str, location: str,
    ) -> ScrapeResult:
        """Scrape every source; failures are recorded, never raised."""
        result = ScrapeResult(
            service_id=service_id,
            location=location,
            total_sources=len(self.sources),
        )
        batches = await asyncio.gather(
            *(
                self._run_one(src, service_id, location)
                for src in self.sources
            ),
            return_exceptions=True,
        )

        for src, batch in zip(self.sources, batches):
            if isinstance(batch, BaseException):
                message = (
                    f"{src['id']}: {type(batch).__name__} {batch}".strip()
                )
                result.errors.append(message)
                logger.error(
                    "Scraper %s failed for %s in '%s': %r",
                    src["id"],
                    service_id,
                    location,
                    batch,
                    exc_info=batch,
                )
                continue
            result.successful_sources += 1
            result.observations.extend(batch)

        result.observations, _ = PriceValidator.validate(
            result.observations
        )
        logger.info(
            "Scraped %d prices for %s in '%s' from %d/%d sources",
            len(result.observations),
            service_id,
            location,
            result.successful_sources,
            result.total_sources,
        )
        return result
