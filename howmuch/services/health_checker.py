# howmuch/services/health_checker.py

"""Connectivity checks for the marketplaces and the price store."""

import asyncio
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass

from howmuch.config.settings import Settings
from howmuch.services.scrape_orchestrator import _load_scraper_class
from howmuch.storage.base_store import PriceStore

logger = logging.getLogger("howmuch.health")


@dataclass
class HealthResult:
    """Outcome of probing one marketplace or the store."""

    source_id: str
    status: str  # "ok", "slow", "down"
    latency_ms: float
    message: str


def _timed(source_id: str, check: Callable[[], str]) -> HealthResult:
    """Run *check*, timing it; any exception marks the source down."""
    start = time.monotonic()
    try:
        message = check()
    except Exception as exc:
        return HealthResult(
            source_id, "down", (time.monotonic() - start) * 1000,
            str(exc)[:80],
        )
    elapsed_ms = (time.monotonic() - start) * 1000
    if elapsed_ms > Settings.HEALTH_SLOW_MS:
        return HealthResult(source_id, "slow", elapsed_ms, "High latency")
    return HealthResult(source_id, "ok", elapsed_ms, message)


def probe_source(source: dict[str, str]) -> HealthResult:
    """GET a marketplace homepage through its scraper's session."""
    try:
        scraper = _load_scraper_class(source["scraper"])()
    except Exception as exc:
        return HealthResult(
            source["id"], "down", 0.0, f"Failed to load scraper: {exc}",
        )

    def fetch_homepage() -> str:
        homepage = scraper._get_homepage()
        resp = scraper.session.get(
            homepage,
            headers={**scraper.settings.DEFAULT_HEADERS, "Referer": homepage},
            timeout=Settings.HEALTH_TIMEOUT,
        )
        if resp.status_code != 200:
            raise ConnectionError(f"HTTP {resp.status_code}")
        return ""

    try:
        return _timed(source["id"], fetch_homepage)
    finally:
        scraper.session.close()


def probe_store(store: PriceStore | None) -> HealthResult:
    """Read the catalog back from the configured store."""
    if store is None:
        return HealthResult(
            "sample", "ok", 0.0,
            "No database configured, serving sample data",
        )
    return _timed(
        store.name, lambda: f"{len(store.list_services())} services",
    )


class HealthChecker:
    """Probes every marketplace and the store concurrently."""

    def __init__(
        self,
        store: PriceStore | None = None,
        sources: list[dict[str, str]] | None = None,
    ) -> None:
        self.store = store
        self.sources = (
            sources if sources is not None
            else Settings.AVAILABLE_SOURCES
        )

    async def check_all(self) -> list[HealthResult]:
        """Return one result per marketplace, then one for the store."""
        results: list[HealthResult] = list(
            await asyncio.gather(
                *(asyncio.to_thread(probe_source, s) for s in self.sources),
                asyncio.to_thread(probe_store, self.store),
            )
        )
        for r in results:
            log = logger.warning if r.status == "down" else logger.info
            log(
                "Health %s: %s in %.0fms %s",
                r.source_id, r.status, r.latency_ms, r.message,
            )
        return results
