# howmuch/scrapers/base_scraper.py

"""Abstract base class for all marketplace price scrapers."""

import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Any

import cloudscraper  # type: ignore[import-untyped]
from bs4 import BeautifulSoup
from curl_cffi import requests as curl_requests

from howmuch.config.settings import Settings
from howmuch.filters.location_matcher import parse_location
from howmuch.models.location import Location
from howmuch.models.price_observation import PriceObservation
from howmuch.scrapers.price_extraction import extract_price, is_plausible
from howmuch.scrapers.rate_limiter import RateLimiter


class BaseScraper(ABC):
    """Fetch a marketplace page and turn its price text into observations.

    Subclasses supply the page URL and the parsing rules; this class
    handles throttling, timeouts, retries and the cloudscraper fallback.
    """

    def __init__(
        self,
        source_name: str,
        label: str,
        rate_limit: float | None = None,
    ) -> None:
        self.source_name = source_name
        self.label = label
        self.logger = logging.getLogger(f"howmuch.{source_name}")
        self.settings = Settings()
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self.rate_limiter = RateLimiter(
            rate_limit or self.settings.SCRAPE_RATE_LIMIT
        )
        self._request_timeout: int = self.settings.REQUEST_TIMEOUT

    def _fetch_get(
        self,
        url: str,
        headers: dict[str, str],
    ) -> curl_requests.Response | None:
        """GET through the impersonating session, retrying non-200s."""
        for attempt in range(1, self.settings.MAX_RETRIES + 1):
            self.rate_limiter.wait()
            try:
                resp = self.session.get(
                    url, headers=headers, timeout=self._request_timeout,
                )
            except Exception as exc:
                self.logger.warning(
                    "[%s] %s failed (attempt %d/%d): %s",
                    self.source_name,
                    url,
                    attempt,
                    self.settings.MAX_RETRIES,
                    exc,
                )
                continue
            if resp.status_code == 200:
                return resp
            self.logger.warning(
                "[%s] %s answered HTTP %d (attempt %d/%d)",
                self.source_name,
                url,
                resp.status_code,
                attempt,
                self.settings.MAX_RETRIES,
            )
        return None

    def _fetch_challenged(
        self, url: str, headers: dict[str, str],
    ) -> str | None:
        """Last resort for pages behind a JavaScript challenge."""
        self.rate_limiter.wait()
        solver: Any = cloudscraper.create_scraper()
        try:
            resp: Any = solver.get(
                url, headers=headers, timeout=self._request_timeout,
            )
        except Exception as exc:
            self.logger.error(
                "[%s] Challenge solver failed for %s: %s",
                self.source_name,
                url,
                exc,
                exc_info=True,
            )
            return None
        if resp.status_code != 200:
            self.logger.warning(
                "[%s] Challenge solver got HTTP %d for %s",
                self.source_name,
                resp.status_code,
                url,
            )
            return None
        return str(resp.text)

    def _get_page(self, url: str) -> BeautifulSoup | None:
        """Fetch and parse a page; ``None`` when every route fails."""
        headers = {
            **self.settings.DEFAULT_HEADERS,
            "Referer": self._get_homepage(),
        }
        resp = self._fetch_get(url, headers)
        if resp is not None:
            html: str | None = resp.text
        else:
            self.logger.info(
                "[%s] Session retries used up, trying cloudscraper",
                self.source_name,
            )
            html = self._fetch_challenged(url, headers)
        return BeautifulSoup(html, "lxml") if html is not None else None

    def _location_for(self, location: str) -> Location:
        """Location stamped on observations scraped for a query."""
        return parse_location(location)

    def _observation(
        self,
        service_id: str,
        location: Location,
        price: float,
        key: str,
        description: str,
    ) -> PriceObservation:
        """Build a scraped observation dated today."""
        return PriceObservation(
            id=f"{self.source_name}_{service_id}_{key}",
            service_id=service_id,
            location=location,
            price=price,
            date=date.today(),
            description=description,
            source=self.settings.SCRAPER_SOURCE_TAG,
        )

    def _prices_from_elements(
        self,
        soup: BeautifulSoup,
        selector: str,
        service_id: str,
        location: Location,
    ) -> list[PriceObservation]:
        """One observation per matching element holding a plausible price."""
        observations: list[PriceObservation] = []
        for index, element in enumerate(soup.select(selector)):
            price = extract_price(element.get_text(" ", strip=True))
            if not is_plausible(price):
                continue
            observations.append(
                self._observation(
                    service_id,
                    location,
                    price,
                    str(index),
                    f"{service_id} service from {self.label}",
                )
            )
        return observations

    def search(
        self, service_id: str, location: str,
    ) -> list[PriceObservation]:
        """Scrape observations for a service near a location.

        Network and parse failures are logged and yield ``[]``.
        """
        url = self._build_url(service_id, location)
        try:
            soup = self._get_page(url)
            if soup is None:
                self.logger.warning(
                    "[%s] No page for %s", self.source_name, url,
                )
                return []
            observations = self._parse(soup, service_id, location)
        except Exception as exc:
            self.logger.error(
                "[%s] Scrape failed for %s: %s",
                self.source_name,
                url,
                exc,
                exc_info=True,
            )
            return []
        self.logger.info(
            "[%s] Found %d prices for %s in '%s'",
            self.source_name,
            len(observations),
            service_id,
            location,
        )
        return observations

    @abstractmethod
    def _get_homepage(self) -> str:
        """Return the homepage URL for the Referer header."""
        ...

    @abstractmethod
    def _build_url(self, service_id: str, location: str) -> str:
        """Return the page URL to scrape for a query."""
        ...

    @abstractmethod
    def _parse(
        self,
        soup: BeautifulSoup,
        service_id: str,
        location: str,
    ) -> list[PriceObservation]:
        """Extract observations from a fetched page."""
        ...
