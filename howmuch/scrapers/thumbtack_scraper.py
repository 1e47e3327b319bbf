# howmuch/scrapers/thumbtack_scraper.py

"""Scraper for Thumbtack pro search result pages."""

import urllib.parse

from bs4 import BeautifulSoup

from howmuch.models.price_observation import PriceObservation
from howmuch.scrapers.base_scraper import BaseScraper


class ThumbtackScraper(BaseScraper):
    """Scraper for thumbtack.com search results.

    Pro cards show a starting price in an element tagged with
    ``data-testid="price"``; older layouts use plain price classes.
    """

    BASE_URL = "https://www.thumbtack.com"
    SEARCH_URL = BASE_URL + "/search/{service}/{location}"
    PRICE_SELECTOR = '[data-testid="price"], .price, [class*="price"]'

    def __init__(self, rate_limit: float | None = None) -> None:
        super().__init__("thumbtack", "Thumbtack", rate_limit)

    def _get_homepage(self) -> str:
        return self.BASE_URL

    def _build_url(self, service_id: str, location: str) -> str:
        return self.SEARCH_URL.format(
            service=urllib.parse.quote(service_id, safe=""),
            location=urllib.parse.quote(location, safe=""),
        )

    def _parse(
        self,
        soup: BeautifulSoup,
        service_id: str,
        location: str,
    ) -> list[PriceObservation]:
        return self._prices_from_elements(
            soup,
            self.PRICE_SELECTOR,
            service_id,
            self._location_for(location),
        )
