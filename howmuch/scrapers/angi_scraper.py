# howmuch/scrapers/angi_scraper.py

"""Scraper for Angi (formerly Angie's List) company list pages."""

import urllib.parse

from bs4 import BeautifulSoup

from howmuch.models.price_observation import PriceObservation
from howmuch.scrapers.base_scraper import BaseScraper


class AngiScraper(BaseScraper):
    """Scraper for angi.com company listings in a location."""

    BASE_URL = "https://www.angi.com"
    LIST_URL = BASE_URL + "/companylist/us/{location}/{service}.htm"
    PRICE_SELECTOR = '.price, .cost, [class*="price"], [class*="cost"]'

    def __init__(self, rate_limit: float | None = None) -> None:
        super().__init__("angi", "Angi", rate_limit)

    def _get_homepage(self) -> str:
        return self.BASE_URL

    def _build_url(self, service_id: str, location: str) -> str:
        return self.LIST_URL.format(
            location=urllib.parse.quote(location, safe=""),
            service=urllib.parse.quote(service_id, safe=""),
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
