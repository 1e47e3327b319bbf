# howmuch/scrapers/homeadvisor_scraper.py

"""Scraper for HomeAdvisor national cost guide pages."""

from bs4 import BeautifulSoup

from howmuch.models.location import Location
from howmuch.models.price_observation import PriceObservation
from howmuch.scrapers.base_scraper import BaseScraper
from howmuch.scrapers.price_extraction import (
    extract_price_range,
    extract_prices,
)

# Catalog ids / category ids -> cost guide slugs
_GUIDE_SLUGS: dict[str, str] = {
    "junk-removal": "junk-removal",
    "lawn-mowing": "lawn-care",
    "house-cleaning": "house-cleaning",
    "pest-control": "pest-control",
    "snow-removal": "snow-removal",
    "plumbing": "plumbing",
    "handyman": "handyman",
    "window-cleaning": "window-cleaning",
    "landscaping": "landscaping",
    "cleaning": "house-cleaning",
    "maintenance": "handyman",
    "seasonal": "snow-removal",
}

NATIONAL = Location(region="National")


class HomeAdvisorScraper(BaseScraper):
    """Scraper for homeadvisor.com cost guides.

    Cost guides are national, so every observation carries the
    ``National`` region regardless of the queried location. Prices come
    from three places on the page: cost/price elements, the low and high
    ends of range elements, and every dollar amount in the body text.
    """

    BASE_URL = "https://www.homeadvisor.com"
    GUIDE_URL = BASE_URL + "/cost/{slug}/"
    COST_SELECTOR = (
        '[class*="cost"], [class*="price"], '
        ".project-cost, .service-cost, .average-cost"
    )
    RANGE_SELECTOR = '.cost-range, .price-range, [class*="range"]'

    def __init__(self, rate_limit: float | None = None) -> None:
        super().__init__("homeadvisor", "HomeAdvisor", rate_limit)

    @staticmethod
    def guide_slug(service_id: str) -> str:
        """Map a catalog service id to its cost guide slug."""
        return _GUIDE_SLUGS.get(service_id, service_id)

    def _get_homepage(self) -> str:
        return self.BASE_URL

    def _build_url(self, service_id: str, location: str) -> str:
        return self.GUIDE_URL.format(slug=self.guide_slug(service_id))

    def _parse(
        self,
        soup: BeautifulSoup,
        service_id: str,
        location: str,
    ) -> list[PriceObservation]:
        observations: list[PriceObservation] = []

        for index, element in enumerate(soup.select(self.COST_SELECTOR)):
            text = element.get_text(" ", strip=True)
            for n, price in enumerate(extract_prices(text)):
                observations.append(
                    self._observation(
                        service_id,
                        NATIONAL,
                        price,
                        f"{index}_{n}",
                        f"{service_id} service from HomeAdvisor cost guide",
                    )
                )

        for index, element in enumerate(soup.select(self.RANGE_SELECTOR)):
            bounds = extract_price_range(element.get_text(" ", strip=True))
            if bounds.min <= 0 or bounds.max <= bounds.min:
                continue
            for end, price in (("min", bounds.min), ("max", bounds.max)):
                observations.append(
                    self._observation(
                        service_id,
                        NATIONAL,
                        price,
                        f"range_{end}_{index}",
                        f"{service_id} service - {end}imum cost "
                        "from HomeAdvisor",
                    )
                )

        body = soup.body.get_text(" ", strip=True) if soup.body else ""
        for index, price in enumerate(extract_prices(body)):
            observations.append(
                self._observation(
                    service_id,
                    NATIONAL,
                    price,
                    f"text_{index}",
                    f"{service_id} service from HomeAdvisor "
                    "(text extraction)",
                )
            )

        return observations
