# tests/test_marketplace_scrapers.py

"""Tests for the Thumbtack, Angi and HomeAdvisor scrapers."""

import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

from howmuch.scrapers.angi_scraper import AngiScraper
from howmuch.scrapers.homeadvisor_scraper import HomeAdvisorScraper
from howmuch.scrapers.thumbtack_scraper import ThumbtackScraper

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def _fixture_session(fixture_name: str) -> MagicMock:
    """Session double answering every GET with a fixture page."""
    resp = MagicMock()
    resp.status_code = 200
    resp.text = (FIXTURES_DIR / fixture_name).read_text("utf-8")
    session = MagicMock()
    session.get.return_value = resp
    return session


@patch("howmuch.scrapers.base_scraper.curl_requests.Session")
class TestThumbtackScraper(unittest.TestCase):
    """Search result cards with a starting price."""

    def test_build_url(self, mock_session_cls: MagicMock) -> None:
        url = ThumbtackScraper()._build_url("junk-removal", "New York")
        self.assertEqual(
            url, "https://www.thumbtack.com/search/junk-removal/New%20York",
        )

    def test_parses_plausible_prices(
        self, mock_session_cls: MagicMock,
    ) -> None:
        scraper = ThumbtackScraper()
        scraper.session = _fixture_session("thumbtack_search.html")

        found = scraper.search("junk-removal", "10001, New York, NY")

        self.assertEqual([o.price for o in found], [125.0, 1150.0])
        self.assertTrue(all(o.source == "web_scraper" for o in found))
        self.assertEqual(found[0].location.city, "New York")
        self.assertEqual(found[0].location.region, "Northeast")
        self.assertEqual(
            [o.id for o in found],
            ["thumbtack_junk-removal_0", "thumbtack_junk-removal_1"],
        )


@patch("howmuch.scrapers.base_scraper.curl_requests.Session")
class TestAngiScraper(unittest.TestCase):
    """Company listings with price or cost elements."""

    def test_build_url(self, mock_session_cls: MagicMock) -> None:
        url = AngiScraper()._build_url("lawn-mowing", "90210")
        self.assertEqual(
            url, "https://www.angi.com/companylist/us/90210/lawn-mowing.htm",
        )

    def test_parses_cost_and_price_elements(
        self, mock_session_cls: MagicMock,
    ) -> None:
        scraper = AngiScraper()
        scraper.session = _fixture_session("angi_companylist.html")

        found = scraper.search("lawn-mowing", "90210")

        self.assertEqual([o.price for o in found], [45.0, 60.0])
        self.assertEqual(found[0].location.zip_code, "90210")


@patch("howmuch.scrapers.base_scraper.curl_requests.Session")
class TestHomeAdvisorScraper(unittest.TestCase):
    """National cost guides."""

    def test_guide_slugs(self, mock_session_cls: MagicMock) -> None:
        self.assertEqual(
            HomeAdvisorScraper.guide_slug("lawn-mowing"), "lawn-care",
        )
        self.assertEqual(
            HomeAdvisorScraper.guide_slug("gutter-cleaning"),
            "gutter-cleaning",
        )
        self.assertEqual(
            HomeAdvisorScraper()._build_url("lawn-mowing", "90210"),
            "https://www.homeadvisor.com/cost/lawn-care/",
        )

    def test_parses_cost_range_and_body_prices(
        self, mock_session_cls: MagicMock,
    ) -> None:
        scraper = HomeAdvisorScraper()
        scraper.session = _fixture_session("homeadvisor_cost_guide.html")

        found = scraper.search("junk-removal", "10001")

        # 3 from cost elements, 2 range ends, 5 dollar amounts in the body
        self.assertEqual(len(found), 10)
        self.assertEqual({o.price for o in found}, {150.0, 275.0, 400.0})
        self.assertTrue(
            all(o.location.region == "National" for o in found)
        )
        self.assertEqual(len({o.id for o in found}), 10)

        range_ends = [o for o in found if "range" in o.id]
        self.assertEqual([o.price for o in range_ends], [150.0, 400.0])
        self.assertIn("minimum cost", range_ends[0].description)
        self.assertIn("maximum cost", range_ends[1].description)


if __name__ == "__main__":
    unittest.main()
