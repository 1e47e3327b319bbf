# howmuch/config/settings.py

"""Central configuration for the howmuch price service."""

import os
from pathlib import Path

from curl_cffi.requests import BrowserTypeLiteral
from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Central configuration for the howmuch price service."""

    # --- Persistence (empty values select the sample-data fallback) ---
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    SUPABASE_ANON_KEY: str = os.getenv("SUPABASE_ANON_KEY", "")
    DB_PATH: str = os.getenv("HOWMUCH_DB_PATH", "")

    # --- Scraping ---
    REQUEST_TIMEOUT: int = 30           # Seconds before a request times out
    MAX_RETRIES: int = 2                # GET attempts before cloudscraper
    SCRAPE_RATE_LIMIT: float = 2.0      # Requests per second, per scraper
    SOURCE_TIMEOUT: float = 60.0        # Seconds per source during pooling
    SCRAPE_CACHE_TTL: float = 3600.0    # Scraped results cache (secs)
    SCRAPER_SOURCE_TAG: str = "web_scraper"

    # --- Price extraction ---
    PRICE_FLOOR: float = 10.0
    PRICE_CEILING: float = 50000.0

    # --- Aggregation ---
    RECENT_WINDOW_DAYS: int = 30
    TREND_THRESHOLD: float = 5.0        # Percent change for up / down

    # --- Health ---
    HEALTH_TIMEOUT: int = 10
    HEALTH_SLOW_MS: float = 5000.0

    # --- Browser Impersonation ---
    IMPERSONATE_BROWSER: BrowserTypeLiteral = "chrome131"
    DEFAULT_HEADERS: dict[str, str] = {
        "Accept": (
            "text/html,application/xhtml+xml,"
            "application/xml;q=0.9,*/*;q=0.8"
        ),
        "Accept-Language": "en-US,en;q=0.9",
        "sec-ch-ua-mobile": "?0",
        "sec-ch-ua-platform": '"macOS"',
        "Upgrade-Insecure-Requests": "1",
    }

    # --- Paths / logging ---
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent
    LOGS_DIR: Path = BASE_DIR / "logs"
    CONSOLE_LOG_LEVEL: str = os.getenv(
        "HOWMUCH_LOG_LEVEL", "WARNING"
    ).upper()

    # --- Marketplace sources ---
    AVAILABLE_SOURCES: list[dict[str, str]] = [
        {
            "id": "thumbtack",
            "label": "Thumbtack",
            "scraper": "howmuch.scrapers.thumbtack_scraper.ThumbtackScraper",
        },
        {
            "id": "homeadvisor",
            "label": "HomeAdvisor",
            "scraper": "howmuch.scrapers.homeadvisor_scraper.HomeAdvisorScraper",
        },
        {
            "id": "angi",
            "label": "Angi",
            "scraper": "howmuch.scrapers.angi_scraper.AngiScraper",
        },
    ]

    @classmethod
    def supabase_configured(cls) -> bool:
        """Return True when both hosted-database credentials are set."""
        return bool(cls.SUPABASE_URL and cls.SUPABASE_ANON_KEY)
