# howmuch/scrapers/price_extraction.py

"""Currency-pattern price extraction from marketplace page text."""

import re

from howmuch.config.settings import Settings
from howmuch.models.service import PriceRange

_AMOUNT = r"(\d{1,3}(?:,\d{3})*(?:\.\d{2})?)"

# First amount, dollar sign optional ("$1,299.00", "from 85")
PRICE_RE = re.compile(r"\$?" + _AMOUNT)

# Dollar-prefixed amounts only
DOLLAR_RE = re.compile(r"\$" + _AMOUNT)

# "$150 - $400", "$150–$400"
RANGE_RE = re.compile(r"\$" + _AMOUNT + r"\s*[-–]\s*\$" + _AMOUNT)


def _to_float(amount: str) -> float:
    return float(amount.replace(",", ""))


def is_plausible(price: float) -> bool:
    """True when a price falls inside the configured sanity band."""
    return Settings.PRICE_FLOOR <= price < Settings.PRICE_CEILING


def extract_price(text: str | None) -> float:
    """Extract the first numeric price from text, ``0.0`` when none."""
    if not text:
        return 0.0
    match = PRICE_RE.search(text)
    return _to_float(match.group(1)) if match else 0.0


def extract_prices(text: str | None) -> list[float]:
    """Extract every plausible dollar amount from text."""
    if not text:
        return []
    prices = (_to_float(m) for m in DOLLAR_RE.findall(text))
    return [p for p in prices if is_plausible(p)]


def extract_price_range(text: str | None) -> PriceRange:
    """Extract a low / high range from text.

    Prefers an explicit "$a - $b" pattern, then the spread of any two or
    more dollar amounts. Returns ``PriceRange(0, 0)`` when neither exists.
    """
    if not text:
        return PriceRange(0.0, 0.0)
    match = RANGE_RE.search(text)
    if match:
        return PriceRange(
            _to_float(match.group(1)), _to_float(match.group(2)),
        )
    amounts = [
        p for p in (_to_float(m) for m in DOLLAR_RE.findall(text))
        if p > 0
    ]
    if len(amounts) >= 2:
        return PriceRange(min(amounts), max(amounts))
    return PriceRange(0.0, 0.0)
