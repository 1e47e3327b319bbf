# howmuch/models/price_summary.py

"""Aggregate price summary model."""

from dataclasses import dataclass
from enum import Enum

from howmuch.models.location import Location
from howmuch.models.service import PriceRange


class Trend(str, Enum):
    """Coarse direction of recent prices relative to older ones."""

    UP = "up"
    DOWN = "down"
    STABLE = "stable"


@dataclass(frozen=True)
class PriceSummary:
    """Derived statistics over one service + location observation pool."""

    service_id: str
    location: Location
    national_average: float
    local_average: float
    price_range: PriceRange
    data_points: int
    trend: Trend
    year_over_year_change: float
