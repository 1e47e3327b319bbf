# howmuch/services/aggregation.py

"""Price summary computation over a pooled set of observations.

The pool may mix sample, submitted and scraped observations and may hold
duplicates; every observation with a positive price counts once.

Trend policy: observations dated within the last ``RECENT_WINDOW_DAYS``
of ``as_of`` form the *recent* bucket, everything else the *older*
bucket. The percentage change of the recent mean over the older mean is
classified against ``TREND_THRESHOLD``. When either bucket is empty, or
the older mean is zero, the change is ``0`` and the trend is stable.

Averages and the change are left unrounded; display code formats them.
"""

import logging
from datetime import date, timedelta
from statistics import fmean

from howmuch.config.settings import Settings
from howmuch.filters.price_validator import PriceValidator
from howmuch.models.price_observation import PriceObservation
from howmuch.models.price_summary import PriceSummary, Trend
from howmuch.models.service import PriceRange

logger = logging.getLogger("howmuch.aggregation")


def percent_change(
    recent: list[float], older: list[float],
) -> float:
    """Return the percentage change of the recent mean over the older mean."""
    if not recent or not older:
        return 0.0
    older_mean = fmean(older)
    if older_mean == 0:
        return 0.0
    return (fmean(recent) - older_mean) / older_mean * 100


def classify_trend(
    change: float,
    threshold: float = Settings.TREND_THRESHOLD,
) -> Trend:
    """Map a percentage change onto up / down / stable."""
    if change > threshold:
        return Trend.UP
    if change < -threshold:
        return Trend.DOWN
    return Trend.STABLE


def split_by_recency(
    observations: list[PriceObservation],
    as_of: date,
    window_days: int = Settings.RECENT_WINDOW_DAYS,
) -> tuple[list[float], list[float]]:
    """Partition prices into (recent, older) around a date cutoff."""
    cutoff = as_of - timedelta(days=window_days)
    recent: list[float] = []
    older: list[float] = []
    for observation in observations:
        if observation.date > cutoff:
            recent.append(observation.price)
        else:
            older.append(observation.price)
    return recent, older


def summarize(
    observations: list[PriceObservation],
    service_id: str,
    location: str,
    national_average: float,
    as_of: date | None = None,
) -> PriceSummary | None:
    """Summarise a pool of observations for one service + location query.

    Returns ``None`` when no observation has a positive price. The
    summary's location is that of the first valid observation.
    """
    valid, _ = PriceValidator.validate(observations)
    if not valid:
        logger.info(
            "No usable prices for %s in '%s'", service_id, location,
        )
        return None

    prices = [o.price for o in valid]
    low, high = min(prices), max(prices)
    # Float summation can land a hair outside the observed range
    average = min(max(fmean(prices), low), high)
    recent, older = split_by_recency(valid, as_of or date.today())
    change = percent_change(recent, older)

    summary = PriceSummary(
        service_id=service_id,
        location=valid[0].location,
        national_average=national_average,
        local_average=average,
        price_range=PriceRange(min=low, max=high),
        data_points=len(valid),
        trend=classify_trend(change),
        year_over_year_change=change,
    )
    logger.debug(
        "Summary for %s in '%s': avg=%.2f n=%d trend=%s (%.1f%%)",
        service_id,
        location,
        summary.local_average,
        summary.data_points,
        summary.trend.value,
        change,
    )
    return summary
