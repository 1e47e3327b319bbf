# tests/test_aggregation.py

"""Tests for price summary computation and the trend policy."""

import unittest
from datetime import date, timedelta

from howmuch.models.location import Location
from howmuch.models.price_observation import PriceObservation
from howmuch.models.price_summary import Trend
from howmuch.services.aggregation import (
    classify_trend,
    percent_change,
    split_by_recency,
    summarize,
)

AS_OF = date(2024, 6, 30)
NYC = Location("10001", "New York", "NY", "Northeast")


def _obs(
    price: float,
    days_ago: int = 0,
    location: Location = NYC,
    service_id: str = "junk-removal",
) -> PriceObservation:
    """Build an observation dated relative to AS_OF."""
    return PriceObservation(
        service_id=service_id,
        location=location,
        price=price,
        date=AS_OF - timedelta(days=days_ago),
    )


class TestSummarize(unittest.TestCase):
    """Statistics over a pool of observations."""

    def test_empty_pool_returns_none(self) -> None:
        self.assertIsNone(summarize([], "junk-removal", "10001", 250.0))

    def test_only_invalid_prices_returns_none(self) -> None:
        pool = [_obs(0.0), _obs(-20.0)]
        self.assertIsNone(summarize(pool, "junk-removal", "10001", 250.0))

    def test_two_sample_prices(self) -> None:
        """300 and 250 five days apart average to 275."""
        pool = [_obs(300.0, 0), _obs(250.0, 5)]
        summary = summarize(pool, "junk-removal", "10001", 250.0, AS_OF)

        assert summary is not None
        self.assertEqual(summary.local_average, 275.0)
        self.assertEqual(summary.price_range.min, 250.0)
        self.assertEqual(summary.price_range.max, 300.0)
        self.assertEqual(summary.data_points, 2)
        self.assertEqual(summary.national_average, 250.0)
        self.assertEqual(summary.trend, Trend.STABLE)
        self.assertEqual(summary.year_over_year_change, 0.0)

    def test_invalid_prices_excluded_from_counts(self) -> None:
        pool = [_obs(100.0), _obs(0.0), _obs(200.0), _obs(-5.0)]
        summary = summarize(pool, "junk-removal", "10001", 0.0, AS_OF)

        assert summary is not None
        self.assertEqual(summary.data_points, 2)
        self.assertEqual(summary.local_average, 150.0)
        self.assertEqual(summary.price_range.min, 100.0)

    def test_non_finite_prices_excluded(self) -> None:
        pool = [_obs(100.0), _obs(float("nan")), _obs(float("inf"))]
        summary = summarize(pool, "junk-removal", "10001", 0.0, AS_OF)

        assert summary is not None
        self.assertEqual(summary.data_points, 1)
        self.assertEqual(summary.local_average, 100.0)
        self.assertEqual(summary.price_range.max, 100.0)

    def test_only_non_finite_prices_returns_none(self) -> None:
        pool = [_obs(float("nan")), _obs(float("-inf"))]
        self.assertIsNone(summarize(pool, "junk-removal", "10001", 0.0))

    def test_average_within_range(self) -> None:
        pool = [_obs(0.1), _obs(0.2), _obs(0.7), _obs(0.1)]
        summary = summarize(pool, "junk-removal", "10001", 0.0, AS_OF)

        assert summary is not None
        self.assertLessEqual(
            summary.price_range.min, summary.local_average
        )
        self.assertLessEqual(
            summary.local_average, summary.price_range.max
        )

    def test_single_observation_is_stable(self) -> None:
        summary = summarize([_obs(80.0)], "x", "10001", 0.0, AS_OF)

        assert summary is not None
        self.assertEqual(summary.trend, Trend.STABLE)
        self.assertEqual(summary.year_over_year_change, 0.0)
        self.assertEqual(summary.data_points, 1)

    def test_location_comes_from_first_observation(self) -> None:
        miami = Location("33101", "Miami", "FL", "Southeast")
        pool = [_obs(50.0, location=miami), _obs(60.0)]
        summary = summarize(pool, "x", "anything", 0.0, AS_OF)

        assert summary is not None
        self.assertEqual(summary.location, miami)

    def test_rising_prices_trend_up(self) -> None:
        pool = [_obs(120.0, 3), _obs(100.0, 90)]
        summary = summarize(pool, "x", "10001", 0.0, AS_OF)

        assert summary is not None
        self.assertEqual(summary.trend, Trend.UP)
        self.assertAlmostEqual(summary.year_over_year_change, 20.0)

    def test_falling_prices_trend_down(self) -> None:
        pool = [_obs(80.0, 1), _obs(100.0, 60), _obs(100.0, 200)]
        summary = summarize(pool, "x", "10001", 0.0, AS_OF)

        assert summary is not None
        self.assertEqual(summary.trend, Trend.DOWN)
        self.assertAlmostEqual(summary.year_over_year_change, -20.0)

    def test_small_change_is_stable(self) -> None:
        pool = [_obs(103.0, 1), _obs(100.0, 45)]
        summary = summarize(pool, "x", "10001", 0.0, AS_OF)

        assert summary is not None
        self.assertEqual(summary.trend, Trend.STABLE)
        self.assertAlmostEqual(summary.year_over_year_change, 3.0)

    def test_unrounded_average(self) -> None:
        pool = [_obs(10.0), _obs(10.0), _obs(11.0)]
        summary = summarize(pool, "x", "10001", 0.0, AS_OF)

        assert summary is not None
        self.assertAlmostEqual(summary.local_average, 31.0 / 3)


class TestTrendHelpers(unittest.TestCase):
    """Bucketing, percentage change and classification."""

    def test_window_boundary_is_older(self) -> None:
        """An observation exactly 30 days old falls in the older bucket."""
        recent, older = split_by_recency(
            [_obs(1.0, 29), _obs(2.0, 30), _obs(3.0, 31)], AS_OF,
        )
        self.assertEqual(recent, [1.0])
        self.assertEqual(older, [2.0, 3.0])

    def test_empty_older_bucket_is_zero(self) -> None:
        self.assertEqual(percent_change([100.0, 200.0], []), 0.0)

    def test_empty_recent_bucket_is_zero(self) -> None:
        self.assertEqual(percent_change([], [100.0]), 0.0)

    def test_zero_older_mean_is_zero(self) -> None:
        self.assertEqual(percent_change([100.0], [0.0]), 0.0)

    def test_classification_thresholds(self) -> None:
        self.assertEqual(classify_trend(5.0), Trend.STABLE)
        self.assertEqual(classify_trend(5.01), Trend.UP)
        self.assertEqual(classify_trend(-5.0), Trend.STABLE)
        self.assertEqual(classify_trend(-5.01), Trend.DOWN)

    def test_classification_is_monotonic(self) -> None:
        order = {Trend.DOWN: 0, Trend.STABLE: 1, Trend.UP: 2}
        changes = [-50.0, -6.0, -5.0, 0.0, 4.9, 5.0, 7.5, 300.0]
        ranks = [order[classify_trend(c)] for c in changes]
        self.assertEqual(ranks, sorted(ranks))


if __name__ == "__main__":
    unittest.main()
