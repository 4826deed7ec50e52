"""Unit tests for the sample metrics provider."""
import random

import pytest
from pydantic import ValidationError

from src.analytics.provider import MetricsProvider, SampleMetricsProvider


@pytest.mark.parametrize("time_scale,days", [("day", 30), ("week", 7), ("month", 30)])
def test_daily_series_length(time_scale, days):
    snapshot = SampleMetricsProvider(rng=random.Random(0)).get_analytics(time_scale)
    assert len(snapshot.revenue_data) == days
    assert snapshot.revenue_data[0].date == "Day 1"


def test_invalid_time_scale():
    with pytest.raises(ValueError, match="time_scale"):
        SampleMetricsProvider().get_analytics("year")


def test_seeded_provider_is_reproducible():
    first = SampleMetricsProvider(rng=random.Random(11)).get_analytics("week")
    second = SampleMetricsProvider(rng=random.Random(11)).get_analytics("week")
    assert first == second


def test_daily_amounts_within_bounds():
    snapshot = SampleMetricsProvider(rng=random.Random(5)).get_analytics()
    for day in snapshot.revenue_data:
        assert 10000 <= day.amount <= 15000
        assert 5000 <= day.costs <= 7000


def test_headline_figures():
    snapshot = SampleMetricsProvider().get_analytics()
    assert snapshot.total_revenue == 1250000
    assert snapshot.total_bookings == 4500
    assert snapshot.avg_ticket_price == 278
    assert snapshot.popular_routes[0].route == "NYC-LON"
    assert snapshot.popular_routes[0].revenue == 120 * 450


def test_snapshot_is_immutable():
    snapshot = SampleMetricsProvider().get_analytics()
    with pytest.raises(ValidationError):
        snapshot.total_revenue = 0


def test_sample_customers():
    customers = SampleMetricsProvider(rng=random.Random(2), customer_count=3).get_customers()
    assert [c.id for c in customers] == ["1", "2", "3"]
    assert customers[0].full_name == "John Smith"
    assert customers[1].email == "customer2@example.com"


def test_providers_without_customers_return_empty_list():
    class Headlines(MetricsProvider):
        def get_analytics(self, time_scale="month"):
            return SampleMetricsProvider().get_analytics(time_scale)

    assert Headlines().get_customers() == []
