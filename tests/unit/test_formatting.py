"""Unit tests for the shared field formatting rules."""
import random
from datetime import date

import pytest

from src.reporting import formatting
from src.reporting.models import DateRange


def test_currency_grouping_and_decimals():
    assert formatting.format_currency(1250000) == "$1,250,000.00"
    assert formatting.format_currency(1234.5) == "$1,234.50"
    assert formatting.format_currency(0) == "$0.00"


def test_count_grouping():
    assert formatting.format_count(4500) == "4,500"
    assert formatting.format_count(369) == "369"


def test_ratio_percent_is_scaled():
    assert formatting.format_ratio_percent(0.082, 1) == "8.2%"
    assert formatting.format_ratio_percent(0.87, 0) == "87%"


def test_scaled_percent_is_never_multiplied():
    """Values already on the 0-100 scale keep their magnitude."""
    assert formatting.format_scaled_percent(8.2) == "8.2%"
    assert formatting.format_scaled_percent(12.5) == "12.5%"
    assert formatting.format_scaled_percent(8) == "8%"
    assert formatting.format_scaled_percent(8.2) != "820.0%"


def test_rating():
    assert formatting.format_rating(4.2) == "4.2/5.0"
    assert formatting.format_rating(5) == "5/5.0"


def test_date_and_range():
    assert formatting.format_date(date(2024, 3, 5)) == "3/5/2024"
    date_range = DateRange(from_date=date(2024, 1, 1), to_date=date(2024, 1, 31))
    assert formatting.format_date_range(date_range) == "1/1/2024 to 1/31/2024"
    assert formatting.format_date_range(None) is None


@pytest.mark.parametrize("value,expected", [
    ("all", "All Destinations"),
    ("ALL", "All Destinations"),
    (None, "All Destinations"),
    ("London", "London"),
])
def test_destination_label(value, expected):
    assert formatting.destination_label(value) == expected


def test_status_label():
    assert formatting.status_label("all") == "All Statuses"
    assert formatting.status_label("confirmed") == "confirmed"


def test_route_revenue():
    assert formatting.route_revenue(120, 278) == 33360
    # Falls back to the default ticket price
    assert formatting.route_revenue(10, None) == 2500


def test_occupancy_range_and_seeded_reproducibility():
    values = [formatting.occupancy_rate(random.Random(seed)) for seed in range(50)]
    assert all(65.0 <= v <= 95.0 for v in values)
    assert all(round(v, 1) == v for v in values)
    assert formatting.occupancy_rate(random.Random(3)) == formatting.occupancy_rate(random.Random(3))


def test_format_occupancy():
    assert formatting.format_occupancy(82.3) == "82.3%"
    assert formatting.format_occupancy(70) == "70.0%"


def test_bucket_percentage_handles_zero_total():
    assert formatting.bucket_percentage(5, 0) == 0.0
    assert formatting.bucket_percentage(1, 4) == 0.25
