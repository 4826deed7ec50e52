"""
Shared pytest fixtures for the reporting test suite.
"""
import random
from datetime import date, datetime

import pytest

from src.analytics.models import (
    CustomerRecord,
    DailyRevenue,
    MetricsSnapshot,
    QuarterMargin,
    RouteBookings,
)
from src.analytics.provider import MetricsProvider
from src.reporting.builder import ReportModelBuilder
from src.reporting.models import DateRange, ReportRequest


FIXED_NOW = datetime(2024, 3, 5, 14, 30, 0)


class FakeEncryptor:
    """Deterministic, obviously-not-plaintext stand-in for the encryption primitive."""

    def __init__(self):
        self.calls = []

    def encrypt(self, plaintext: str) -> str:
        self.calls.append(plaintext)
        return "ENC:" + plaintext[::-1]


class FailingEncryptor:
    def encrypt(self, plaintext: str) -> str:
        raise RuntimeError("key service unavailable")


class StaticMetricsProvider(MetricsProvider):
    """Provider returning a fixed snapshot and recording calls."""

    def __init__(self, snapshot: MetricsSnapshot, customers=None):
        self.snapshot = snapshot
        self.customers = customers or []
        self.calls = []

    def get_analytics(self, time_scale: str = "month") -> MetricsSnapshot:
        self.calls.append(time_scale)
        return self.snapshot

    def get_customers(self):
        return list(self.customers)


# --- Mock Data Fixtures ---

@pytest.fixture
def snapshot():
    """Headline figures from the sample analytics with a short, fixed daily series."""
    return MetricsSnapshot(
        total_revenue=1250000,
        revenue_change=12.5,
        total_bookings=4500,
        bookings_change=8.2,
        avg_ticket_price=278,
        avg_price_change=3.5,
        revenue_data=(
            DailyRevenue(date="Day 1", amount=13900, costs=5000),
            DailyRevenue(date="Day 2", amount=11120, costs=6120.5),
            DailyRevenue(date="Day 3", amount=14000, costs=7000),
        ),
        popular_routes=(
            RouteBookings(route="NYC-LON", bookings=120, revenue=54000),
            RouteBookings(route="ROM-TOK", bookings=75, revenue=58500),
            RouteBookings(route="LAX-CHI", bookings=50),
        ),
        profit_margin=(QuarterMargin(category="Q1", percentage=25),),
        feedback_comments=('Great service "A+"', "Seats were comfortable"),
    )


@pytest.fixture
def customers():
    return [
        CustomerRecord(id="1", first_name="John", last_name="Smith",
                       email="a@b.com", phone="+1 555-100", bookings_count=2),
        CustomerRecord(id="2", first_name="Jane", last_name="Johnson",
                       email="jane@example.com", phone="+1 555-101", bookings_count=0),
    ]


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def encryptor():
    return FakeEncryptor()


@pytest.fixture
def failing_encryptor():
    return FailingEncryptor()


@pytest.fixture
def provider(snapshot, customers):
    return StaticMetricsProvider(snapshot, customers)


@pytest.fixture
def make_request():
    """Factory fixture for report requests."""
    def _make(report_type="bookings", output_format="csv", **kwargs):
        kwargs.setdefault("destination", "all")
        kwargs.setdefault("status", "all")
        return ReportRequest(report_type=report_type, output_format=output_format, **kwargs)
    return _make


@pytest.fixture
def date_range():
    return DateRange(from_date=date(2024, 1, 1), to_date=date(2024, 1, 31))


@pytest.fixture
def build_model(snapshot, make_request):
    """Factory fixture building a canonical model from the fixed snapshot."""
    def _build(report_type="bookings", metrics=None, customers=None, seed=42, **request_kwargs):
        request = make_request(report_type, **request_kwargs)
        builder = ReportModelBuilder(rng=random.Random(seed))
        return builder.build(report_type, request, metrics if metrics is not None else snapshot, customers)
    return _build
