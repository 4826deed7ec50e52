"""Metrics providers consumed by the reporting engine."""

import logging
import random
from abc import ABC, abstractmethod
from typing import List, Optional

from .models import (
    ClassBookings,
    CustomerRecord,
    DailyRevenue,
    MetricsSnapshot,
    QuarterMargin,
    RouteBookings,
)

logger = logging.getLogger(__name__)

TIME_SCALES = ("day", "week", "month")


class MetricsProvider(ABC):
    """Read-only source of aggregate analytics."""

    @abstractmethod
    def get_analytics(self, time_scale: str = "month") -> MetricsSnapshot:
        """
        Return aggregate analytics for a time window.

        Args:
            time_scale: 'day', 'week' or 'month'

        Returns:
            Immutable MetricsSnapshot
        """
        pass

    def get_customers(self) -> List[CustomerRecord]:
        """Customers to attach to reports. Providers without customer data return nothing."""
        return []


# Published fares per route, used to weight route revenue
ROUTE_FARES = {
    "NYC-LON": 450,
    "LON-PAR": 180,
    "PAR-ROM": 210,
    "ROM-TOK": 780,
    "TOK-SYD": 850,
    "SYD-NYC": 920,
}

POPULAR_ROUTES = [
    ("NYC-LON", 120),
    ("LON-PAR", 95),
    ("PAR-ROM", 85),
    ("ROM-TOK", 75),
    ("TOK-SYD", 65),
    ("SYD-NYC", 60),
    ("NYC-LAX", 55),
    ("LAX-CHI", 50),
    ("CHI-MIA", 45),
    ("MIA-NYC", 40),
]

FIRST_NAMES = ["John", "Jane", "Michael", "Emily", "David", "Sarah", "Robert", "Lisa"]
LAST_NAMES = ["Smith", "Johnson", "Williams", "Brown", "Jones", "Miller", "Davis", "Garcia"]


class SampleMetricsProvider(MetricsProvider):
    """
    Sample analytics with fixed headline figures and randomised daily series.

    Pass a seeded ``random.Random`` to make the daily series reproducible.
    """

    def __init__(self, rng: Optional[random.Random] = None, customer_count: int = 50):
        self.rng = rng or random.Random()
        self.customer_count = customer_count

    def get_analytics(self, time_scale: str = "month") -> MetricsSnapshot:
        if time_scale not in TIME_SCALES:
            raise ValueError(f"time_scale must be one of {TIME_SCALES}, got {time_scale!r}")

        days = 7 if time_scale == "week" else 30
        logger.debug(f"Building sample analytics for {time_scale} ({days} buckets)")

        revenue_data = tuple(
            DailyRevenue(
                date=f"Day {i + 1}",
                amount=10000 + self.rng.random() * 5000,
                costs=5000 + self.rng.random() * 2000,
            )
            for i in range(days)
        )

        popular_routes = tuple(
            RouteBookings(
                route=route,
                bookings=bookings,
                revenue=bookings * ROUTE_FARES[route] if route in ROUTE_FARES else None,
            )
            for route, bookings in POPULAR_ROUTES
        )

        return MetricsSnapshot(
            total_revenue=1250000,
            revenue_change=12.5,
            total_bookings=4500,
            bookings_change=8.2,
            avg_ticket_price=278,
            avg_price_change=3.5,
            revenue_data=revenue_data,
            bookings_by_class=(
                ClassBookings(seat_class="Economy", count=350),
                ClassBookings(seat_class="Business", count=120),
                ClassBookings(seat_class="First Class", count=30),
            ),
            popular_routes=popular_routes,
            profit_margin=(
                QuarterMargin(category="Q1", percentage=25),
                QuarterMargin(category="Q2", percentage=28),
                QuarterMargin(category="Q3", percentage=32),
                QuarterMargin(category="Q4", percentage=35),
            ),
        )

    def get_customers(self) -> List[CustomerRecord]:
        return [
            CustomerRecord(
                id=str(i + 1),
                first_name=FIRST_NAMES[i % len(FIRST_NAMES)],
                last_name=LAST_NAMES[i % len(LAST_NAMES)],
                email=f"customer{i + 1}@example.com",
                phone=f"+1 555-{100 + i}",
                bookings_count=self.rng.randrange(5),
            )
            for i in range(self.customer_count)
        ]
