"""
Field formatting rules shared by every report generator.

All renderers format values through these functions so that the same amount,
rate or date reads identically in CSV, Excel and PDF output. Spreadsheet
columns that store native numbers use the number formats defined here,
which display the same text as the string formatters.
"""

import math
import random
from datetime import date, datetime
from typing import Optional, Union

from src.core.config import settings

Number = Union[int, float]

# Excel number formats equivalent to format_currency / format_ratio_percent(value, 1)
CURRENCY_FORMAT = "$#,##0.00"
PERCENT_FORMAT = "0.0%"

ALL_FILTER = "all"
ALL_DESTINATIONS = "All Destinations"
ALL_STATUSES = "All Statuses"

OCCUPANCY_MIN = 65.0
OCCUPANCY_SPAN = 30.0


def format_currency(amount: Number) -> str:
    """Dollar amount with thousands separators and two decimals: 1234.5 -> '$1,234.50'."""
    return f"${amount:,.2f}"


def format_count(value: Number) -> str:
    """Integer count with thousands separators."""
    return f"{int(value):,}"


def format_ratio_percent(value: float, digits: int = 1) -> str:
    """Percentage for a value on the 0-1 scale: 0.082 -> '8.2%'."""
    return f"{value * 100:.{digits}f}%"


def format_scaled_percent(value: Number) -> str:
    """Percentage for a value already on the 0-100 scale: 8.2 -> '8.2%'. Never re-scaled."""
    return f"{_plain_number(value)}%"


def format_rating(value: Number) -> str:
    return f"{_plain_number(value)}/5.0"


def _plain_number(value: Number) -> str:
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def format_date(value: Union[date, datetime]) -> str:
    """US style short date without zero padding: 2024-03-05 -> '3/5/2024'."""
    return f"{value.month}/{value.day}/{value.year}"


def format_date_range(date_range) -> Optional[str]:
    """'from to to' line for a DateRange, or None when there is no range."""
    if date_range is None:
        return None
    return f"{format_date(date_range.from_date)} to {format_date(date_range.to_date)}"


def destination_label(destination: Optional[str]) -> str:
    if not destination or destination.lower() == ALL_FILTER:
        return ALL_DESTINATIONS
    return destination


def status_label(status: Optional[str]) -> str:
    if not status or status.lower() == ALL_FILTER:
        return ALL_STATUSES
    return status


def route_revenue(bookings: int, avg_ticket_price: Optional[float] = None) -> float:
    """Estimated route revenue: bookings x average ticket price (fallback from settings)."""
    price = avg_ticket_price or settings.default_ticket_price
    return bookings * price


def occupancy_rate(rng: Optional[random.Random] = None) -> float:
    """
    Pseudo-random occupancy estimate in [65, 95] percent, one decimal.

    Not reproducible unless a seeded RNG is passed in.
    """
    rng = rng or random.Random()
    return round(OCCUPANCY_MIN + rng.random() * OCCUPANCY_SPAN, 1)


def format_occupancy(value: float) -> str:
    """Occupancy (0-100 scale) as shown in text outputs: '82.3%'."""
    return f"{value:.1f}%"


def bucket_percentage(count: int, total: int) -> float:
    """Share of a rating bucket as a 0-1 fraction."""
    if not total:
        return 0.0
    return count / total


def floor_int(value: Number) -> int:
    return int(math.floor(value))
