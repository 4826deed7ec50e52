"""
Analytics transfer objects.

A MetricsSnapshot is the read-only input for one report build. Scalar
metrics are optional: a provider may not know every figure, and the report
builder decides which ones a given report type cannot do without.
"""
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)


class DailyRevenue(_Frozen):
    """Revenue and costs for one day (or one bucket of the time scale)."""
    date: str
    amount: float
    costs: float


class ClassBookings(_Frozen):
    seat_class: str = Field(..., alias="class")
    count: int


class RouteBookings(_Frozen):
    route: str
    bookings: int
    # Fare-weighted revenue when the source knows it
    revenue: Optional[float] = None


class QuarterMargin(_Frozen):
    category: str
    percentage: float


class CustomerRecord(_Frozen):
    id: str
    first_name: str
    last_name: str
    email: str
    phone: str
    bookings_count: int = 0

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class MetricsSnapshot(_Frozen):
    """Aggregate analytics for one time window."""

    total_revenue: Optional[float] = None
    revenue_change: Optional[float] = None  # percent, 0-100 scale
    total_bookings: Optional[int] = None
    bookings_change: Optional[float] = None  # percent, 0-100 scale
    avg_ticket_price: Optional[float] = None
    avg_price_change: Optional[float] = None  # percent, 0-100 scale

    revenue_data: Tuple[DailyRevenue, ...] = ()
    bookings_by_class: Tuple[ClassBookings, ...] = ()
    popular_routes: Tuple[RouteBookings, ...] = ()
    profit_margin: Tuple[QuarterMargin, ...] = ()

    # Feedback aggregates
    average_rating: Optional[float] = None  # 0-5
    satisfaction_rate: Optional[float] = None  # 0-1
    feedback_comments: Tuple[str, ...] = ()
    improvement_areas: Tuple[str, ...] = ()
