"""
Report requests, canonical report variants and generated report metadata.

Canonical variants are frozen pydantic models discriminated by ``kind``.
One variant exists per report type plus GeneralReport for unknown types.
"""

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.analytics.models import ClassBookings, CustomerRecord, MetricsSnapshot, QuarterMargin
from src.core.security import EncryptionPath
from .exceptions import UnsupportedFormat


class ReportType(str, Enum):
    BOOKINGS = "bookings"
    REVENUE = "revenue"
    CANCELLATIONS = "cancellations"
    ROUTES = "routes"
    FEEDBACK = "feedback"


class ReportFormat(str, Enum):
    CSV = "csv"
    SPREADSHEET = "spreadsheet"
    DOCUMENT = "document"

    @classmethod
    def resolve(cls, value: str) -> "ReportFormat":
        """Map a requested format (including legacy aliases) to a ReportFormat."""
        if isinstance(value, cls):
            return value
        key = str(value).strip().lower()
        key = FORMAT_ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            raise UnsupportedFormat(value) from None


FORMAT_ALIASES = {
    "excel": "spreadsheet",
    "xlsx": "spreadsheet",
    "pdf": "document",
}


class TimeFrame(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

    @property
    def time_scale(self) -> str:
        return {"daily": "day", "weekly": "week", "monthly": "month"}[self.value]


class DateRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    from_date: date
    to_date: date


class ReportRequest(BaseModel):
    """A request for one report."""

    report_type: str = Field(..., description="bookings, revenue, cancellations, routes or feedback")
    output_format: str = Field("csv", description="csv, spreadsheet or document (aliases: excel, pdf)")
    time_frame: TimeFrame = Field(TimeFrame.MONTHLY, description="daily, weekly or monthly")
    date_range: Optional[DateRange] = None
    destination: Optional[str] = Field(None, description="Destination filter; 'all' for no filter")
    status: Optional[str] = Field(None, description="Booking status filter; 'all' for no filter")
    include_customer_data: bool = Field(False, description="Attach the customer data section")

    @field_validator('report_type', 'output_format')
    @classmethod
    def normalize_token(cls, v: str) -> str:
        return v.strip().lower()


# --- Canonical report variants ---

class _Variant(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    date_range: Optional[DateRange] = None
    customer_data: Optional[Tuple[CustomerRecord, ...]] = None


class DailyBookings(BaseModel):
    model_config = ConfigDict(frozen=True)
    date: str
    bookings: int


class DailyRevenueRow(BaseModel):
    model_config = ConfigDict(frozen=True)
    date: str
    amount: float
    costs: float
    profit: float


class DailyCancellations(BaseModel):
    model_config = ConfigDict(frozen=True)
    date: str
    cancellations: int


class RoutePerformance(BaseModel):
    model_config = ConfigDict(frozen=True)
    route: str
    bookings: int
    revenue: float
    occupancy_rate: float  # percent, 0-100 scale, one decimal


class RatingBucket(BaseModel):
    model_config = ConfigDict(frozen=True)
    rating_label: str
    count: int
    percentage: float  # fraction of feedback_count, 0-1 scale


class BookingsReport(_Variant):
    kind: Literal["bookings"] = "bookings"
    total_bookings: int
    bookings_change: float  # 0-100 scale
    destination: str
    status: str
    bookings_by_day: Tuple[DailyBookings, ...] = ()
    bookings_by_class: Tuple[ClassBookings, ...] = ()


class RevenueReport(_Variant):
    kind: Literal["revenue"] = "revenue"
    total_revenue: float
    avg_ticket_price: float
    revenue_change: float  # 0-100 scale
    destination: str
    revenue_by_day: Tuple[DailyRevenueRow, ...] = ()
    profit_margin: Tuple[QuarterMargin, ...] = ()


class CancellationsReport(_Variant):
    kind: Literal["cancellations"] = "cancellations"
    total_cancellations: int
    cancellation_rate: float  # 0-1 scale
    refund_amount: int
    destination: str
    status: str
    cancellations_by_day: Tuple[DailyCancellations, ...] = ()


class RoutesReport(_Variant):
    kind: Literal["routes"] = "routes"
    most_popular_route: str
    highest_revenue_route: str
    routes_analyzed: int
    destination: str
    routes: Tuple[RoutePerformance, ...] = ()


class FeedbackReport(_Variant):
    kind: Literal["feedback"] = "feedback"
    feedback_count: int
    average_rating: float  # 0-5
    satisfaction_rate: float  # 0-1 scale
    rating_distribution: Tuple[RatingBucket, ...] = ()
    top_comments: Tuple[str, ...] = ()
    improvement_areas: Tuple[str, ...] = ()


class GeneralReport(_Variant):
    kind: Literal["general"] = "general"
    data: MetricsSnapshot


CanonicalReport = Annotated[
    Union[BookingsReport, RevenueReport, CancellationsReport, RoutesReport, FeedbackReport, GeneralReport],
    Field(discriminator="kind"),
]


class GeneratedReport(BaseModel):
    """Result of one orchestrated report generation."""

    model: CanonicalReport
    file_bytes: bytes
    output_format: ReportFormat
    media_type: str
    filename: str
    generated_at: datetime
    encryption_path: Optional[EncryptionPath] = None

    @property
    def size(self) -> int:
        return len(self.file_bytes)
