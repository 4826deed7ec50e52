"""Builds canonical report variants from a metrics snapshot."""

import logging
import random
from typing import Callable, Dict, Optional, Sequence

from src.analytics.models import CustomerRecord, MetricsSnapshot
from . import formatting
from .exceptions import InvalidRequest
from .models import (
    BookingsReport,
    CancellationsReport,
    CanonicalReport,
    DailyBookings,
    DailyCancellations,
    DailyRevenueRow,
    FeedbackReport,
    GeneralReport,
    RatingBucket,
    ReportRequest,
    ReportType,
    RevenueReport,
    RoutePerformance,
    RoutesReport,
)

logger = logging.getLogger(__name__)

TITLES = {
    ReportType.BOOKINGS: "Bookings Report",
    ReportType.REVENUE: "Revenue Report",
    ReportType.CANCELLATIONS: "Cancellations Report",
    ReportType.ROUTES: "Popular Routes Report",
    ReportType.FEEDBACK: "Customer Feedback Report",
}
GENERAL_TITLE = "General Report"

# Metrics each report type cannot be built without
REQUIRED_METRICS = {
    ReportType.BOOKINGS: ("total_bookings", "bookings_change", "avg_ticket_price"),
    ReportType.REVENUE: ("total_revenue", "avg_ticket_price", "revenue_change"),
    ReportType.CANCELLATIONS: ("total_bookings", "total_revenue"),
    ReportType.ROUTES: (),
    ReportType.FEEDBACK: ("total_bookings",),
}

# Cancellation policy
CANCELLATION_RATE = 0.082
REFUND_FRACTION = 0.06

# Feedback policy
FEEDBACK_RESPONSE_RATE = 0.35
DEFAULT_AVERAGE_RATING = 4.2
DEFAULT_SATISFACTION_RATE = 0.87
RATING_SHARES = (
    ("5 Stars", 0.45),
    ("4 Stars", 0.3),
    ("3 Stars", 0.15),
    ("2 Stars", 0.07),
    ("1 Star", 0.03),
)
DEFAULT_TOP_COMMENTS = (
    "Excellent service on my flight to London",
    "The new mobile app is much easier to use",
    "Flight attendants were very professional and helpful",
    "Business class seats are very comfortable",
)
DEFAULT_IMPROVEMENT_AREAS = (
    "In-flight meal quality on long-haul flights",
    "Check-in process at JFK and LAX airports",
    "Baggage handling delays",
)


class ReportModelBuilder:
    """
    Map (report type, request, metrics) to a canonical report variant.

    The RNG only feeds the route occupancy estimate; seed it to pin output.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self._builders: Dict[ReportType, Callable[..., CanonicalReport]] = {
            ReportType.BOOKINGS: self._build_bookings,
            ReportType.REVENUE: self._build_revenue,
            ReportType.CANCELLATIONS: self._build_cancellations,
            ReportType.ROUTES: self._build_routes,
            ReportType.FEEDBACK: self._build_feedback,
        }

    def build(
        self,
        report_type: str,
        request: ReportRequest,
        metrics: MetricsSnapshot,
        customers: Optional[Sequence[CustomerRecord]] = None,
    ) -> CanonicalReport:
        """
        Build the canonical model for one request.

        Args:
            report_type: Requested report type; unknown types give a GeneralReport
            request: The originating request (filters, date range)
            metrics: Snapshot from the metrics provider
            customers: Optional customer records to attach

        Returns:
            A frozen canonical report variant

        Raises:
            InvalidRequest: malformed date range or a required metric is missing
        """
        self._check_date_range(request)

        common = {
            "date_range": request.date_range,
            "customer_data": tuple(customers) if customers else None,
        }

        try:
            known_type = ReportType(report_type)
        except ValueError:
            logger.info(f"Unknown report type {report_type!r}, building general report")
            return GeneralReport(title=GENERAL_TITLE, data=metrics, **common)

        self._check_required(known_type, metrics)
        report = self._builders[known_type](request, metrics, title=TITLES[known_type], **common)
        logger.debug(f"Built {report.kind} model: {report.title}")
        return report

    # --- validation ---

    def _check_date_range(self, request: ReportRequest):
        date_range = request.date_range
        if date_range is not None and date_range.from_date > date_range.to_date:
            raise InvalidRequest(
                f"Date range starts after it ends: {date_range.from_date} > {date_range.to_date}"
            )

    def _check_required(self, report_type: ReportType, metrics: MetricsSnapshot):
        missing = [name for name in REQUIRED_METRICS[report_type] if getattr(metrics, name) is None]
        if missing:
            raise InvalidRequest(
                f"{report_type.value} report requires metrics that are missing: {', '.join(missing)}"
            )
        if "avg_ticket_price" in REQUIRED_METRICS[report_type] and metrics.avg_ticket_price <= 0:
            raise InvalidRequest("avg_ticket_price must be positive")

    # --- variants ---

    def _build_bookings(self, request: ReportRequest, metrics: MetricsSnapshot, **common) -> BookingsReport:
        by_day = tuple(
            DailyBookings(date=item.date, bookings=formatting.floor_int(item.amount / metrics.avg_ticket_price))
            for item in metrics.revenue_data
        )
        return BookingsReport(
            total_bookings=metrics.total_bookings,
            bookings_change=metrics.bookings_change,
            destination=formatting.destination_label(request.destination),
            status=formatting.status_label(request.status),
            bookings_by_day=by_day,
            bookings_by_class=metrics.bookings_by_class,
            **common,
        )

    def _build_revenue(self, request: ReportRequest, metrics: MetricsSnapshot, **common) -> RevenueReport:
        by_day = tuple(
            DailyRevenueRow(date=item.date, amount=item.amount, costs=item.costs, profit=item.amount - item.costs)
            for item in metrics.revenue_data
        )
        return RevenueReport(
            total_revenue=metrics.total_revenue,
            avg_ticket_price=metrics.avg_ticket_price,
            revenue_change=metrics.revenue_change,
            destination=formatting.destination_label(request.destination),
            revenue_by_day=by_day,
            profit_margin=metrics.profit_margin,
            **common,
        )

    def _build_cancellations(self, request: ReportRequest, metrics: MetricsSnapshot, **common) -> CancellationsReport:
        by_day = ()
        # Without a ticket price there is no daily booking count to apply the rate to
        if metrics.avg_ticket_price:
            by_day = tuple(
                DailyCancellations(
                    date=item.date,
                    cancellations=formatting.floor_int(
                        formatting.floor_int(item.amount / metrics.avg_ticket_price) * CANCELLATION_RATE
                    ),
                )
                for item in metrics.revenue_data
            )
        return CancellationsReport(
            total_cancellations=formatting.floor_int(metrics.total_bookings * CANCELLATION_RATE),
            cancellation_rate=CANCELLATION_RATE,
            refund_amount=formatting.floor_int(metrics.total_revenue * REFUND_FRACTION),
            destination=formatting.destination_label(request.destination),
            status=formatting.status_label(request.status),
            cancellations_by_day=by_day,
            **common,
        )

    def _build_routes(self, request: ReportRequest, metrics: MetricsSnapshot, **common) -> RoutesReport:
        routes = tuple(
            RoutePerformance(
                route=item.route,
                bookings=item.bookings,
                revenue=formatting.route_revenue(item.bookings, metrics.avg_ticket_price),
                occupancy_rate=formatting.occupancy_rate(self.rng),
            )
            for item in metrics.popular_routes
        )

        most_popular = "N/A"
        highest_revenue = "N/A"
        if metrics.popular_routes:
            most_popular = max(metrics.popular_routes, key=lambda r: r.bookings).route
            highest_revenue = max(
                metrics.popular_routes,
                key=lambda r: r.revenue if r.revenue is not None
                else formatting.route_revenue(r.bookings, metrics.avg_ticket_price),
            ).route

        return RoutesReport(
            most_popular_route=most_popular,
            highest_revenue_route=highest_revenue,
            routes_analyzed=len(metrics.popular_routes),
            destination=formatting.destination_label(request.destination),
            routes=routes,
            **common,
        )

    def _build_feedback(self, request: ReportRequest, metrics: MetricsSnapshot, **common) -> FeedbackReport:
        feedback_count = formatting.floor_int(metrics.total_bookings * FEEDBACK_RESPONSE_RATE)
        # Floored buckets need not add up to feedback_count
        buckets = []
        for label, share in RATING_SHARES:
            count = formatting.floor_int(feedback_count * share)
            buckets.append(RatingBucket(
                rating_label=label,
                count=count,
                percentage=formatting.bucket_percentage(count, feedback_count),
            ))

        return FeedbackReport(
            feedback_count=feedback_count,
            average_rating=metrics.average_rating if metrics.average_rating is not None else DEFAULT_AVERAGE_RATING,
            satisfaction_rate=(
                metrics.satisfaction_rate if metrics.satisfaction_rate is not None else DEFAULT_SATISFACTION_RATE
            ),
            rating_distribution=tuple(buckets),
            top_comments=metrics.feedback_comments or DEFAULT_TOP_COMMENTS,
            improvement_areas=metrics.improvement_areas or DEFAULT_IMPROVEMENT_AREAS,
            **common,
        )


def build_report_model(
    report_type: str,
    request: ReportRequest,
    metrics: MetricsSnapshot,
    customers: Optional[Sequence[CustomerRecord]] = None,
    rng: Optional[random.Random] = None,
) -> CanonicalReport:
    """Convenience wrapper around ReportModelBuilder.build."""
    return ReportModelBuilder(rng=rng).build(report_type, request, metrics, customers)
