"""Base generator class."""

import logging
import threading
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Iterable, Iterator, List, Optional, Tuple, TypeVar

from src.analytics.models import CustomerRecord
from src.core.security import EncryptionPath, Encryptor
from .. import formatting
from ..exceptions import RenderAborted, RenderFailure
from ..models import (
    BookingsReport,
    CancellationsReport,
    CanonicalReport,
    FeedbackReport,
    GeneralReport,
    RevenueReport,
    RoutesReport,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

SUMMARY_HEADER = ("Metric", "Value")
CUSTOMER_HEADER = ("ID", "Name", "Email (Encrypted)", "Phone (Encrypted)", "Bookings")
CUSTOMER_NOTICE = "NOTE: Email and phone data are encrypted for security purposes."


class BaseGenerator(ABC):
    """
    Base class for report generators.

    A generator turns one canonical report into bytes. Generators are cheap,
    hold no state between renders and are meant to be built per request.
    """

    media_type: str = "application/octet-stream"
    extension: str = "bin"

    def __init__(
        self,
        encryptor: Optional[Encryptor] = None,
        clock: Optional[Callable[[], datetime]] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        """
        Initialize generator.

        Args:
            encryptor: Primary encryption primitive for customer email/phone
            clock: Returns the generation timestamp (defaults to datetime.now)
            cancel_event: When set, rendering stops at the next detail row
        """
        self.encryptor = encryptor
        self.clock = clock or datetime.now
        self.cancel_event = cancel_event
        self.encryption_path: Optional[EncryptionPath] = None

    @abstractmethod
    def render(self, report: CanonicalReport) -> bytes:
        """
        Render a canonical report.

        Args:
            report: Canonical report variant

        Returns:
            The encoded file contents
        """
        pass

    def _get_filename(self, prefix: str) -> str:
        """Generate filename with timestamp."""
        timestamp = self.clock().strftime("%Y%m%d_%H%M%S")
        return f"{prefix}_{timestamp}.{self.extension}"

    def _generated_on(self) -> str:
        return formatting.format_date(self.clock())

    # --- shared sections ---

    def _summary_rows(self, report: CanonicalReport) -> List[Tuple[str, str]]:
        """Summary section as (label, display value) pairs, identical across formats."""
        handlers = {
            BookingsReport: self._bookings_summary,
            RevenueReport: self._revenue_summary,
            CancellationsReport: self._cancellations_summary,
            RoutesReport: self._routes_summary,
            FeedbackReport: self._feedback_summary,
            GeneralReport: lambda r: [],
        }
        return self._dispatch(handlers, report)

    def _dispatch(self, handlers: dict, report: CanonicalReport):
        handler = handlers.get(type(report))
        if handler is None:
            raise RenderFailure(f"{type(self).__name__} has no handler for {type(report).__name__}")
        return handler(report)

    def _bookings_summary(self, report: BookingsReport):
        return [
            ("Total Bookings", formatting.format_count(report.total_bookings)),
            ("Booking Growth", formatting.format_scaled_percent(report.bookings_change)),
            ("Destination", report.destination),
            ("Status", report.status),
        ]

    def _revenue_summary(self, report: RevenueReport):
        return [
            ("Total Revenue", formatting.format_currency(report.total_revenue)),
            ("Average Ticket Price", formatting.format_currency(report.avg_ticket_price)),
            ("Revenue Growth", formatting.format_scaled_percent(report.revenue_change)),
            ("Destination", report.destination),
        ]

    def _cancellations_summary(self, report: CancellationsReport):
        return [
            ("Total Cancellations", formatting.format_count(report.total_cancellations)),
            ("Cancellation Rate", formatting.format_ratio_percent(report.cancellation_rate, 1)),
            ("Refund Amount", formatting.format_currency(report.refund_amount)),
            ("Destination", report.destination),
            ("Status", report.status),
        ]

    def _routes_summary(self, report: RoutesReport):
        return [
            ("Most Popular Route", report.most_popular_route),
            ("Highest Revenue Route", report.highest_revenue_route),
            ("Routes Analyzed", str(report.routes_analyzed)),
            ("Destination", report.destination),
        ]

    def _feedback_summary(self, report: FeedbackReport):
        return [
            ("Total Feedback", formatting.format_count(report.feedback_count)),
            ("Average Rating", formatting.format_rating(report.average_rating)),
            ("Satisfaction Rate", formatting.format_ratio_percent(report.satisfaction_rate, 0)),
        ]

    # --- detail tables (text renderers) ---

    def _text_detail_table(self, report: CanonicalReport) -> Optional[Tuple[List[str], List[list]]]:
        """(header, rows) of display strings for the detail section, or None for a summary-only render."""
        handlers = {
            BookingsReport: self._bookings_text_detail,
            RevenueReport: self._revenue_text_detail,
            CancellationsReport: self._cancellations_text_detail,
            RoutesReport: self._routes_text_detail,
            FeedbackReport: self._feedback_text_detail,
            GeneralReport: lambda r: None,
        }
        return self._dispatch(handlers, report)

    def _bookings_text_detail(self, report: BookingsReport):
        if not report.bookings_by_day:
            return None
        rows = [[item.date, formatting.format_count(item.bookings)] for item in self._rows(report.bookings_by_day)]
        return ["Date", "Bookings"], rows

    def _revenue_text_detail(self, report: RevenueReport):
        if not report.revenue_by_day:
            return None
        rows = [
            [
                item.date,
                formatting.format_currency(item.amount),
                formatting.format_currency(item.costs),
                formatting.format_currency(item.profit),
            ]
            for item in self._rows(report.revenue_by_day)
        ]
        return ["Date", "Revenue", "Costs", "Profit"], rows

    def _cancellations_text_detail(self, report: CancellationsReport):
        if not report.cancellations_by_day:
            return None
        rows = [
            [item.date, formatting.format_count(item.cancellations)]
            for item in self._rows(report.cancellations_by_day)
        ]
        return ["Date", "Cancellations"], rows

    def _routes_text_detail(self, report: RoutesReport):
        if not report.routes:
            return None
        rows = [
            [
                item.route,
                formatting.format_count(item.bookings),
                formatting.format_currency(item.revenue),
                formatting.format_occupancy(item.occupancy_rate),
            ]
            for item in self._rows(report.routes)
        ]
        return ["Route", "Bookings", "Revenue", "Occupancy Rate"], rows

    def _feedback_text_detail(self, report: FeedbackReport):
        if not report.rating_distribution:
            return None
        rows = [
            [item.rating_label, formatting.format_count(item.count), formatting.format_ratio_percent(item.percentage, 1)]
            for item in self._rows(report.rating_distribution)
        ]
        return ["Rating", "Count", "Percentage"], rows

    # --- cancellation ---

    def _rows(self, items: Iterable[T]) -> Iterator[T]:
        """Iterate detail rows, stopping if the caller cancelled the render."""
        for item in items:
            if self.cancel_event is not None and self.cancel_event.is_set():
                raise RenderAborted(f"{type(self).__name__} render cancelled")
            yield item

    # --- customer data ---

    def _resolve_encryptor(self) -> Encryptor:
        if self.encryptor is None:
            raise RenderFailure("No encryption primitive configured; refusing to emit customer data")
        self.encryption_path = EncryptionPath.PRIMARY
        return self.encryptor

    def _customer_rows(self, customers: Iterable[CustomerRecord]) -> List[Tuple[str, str, str, str, int]]:
        """Customer rows with email and phone encrypted. Plaintext never leaves this method."""
        encryptor = self._resolve_encryptor()
        rows = []
        for customer in self._rows(customers):
            try:
                email = encryptor.encrypt(customer.email)
                phone = encryptor.encrypt(customer.phone)
            except Exception as e:
                raise RenderFailure(f"Encryption failed for customer {customer.id}: {e}") from e
            rows.append((customer.id, customer.full_name, email, phone, customer.bookings_count))
        logger.debug(f"Encrypted {len(rows)} customer rows via {self.encryption_path.value} path")
        return rows
