"""Excel report generator with styled header rows and native number cells."""

import io
from typing import List, Sequence

from openpyxl import Workbook
from openpyxl.styles import PatternFill, Font, Alignment
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from src.core.config import settings
from .. import formatting
from ..models import (
    BookingsReport,
    CancellationsReport,
    CanonicalReport,
    FeedbackReport,
    GeneralReport,
    RevenueReport,
    RoutesReport,
)
from .base import BaseGenerator, CUSTOMER_HEADER, CUSTOMER_NOTICE, SUMMARY_HEADER

# Presentation constants
HEADER_FILL = PatternFill(start_color="171717", end_color="171717", fill_type="solid")
HEADER_FONT = Font(bold=True, color="FFFFFF")
TITLE_FONT = Font(name="Arial", size=16, bold=True)
META_FONT = Font(name="Arial", size=10)
NOTICE_FONT = Font(bold=True, color="FF0000")
SUMMARY_WIDTH = 25
DETAIL_WIDTH = 20
COMMENTS_WIDTH = 100


class ExcelReportGenerator(BaseGenerator):
    """Generate Excel workbooks: Summary, Detailed Data and optional extra sheets."""

    media_type = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
    extension = "xlsx"

    def render(self, report: CanonicalReport) -> bytes:
        """Generate Excel report."""
        wb = Workbook()
        wb.remove(wb.active)  # Remove default sheet

        generated_at = self.clock()
        wb.properties.creator = settings.company_name
        wb.properties.lastModifiedBy = settings.company_name
        wb.properties.created = generated_at
        wb.properties.modified = generated_at

        # Generate sheets
        self._create_summary_sheet(wb, report)
        self._create_detail_sheet(wb, report)
        if isinstance(report, FeedbackReport):
            self._create_text_sheet(wb, "Top Comments", "Comments", report.top_comments)
            self._create_text_sheet(wb, "Improvement Areas", "Improvement Areas", report.improvement_areas)
        if report.customer_data:
            self._create_customer_sheet(wb, report)

        buffer = io.BytesIO()
        wb.save(buffer)
        return buffer.getvalue()

    def _style_header(self, ws: Worksheet, row: int, columns: int):
        for col in range(1, columns + 1):
            cell = ws.cell(row, col)
            cell.font = HEADER_FONT
            cell.fill = HEADER_FILL

    def _write_header(self, ws: Worksheet, row: int, headers: Sequence[str]):
        for col, header in enumerate(headers, start=1):
            ws.cell(row, col, header)
        self._style_header(ws, row, len(headers))

    def _create_summary_sheet(self, wb: Workbook, report: CanonicalReport):
        """Create summary sheet."""
        ws = wb.create_sheet("Summary", 0)

        # Title
        ws.merge_cells("A1:D1")
        ws['A1'] = report.title
        ws['A1'].font = TITLE_FONT
        ws['A1'].alignment = Alignment(horizontal='center')

        ws.merge_cells("A2:D2")
        ws['A2'] = f"Generated on: {self._generated_on()}"
        ws['A2'].font = META_FONT
        ws['A2'].alignment = Alignment(horizontal='center')

        row = 3
        date_range = formatting.format_date_range(report.date_range)
        if date_range:
            ws.merge_cells("A3:D3")
            ws['A3'] = f"Date Range: {date_range}"
            ws['A3'].font = META_FONT
            ws['A3'].alignment = Alignment(horizontal='center')
            row = 4

        summary = self._summary_rows(report)
        if summary:
            # Blank row, then the metric table
            row += 1
            self._write_header(ws, row, SUMMARY_HEADER)
            for i, (label, value) in enumerate(summary, start=row + 1):
                ws.cell(i, 1, label)
                ws.cell(i, 2, value)

        for col in range(1, 5):
            ws.column_dimensions[get_column_letter(col)].width = SUMMARY_WIDTH

    def _create_detail_sheet(self, wb: Workbook, report: CanonicalReport):
        """Create the detailed data sheet, unless there are no detail rows."""
        handlers = {
            BookingsReport: self._bookings_detail,
            RevenueReport: self._revenue_detail,
            CancellationsReport: self._cancellations_detail,
            RoutesReport: self._routes_detail,
            FeedbackReport: self._feedback_detail,
            GeneralReport: lambda r: None,
        }
        detail = self._dispatch(handlers, report)
        if detail is None:
            return

        headers, rows, number_formats = detail
        ws = wb.create_sheet("Detailed Data")
        self._write_header(ws, 1, headers)

        for row_idx, values in enumerate(rows, start=2):
            for col, value in enumerate(values, start=1):
                cell = ws.cell(row_idx, col, value)
                if col in number_formats:
                    cell.number_format = number_formats[col]

        ws.freeze_panes = "A2"
        for col in range(1, len(headers) + 1):
            ws.column_dimensions[get_column_letter(col)].width = DETAIL_WIDTH

    def _bookings_detail(self, report: BookingsReport):
        if not report.bookings_by_day:
            return None
        rows = [[item.date, item.bookings] for item in self._rows(report.bookings_by_day)]
        return ["Date", "Bookings"], rows, {}

    def _revenue_detail(self, report: RevenueReport):
        if not report.revenue_by_day:
            return None
        rows = [[item.date, item.amount, item.costs, item.profit] for item in self._rows(report.revenue_by_day)]
        currency_cols = {2: formatting.CURRENCY_FORMAT, 3: formatting.CURRENCY_FORMAT, 4: formatting.CURRENCY_FORMAT}
        return ["Date", "Revenue", "Costs", "Profit"], rows, currency_cols

    def _cancellations_detail(self, report: CancellationsReport):
        if not report.cancellations_by_day:
            return None
        rows = [[item.date, item.cancellations] for item in self._rows(report.cancellations_by_day)]
        return ["Date", "Cancellations"], rows, {}

    def _routes_detail(self, report: RoutesReport):
        if not report.routes:
            return None
        # Occupancy is stored as a fraction so the percent format shows e.g. 82.3%
        rows = [
            [item.route, item.bookings, item.revenue, item.occupancy_rate / 100]
            for item in self._rows(report.routes)
        ]
        formats = {3: formatting.CURRENCY_FORMAT, 4: formatting.PERCENT_FORMAT}
        return ["Route", "Bookings", "Revenue", "Occupancy Rate"], rows, formats

    def _feedback_detail(self, report: FeedbackReport):
        if not report.rating_distribution:
            return None
        rows = [
            [item.rating_label, item.count, item.percentage]
            for item in self._rows(report.rating_distribution)
        ]
        return ["Rating", "Count", "Percentage"], rows, {3: formatting.PERCENT_FORMAT}

    def _create_text_sheet(self, wb: Workbook, title: str, header: str, lines: Sequence[str]):
        """Single-column sheet of free text (comments, improvement areas)."""
        if not lines:
            return
        ws = wb.create_sheet(title)
        self._write_header(ws, 1, [header])
        for row, line in enumerate(self._rows(lines), start=2):
            ws.cell(row, 1, line)
        ws.column_dimensions['A'].width = COMMENTS_WIDTH

    def _create_customer_sheet(self, wb: Workbook, report: CanonicalReport):
        """Customer sheet; email and phone are written encrypted, as strings."""
        ws = wb.create_sheet("Customer Data")
        self._write_header(ws, 1, CUSTOMER_HEADER)

        rows: List[tuple] = self._customer_rows(report.customer_data)
        for row_idx, values in enumerate(rows, start=2):
            for col, value in enumerate(values, start=1):
                ws.cell(row_idx, col, str(value))

        # Security notice after a blank row
        notice_row = len(rows) + 3
        ws.cell(notice_row, 1, CUSTOMER_NOTICE).font = NOTICE_FONT

        column_widths = [8, 25, 45, 45, 12]
        for col, width in enumerate(column_widths, start=1):
            ws.column_dimensions[get_column_letter(col)].width = width
