"""CSV report generator. Every field is quoted; embedded quotes are doubled."""

import csv
import io
from typing import Sequence

from .. import formatting
from ..models import CanonicalReport, FeedbackReport
from .base import BaseGenerator, CUSTOMER_HEADER, CUSTOMER_NOTICE, SUMMARY_HEADER


class CSVReportGenerator(BaseGenerator):
    """Generate delimited-text reports."""

    media_type = "text/csv; charset=utf-8"
    extension = "csv"

    def render(self, report: CanonicalReport) -> bytes:
        """Generate CSV report."""
        output = io.StringIO()
        writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")

        # Title and metadata
        writer.writerow([report.title])
        writer.writerow(["Generated on", self._generated_on()])
        date_range = formatting.format_date_range(report.date_range)
        if date_range:
            writer.writerow(["Date Range", date_range])

        summary = self._summary_rows(report)
        if summary:
            self._section(writer, "Summary Data")
            writer.writerow(SUMMARY_HEADER)
            writer.writerows(summary)

        detail = self._text_detail_table(report)
        if detail:
            header, rows = detail
            self._section(writer, "Detailed Data")
            writer.writerow(header)
            writer.writerows(rows)

        if isinstance(report, FeedbackReport):
            self._text_section(writer, "Top Comments", report.top_comments)
            self._text_section(writer, "Improvement Areas", report.improvement_areas)

        if report.customer_data:
            self._section(writer, "Customer Data (Sensitive Information Encrypted)")
            writer.writerow(CUSTOMER_HEADER)
            writer.writerows(self._customer_rows(report.customer_data))
            self._section(writer, CUSTOMER_NOTICE)

        return output.getvalue().encode("utf-8")

    def _section(self, writer, title: str):
        writer.writerow([])
        writer.writerow([title])

    def _text_section(self, writer, title: str, lines: Sequence[str]):
        if not lines:
            return
        self._section(writer, title)
        for line in self._rows(lines):
            writer.writerow([line])
