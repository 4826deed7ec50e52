"""PDF report generator using ReportLab Platypus."""

import io
import logging
from typing import List, Optional, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from src.core.config import settings
from src.core.security import Base64Obfuscator, EncryptionPath, Encryptor
from .. import formatting
from ..exceptions import RenderFailure
from ..models import CanonicalReport, FeedbackReport
from .base import BaseGenerator, CUSTOMER_HEADER, CUSTOMER_NOTICE, SUMMARY_HEADER

logger = logging.getLogger(__name__)

# Presentation constants
HEADER_BG = colors.HexColor("#171717")
SECTION_GAP = 15  # points between the end of one table and the next heading
FOOTER_NOTICE = "This report contains encrypted customer data for security purposes."

# Column widths in points; the A4 frame between the default 1 inch margins is ~451pt
CUSTOMER_COL_WIDTHS = (32, 85, 135, 135, 55)
COMMENTS_COL_WIDTHS = (442,)

TABLE_STYLE = TableStyle([
    ("BACKGROUND", (0, 0), (-1, 0), HEADER_BG),
    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
    ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
    ("FONTSIZE", (0, 0), (-1, -1), 9),
    ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ("VALIGN", (0, 0), (-1, -1), "TOP"),
    ("TOPPADDING", (0, 0), (-1, -1), 4),
    ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
])


class _FooterCanvas(canvas.Canvas):
    """Canvas that stamps the security notice and 'Page X of Y' on every page."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._saved_page_states = []

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        page_count = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self._draw_footer(page_count)
            super().showPage()
        super().save()

    def _draw_footer(self, page_count: int):
        width, _ = self._pagesize
        self.saveState()
        self.setFont("Helvetica", 8)
        self.drawCentredString(width / 2, 10 * mm, FOOTER_NOTICE)
        self.drawCentredString(width / 2, 5 * mm, f"Page {self.getPageNumber()} of {page_count}")
        self.restoreState()


class PDFReportGenerator(BaseGenerator):
    """Generate paginated PDF reports."""

    media_type = "application/pdf"
    extension = "pdf"

    def __init__(self, *args, allow_fallback: Optional[bool] = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.allow_fallback = settings.allow_obfuscation_fallback if allow_fallback is None else allow_fallback

        styles = getSampleStyleSheet()
        self.title_style = ParagraphStyle("ReportTitle", parent=styles["Title"], fontSize=20, alignment=TA_CENTER)
        self.meta_style = ParagraphStyle("ReportMeta", parent=styles["Normal"], fontSize=10, alignment=TA_CENTER)
        self.heading_style = ParagraphStyle("SectionHeading", parent=styles["Heading2"], fontSize=12)
        self.cell_style = ParagraphStyle("Cell", parent=styles["BodyText"], fontSize=8, leading=10, splitLongWords=1)
        self.notice_style = ParagraphStyle("Notice", parent=styles["Normal"], fontSize=8, textColor=colors.red)

    def render(self, report: CanonicalReport) -> bytes:
        """Generate PDF report."""
        story = self._build_story(report)

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            title=report.title,
            author=settings.company_name,
            bottomMargin=25 * mm,
            pageCompression=0,
        )
        try:
            doc.build(story, canvasmaker=_FooterCanvas)
        except Exception as e:
            logger.error(f"PDF layout failed for {report.title}: {e}", exc_info=True)
            raise RenderFailure(f"PDF layout failed: {e}") from e
        return buffer.getvalue()

    def _build_story(self, report: CanonicalReport) -> list:
        story = [
            Paragraph(escape(report.title), self.title_style),
            Paragraph(f"Generated on: {self._generated_on()}", self.meta_style),
        ]
        date_range = formatting.format_date_range(report.date_range)
        if date_range:
            story.append(Paragraph(f"Date Range: {date_range}", self.meta_style))

        summary = self._summary_rows(report)
        if summary:
            story.append(Spacer(1, SECTION_GAP))
            story.append(Paragraph("Report Summary", self.heading_style))
            story.append(self._table([list(SUMMARY_HEADER)] + [list(row) for row in summary]))

        detail = self._text_detail_table(report)
        if detail:
            header, rows = detail
            self._section(story, "Detailed Data", [header] + rows)

        if isinstance(report, FeedbackReport):
            self._text_section(story, "Top Comments", "Comments", report.top_comments)
            self._text_section(story, "Improvement Areas", "Improvement Areas", report.improvement_areas)

        if report.customer_data:
            rows = [
                [customer_id, name, self._cell(email), self._cell(phone), str(bookings)]
                for customer_id, name, email, phone, bookings in self._customer_rows(report.customer_data)
            ]
            self._section(story, "Customer Data", [list(CUSTOMER_HEADER)] + rows, CUSTOMER_COL_WIDTHS)
            story.append(Paragraph(CUSTOMER_NOTICE, self.notice_style))

        return story

    def _section(self, story: list, heading: str, data: List[list], col_widths: Optional[Sequence[float]] = None):
        story.append(Spacer(1, SECTION_GAP))
        story.append(Paragraph(heading, self.heading_style))
        story.append(self._table(data, col_widths))

    def _text_section(self, story: list, heading: str, column: str, lines: Sequence[str]):
        if not lines:
            return
        rows = [[self._cell(line)] for line in self._rows(lines)]
        self._section(story, heading, [[column]] + rows, COMMENTS_COL_WIDTHS)

    def _cell(self, text: str) -> Paragraph:
        return Paragraph(escape(text), self.cell_style)

    def _table(self, data: List[list], col_widths: Optional[Sequence[float]] = None) -> Table:
        table = Table(data, colWidths=col_widths, repeatRows=1, hAlign="LEFT")
        table.setStyle(TABLE_STYLE)
        return table

    def _resolve_encryptor(self) -> Encryptor:
        if self.encryptor is not None:
            return super()._resolve_encryptor()
        if not self.allow_fallback:
            raise RenderFailure("No encryption primitive configured and obfuscation fallback is disabled")
        logger.warning("No encryption primitive configured; using base64 obfuscation fallback for PDF")
        self.encryption_path = EncryptionPath.OBFUSCATION_FALLBACK
        return Base64Obfuscator()
