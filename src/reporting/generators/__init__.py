"""Report generators, one per output format."""

from ..models import ReportFormat
from .base import BaseGenerator
from .csv_generator import CSVReportGenerator
from .excel_generator import ExcelReportGenerator
from .pdf_generator import PDFReportGenerator

GENERATORS = {
    ReportFormat.CSV: CSVReportGenerator,
    ReportFormat.SPREADSHEET: ExcelReportGenerator,
    ReportFormat.DOCUMENT: PDFReportGenerator,
}

__all__ = [
    "BaseGenerator",
    "CSVReportGenerator",
    "ExcelReportGenerator",
    "PDFReportGenerator",
    "GENERATORS",
]
