"""Public service interface for the Reporting module."""
from src.reporting.workflow import generate_report, ReportOrchestrator
from src.reporting.models import ReportRequest, GeneratedReport
from src.reporting.exceptions import ReportError, InvalidRequest, UnsupportedFormat, RenderFailure

# Re-export key functions
__all__ = [
    "generate_report",
    "ReportOrchestrator",
    "ReportRequest",
    "GeneratedReport",
    "ReportError",
    "InvalidRequest",
    "UnsupportedFormat",
    "RenderFailure",
]
