"""
Reporting Module - Multi-format Output Generation.
"""

from src.reporting.service import (
    generate_report,
    ReportOrchestrator,
    ReportRequest,
    GeneratedReport,
    ReportError,
    InvalidRequest,
    UnsupportedFormat,
    RenderFailure,
)

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
