"""Errors raised by the reporting engine."""


class ReportError(Exception):
    """Base class for report generation errors."""


class InvalidRequest(ReportError):
    """The request cannot be turned into a report (bad date range, missing metrics)."""


class UnsupportedFormat(ReportError):
    """The requested output format is not one of csv, spreadsheet, document."""

    def __init__(self, output_format: str):
        self.output_format = output_format
        super().__init__(f"Unsupported format: {output_format}")


class RenderFailure(ReportError):
    """A renderer could not produce its output."""


class RenderAborted(RenderFailure):
    """Rendering was cancelled by the caller."""
