"""
Analytics Module - Aggregate metrics for reporting.
"""

from src.analytics.models import CustomerRecord, MetricsSnapshot
from src.analytics.provider import MetricsProvider, SampleMetricsProvider

__all__ = [
    "CustomerRecord",
    "MetricsSnapshot",
    "MetricsProvider",
    "SampleMetricsProvider",
]
