"""Main workflow orchestration."""

import logging
import random
import threading
from datetime import datetime
from typing import Callable, Optional

from src.analytics.provider import MetricsProvider, SampleMetricsProvider
from src.core.security import Encryptor, default_encryptor
from .builder import ReportModelBuilder
from .exceptions import RenderFailure, ReportError
from .generators import GENERATORS
from .models import GeneratedReport, ReportFormat, ReportRequest

logger = logging.getLogger(__name__)


class ReportOrchestrator:
    """
    Resolve a report request into a canonical model and render it.

    Collaborators are injected so that tests can pin the clock, the RNG
    behind the occupancy estimate and the encryption primitive.
    """

    def __init__(
        self,
        provider: Optional[MetricsProvider] = None,
        encryptor: Optional[Encryptor] = None,
        clock: Optional[Callable[[], datetime]] = None,
        rng: Optional[random.Random] = None,
        allow_fallback: Optional[bool] = None,
    ):
        self.provider = provider or SampleMetricsProvider(rng=rng)
        self.encryptor = encryptor if encryptor is not None else default_encryptor()
        self.clock = clock or datetime.now
        self.builder = ReportModelBuilder(rng=rng)
        self.allow_fallback = allow_fallback

    def generate(
        self,
        request: ReportRequest,
        cancel_event: Optional[threading.Event] = None,
    ) -> GeneratedReport:
        """
        Generate one report.

        Args:
            request: The report request
            cancel_event: Optional event; when set, rendering stops at the next detail row

        Returns:
            GeneratedReport with the canonical model, the file bytes and metadata

        Raises:
            UnsupportedFormat: output_format is not csv, spreadsheet or document
            InvalidRequest: the builder rejected the request
            RenderFailure: the renderer failed (including encryption failures)
        """
        # Resolve the format first so an unsupported one never fetches metrics
        output_format = ReportFormat.resolve(request.output_format)
        logger.info(f"Generating {request.report_type} report as {output_format.value} ({request.time_frame.value})")

        metrics = self.provider.get_analytics(request.time_frame.time_scale)
        customers = self.provider.get_customers() if request.include_customer_data else None

        model = self.builder.build(request.report_type, request, metrics, customers)

        generator = self._make_generator(output_format, cancel_event)
        generated_at = self.clock()
        try:
            file_bytes = generator.render(model)
        except ReportError:
            raise
        except Exception as e:
            logger.exception(f"{type(generator).__name__} failed rendering {model.title}")
            raise RenderFailure(f"Failed to render {model.title} as {output_format.value}: {e}") from e

        result = GeneratedReport(
            model=model,
            file_bytes=file_bytes,
            output_format=output_format,
            media_type=generator.media_type,
            filename=generator._get_filename(f"{model.kind}_report"),
            generated_at=generated_at,
            encryption_path=generator.encryption_path,
        )
        logger.info(f"Generated {result.filename} ({result.size} bytes)")
        return result

    def _make_generator(self, output_format: ReportFormat, cancel_event: Optional[threading.Event]):
        generator_cls = GENERATORS[output_format]
        kwargs = {"encryptor": self.encryptor, "clock": self.clock, "cancel_event": cancel_event}
        if output_format == ReportFormat.DOCUMENT:
            kwargs["allow_fallback"] = self.allow_fallback
        return generator_cls(**kwargs)


def generate_report(request: ReportRequest, **kwargs) -> GeneratedReport:
    """
    Generate a report with a one-off orchestrator.

    Keyword arguments are passed to ReportOrchestrator.
    """
    return ReportOrchestrator(**kwargs).generate(request)
