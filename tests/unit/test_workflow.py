"""
Unit tests for the report orchestrator.
Provider, clock, RNG and encryption primitive are all injected.
"""
import random
import threading

import pytest

from src.core.security import EncryptionPath
from src.reporting import generate_report
from src.reporting.exceptions import InvalidRequest, RenderAborted, RenderFailure, UnsupportedFormat
from src.reporting.models import DateRange, ReportFormat
from src.reporting.workflow import ReportOrchestrator

MEDIA_TYPES = {
    "csv": "text/csv; charset=utf-8",
    "spreadsheet": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "document": "application/pdf",
}


@pytest.fixture
def orchestrator(provider, encryptor, fixed_clock):
    return ReportOrchestrator(provider=provider, encryptor=encryptor, clock=fixed_clock, rng=random.Random(3))


@pytest.mark.parametrize("report_type", ["bookings", "revenue", "cancellations", "routes", "feedback"])
@pytest.mark.parametrize("output_format", ["csv", "spreadsheet", "document"])
def test_every_type_renders_in_every_format(orchestrator, make_request, report_type, output_format):
    result = orchestrator.generate(make_request(report_type, output_format))
    assert result.size > 0
    assert result.media_type == MEDIA_TYPES[output_format]
    assert result.output_format == ReportFormat(output_format)
    assert result.model.kind == report_type


def test_result_metadata(orchestrator, make_request):
    result = orchestrator.generate(make_request("revenue", "spreadsheet"))
    assert result.filename == "revenue_report_20240305_143000.xlsx"
    assert result.generated_at.year == 2024
    assert result.encryption_path is None


@pytest.mark.parametrize("alias,expected", [("excel", "spreadsheet"), ("XLSX", "spreadsheet"), ("pdf", "document")])
def test_format_aliases(orchestrator, make_request, alias, expected):
    result = orchestrator.generate(make_request("bookings", alias))
    assert result.output_format.value == expected


def test_unsupported_format_fails_before_fetch(orchestrator, provider, make_request):
    with pytest.raises(UnsupportedFormat, match="xml"):
        orchestrator.generate(make_request("bookings", "xml"))
    assert provider.calls == []


def test_invalid_request_propagates(orchestrator, make_request):
    from datetime import date
    bad = DateRange(from_date=date(2024, 3, 1), to_date=date(2024, 2, 1))
    with pytest.raises(InvalidRequest):
        orchestrator.generate(make_request("bookings", "csv", date_range=bad))


@pytest.mark.parametrize("time_frame,scale", [("daily", "day"), ("weekly", "week"), ("monthly", "month")])
def test_time_frame_maps_to_time_scale(orchestrator, provider, make_request, time_frame, scale):
    orchestrator.generate(make_request("revenue", "csv", time_frame=time_frame))
    assert provider.calls == [scale]


def test_unknown_type_renders_general_report(orchestrator, make_request):
    result = orchestrator.generate(make_request("loyalty", "csv"))
    assert result.model.kind == "general"
    assert result.file_bytes.decode("utf-8").startswith('"General Report"')


class TestCustomerData:

    def test_customers_only_when_requested(self, orchestrator, encryptor, make_request):
        result = orchestrator.generate(make_request("bookings", "csv"))
        assert result.model.customer_data is None
        assert encryptor.calls == []

    def test_customers_are_encrypted(self, orchestrator, encryptor, make_request):
        result = orchestrator.generate(make_request("bookings", "spreadsheet", include_customer_data=True))
        assert len(result.model.customer_data) == 2
        assert result.encryption_path == EncryptionPath.PRIMARY
        assert "a@b.com" in encryptor.calls

    def test_encryption_failure_is_render_failure(self, provider, failing_encryptor, fixed_clock, make_request):
        orchestrator = ReportOrchestrator(provider=provider, encryptor=failing_encryptor, clock=fixed_clock)
        with pytest.raises(RenderFailure):
            orchestrator.generate(make_request("bookings", "csv", include_customer_data=True))

    def test_document_fallback_is_reported(self, provider, fixed_clock, make_request, monkeypatch):
        monkeypatch.setattr("src.reporting.workflow.default_encryptor", lambda: None)
        orchestrator = ReportOrchestrator(provider=provider, clock=fixed_clock, allow_fallback=True)
        result = orchestrator.generate(make_request("bookings", "document", include_customer_data=True))
        assert result.encryption_path == EncryptionPath.OBFUSCATION_FALLBACK

    def test_spreadsheet_never_falls_back(self, provider, fixed_clock, make_request, monkeypatch):
        monkeypatch.setattr("src.reporting.workflow.default_encryptor", lambda: None)
        orchestrator = ReportOrchestrator(provider=provider, clock=fixed_clock, allow_fallback=True)
        with pytest.raises(RenderFailure):
            orchestrator.generate(make_request("bookings", "spreadsheet", include_customer_data=True))


def test_cancelled_render_is_aborted(orchestrator, make_request):
    event = threading.Event()
    event.set()
    with pytest.raises(RenderAborted):
        orchestrator.generate(make_request("revenue", "document"), cancel_event=event)


def test_unexpected_renderer_error_is_wrapped(orchestrator, make_request, monkeypatch):
    def explode(self, report):
        raise KeyError("boom")

    monkeypatch.setattr("src.reporting.generators.csv_generator.CSVReportGenerator.render", explode)
    with pytest.raises(RenderFailure, match="Revenue Report"):
        orchestrator.generate(make_request("revenue", "csv"))


def test_concurrent_requests_are_independent(provider, encryptor, fixed_clock, make_request):
    orchestrator = ReportOrchestrator(provider=provider, encryptor=encryptor, clock=fixed_clock,
                                      rng=random.Random(1))
    results = {}

    def run(report_type):
        results[report_type] = orchestrator.generate(make_request(report_type, "csv"))

    threads = [threading.Thread(target=run, args=(t,)) for t in ("bookings", "revenue", "feedback")]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert {r.model.title for r in results.values()} == {"Bookings Report", "Revenue Report", "Customer Feedback Report"}


def test_generate_report_helper(provider, encryptor, fixed_clock, make_request):
    result = generate_report(make_request("routes", "csv"), provider=provider, encryptor=encryptor, clock=fixed_clock)
    assert result.model.routes_analyzed == 3
