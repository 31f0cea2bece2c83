"""Unit tests for tracing setup and evaluation spans - no network calls."""
import base64
from unittest.mock import MagicMock, patch

from brand_safety.models import RiskLevel
from observability.tracing import SpanRecorder, evaluation_span, setup_tracing, shutdown_tracing


def test_setup_tracing_with_keys_uses_langfuse_endpoint():
    """OTLP exporter targets the HTTP traces path with Basic auth."""
    with patch("observability.tracing.OTLPSpanExporter") as mock_exporter_cls, \
         patch("observability.tracing.BatchSpanProcessor") as mock_processor_cls:
        mock_processor_cls.return_value = MagicMock()

        setup_tracing(
            service_name="brand-eval-test",
            host="http://localhost:3001/",
            public_key="pk-test",
            secret_key="sk-test",
        )

        kwargs = mock_exporter_cls.call_args.kwargs
        assert kwargs["endpoint"] == "http://localhost:3001/api/public/otel/v1/traces"
        expected = base64.b64encode(b"pk-test:sk-test").decode()
        assert kwargs["headers"]["Authorization"] == f"Basic {expected}"
        shutdown_tracing()


def test_setup_tracing_without_keys_falls_back_to_console():
    with patch("observability.tracing.ConsoleSpanExporter") as mock_console_cls, \
         patch("observability.tracing.OTLPSpanExporter") as mock_exporter_cls, \
         patch("observability.tracing.BatchSpanProcessor"):
        setup_tracing(service_name="brand-eval-test", public_key="", secret_key="")

        mock_console_cls.assert_called_once()
        mock_exporter_cls.assert_not_called()
        shutdown_tracing()


def test_deployment_attributes_land_on_resource():
    with patch("observability.tracing.BatchSpanProcessor"), \
         patch("observability.tracing.ConsoleSpanExporter"):
        provider = setup_tracing(
            service_name="brand-eval-test",
            attributes={"batch.window_size": 10, "contextual.provider": "none"},
            public_key="",
            secret_key="",
        )

    attributes = provider.resource.attributes
    assert attributes["service.name"] == "brand-eval-test"
    assert attributes["service.namespace"] == "brand-evaluation"
    assert attributes["batch.window_size"] == 10
    assert attributes["contextual.provider"] == "none"
    shutdown_tracing()


def test_recorder_prefixes_fields_with_area():
    span = MagicMock()
    recorder = SpanRecorder(span, "safety")

    recorder.record(overall_risk=RiskLevel.HIGH, breaches=2, context=None)

    span.set_attribute.assert_any_call("safety.overall_risk", "HIGH")
    span.set_attribute.assert_any_call("safety.breaches", 2)
    assert span.set_attribute.call_count == 2


def test_evaluation_span_names_span_and_records_initial_fields():
    span = MagicMock()
    tracer = MagicMock()
    tracer.start_as_current_span.return_value.__enter__.return_value = span

    with patch("observability.tracing.trace.get_tracer", return_value=tracer):
        with evaluation_span("batch.window", window_start=10, window_items=3) as recorder:
            recorder.record(failed=1)

    tracer.start_as_current_span.assert_called_once_with("batch.window")
    span.set_attribute.assert_any_call("batch.window_start", 10)
    span.set_attribute.assert_any_call("batch.window_items", 3)
    span.set_attribute.assert_any_call("batch.failed", 1)


def test_evaluation_span_runs_with_the_installed_provider():
    with evaluation_span("compliance.evaluate", guideline="TechFuture") as recorder:
        recorder.record(score=90)


def test_shutdown_is_idempotent():
    shutdown_tracing()
    shutdown_tracing()
