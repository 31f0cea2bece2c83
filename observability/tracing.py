"""
Tracing for the evaluation pipeline.

Every evaluation step runs inside evaluation_span(). The span name is
"<area>.<step>" (safety.evaluate, compliance.evaluate, contextual.assess,
batch.window) and every attribute recorded on it is keyed "<area>.<field>",
so one Langfuse filter on the area finds all of a step's data.

setup_tracing() installs the process-wide provider. Spans are exported to
Langfuse over OTLP/HTTP when keys are configured and printed otherwise.
Until it runs, evaluation_span() records nothing.
"""
import base64
import logging
import os
from contextlib import contextmanager
from enum import Enum
from typing import Any, Iterator, Mapping, Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter, SpanExporter

logger = logging.getLogger(__name__)

INSTRUMENTATION_NAME = "brand_evaluation"
SERVICE_NAMESPACE = "brand-evaluation"
LANGFUSE_TRACES_PATH = "/api/public/otel/v1/traces"

_tracer_provider: Optional[TracerProvider] = None


def _attribute_value(value: Any):
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (bool, int, float, str)):
        return value
    return str(value)


class SpanRecorder:
    """Writes "<area>.<field>" attributes onto one evaluation span."""

    def __init__(self, span: trace.Span, area: str):
        self.span = span
        self.area = area

    def record(self, **fields: Any) -> None:
        for key, value in fields.items():
            if value is not None:
                self.span.set_attribute(f"{self.area}.{key}", _attribute_value(value))


@contextmanager
def evaluation_span(name: str, **fields: Any) -> Iterator[SpanRecorder]:
    """
    Open the span for one evaluation step.

    Args:
        name: "<area>.<step>"; the area prefixes every recorded attribute
        fields: attributes known up front; None values are skipped
    """
    area = name.split(".", 1)[0]
    tracer = trace.get_tracer(INSTRUMENTATION_NAME)
    with tracer.start_as_current_span(name) as span:
        recorder = SpanRecorder(span, area)
        recorder.record(**fields)
        yield recorder


def _langfuse_exporter(host: str, public_key: str, secret_key: str) -> SpanExporter:
    """OTLP/HTTP exporter with Basic base64(public_key:secret_key) auth."""
    token = base64.b64encode(f"{public_key}:{secret_key}".encode()).decode()
    return OTLPSpanExporter(
        endpoint=f"{host.rstrip('/')}{LANGFUSE_TRACES_PATH}",
        headers={"Authorization": f"Basic {token}"},
    )


def setup_tracing(
    service_name: str,
    attributes: Optional[Mapping[str, Any]] = None,
    host: Optional[str] = None,
    public_key: Optional[str] = None,
    secret_key: Optional[str] = None,
) -> TracerProvider:
    """
    Install the tracer provider for this process.

    attributes describe how this deployment evaluates (brand profile,
    contextual provider, batch window size) and land on the resource, so
    they are attached to every exported span.
    """
    global _tracer_provider

    resource_attributes = {
        "service.name": service_name,
        "service.namespace": SERVICE_NAMESPACE,
    }
    for key, value in (attributes or {}).items():
        resource_attributes[key] = _attribute_value(value)
    provider = TracerProvider(resource=Resource.create(resource_attributes))

    host = host or os.environ.get("LANGFUSE_HOST", "http://localhost:3001")
    pk = public_key if public_key is not None else os.environ.get("LANGFUSE_PUBLIC_KEY", "")
    sk = secret_key if secret_key is not None else os.environ.get("LANGFUSE_SECRET_KEY", "")
    if pk and sk:
        provider.add_span_processor(BatchSpanProcessor(_langfuse_exporter(host, pk, sk)))
        logger.info(f"Evaluation spans exported to {host}")
    else:
        provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))
        logger.warning("No Langfuse keys found, printing evaluation spans to the console")

    trace.set_tracer_provider(provider)
    _tracer_provider = provider
    return provider


def shutdown_tracing() -> None:
    """Flush pending spans and drop the provider."""
    global _tracer_provider
    if _tracer_provider:
        _tracer_provider.shutdown()
        _tracer_provider = None
