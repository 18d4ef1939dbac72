"""
OpenTelemetry Trace Context Management

Propagates W3C trace context through the HTTP headers of JSON-RPC exchanges so a
client call and the server-side procedure execution share one trace.
"""

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from opentelemetry import context as otel_context
from opentelemetry import propagate, trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.trace.sampling import ALWAYS_ON

logger = logging.getLogger(__name__)


def setup_tracer(service_name: str, otlp_endpoint: str = "localhost:4317"):
    """Configure OpenTelemetry tracer

    Args:
        service_name: Service name
        otlp_endpoint: OTLP receiver address

    Returns:
        Tracer for the service
    """
    provider = TracerProvider(sampler=ALWAYS_ON)
    provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint)))
    trace.set_tracer_provider(provider)

    tracer = trace.get_tracer(service_name)
    logger.info(f"OpenTelemetry trace configured, service name: {service_name}, OTLP endpoint: {otlp_endpoint}")
    return tracer


def inject_trace_context(headers: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    """Write the active trace context into a header mapping

    Args:
        headers: Outgoing headers, updated in place when given

    Returns:
        Dict[str, str]: The header mapping (``traceparent``/``tracestate`` added
        only when a span is active)
    """
    if headers is None:
        headers = {}
    propagate.inject(headers)
    return headers


def extract_trace_context(headers: Optional[Dict[str, str]]) -> Optional[otel_context.Context]:
    """Build an OpenTelemetry context from incoming headers

    Returns:
        Context, or None when the headers carry no trace information
    """
    if not headers:
        return None
    carrier = {str(k).lower(): v for k, v in headers.items()}
    if "traceparent" not in carrier:
        return None
    return propagate.extract(carrier)


@contextmanager
def with_trace_context(ctx: Optional[otel_context.Context]) -> Iterator[None]:
    """Make ``ctx`` the current context for the duration of the block"""
    if ctx is None:
        yield
        return

    token = otel_context.attach(ctx)
    try:
        yield
    finally:
        otel_context.detach(token)


def create_span(name: str, attributes: Dict[str, Any] = None, kind: trace.SpanKind = trace.SpanKind.INTERNAL):
    """Start a span as the current span (use as a context manager)"""
    tracer = trace.get_tracer(__name__)
    return tracer.start_as_current_span(name, attributes=attributes or {}, kind=kind)
