"""OpenTelemetry setup and per-stage spans for the payment pipeline."""

from contextlib import contextmanager

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

from cardpay.common.config import settings


def setup_tracing(service_name: str) -> None:
    """Register an OTLP-exporting tracer provider unless tracing is disabled."""

    if not settings.tracing_enabled:
        return
    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.otel_exporter_otlp_endpoint))
    )
    trace.set_tracer_provider(provider)


def instrument_app(app: FastAPI) -> None:
    """Attach FastAPI auto-instrumentation for request spans."""

    if settings.tracing_enabled:
        FastAPIInstrumentor.instrument_app(app)


@contextmanager
def pipeline_span(stage: str, **attributes):
    """Span around one pipeline stage; never put card data or secrets in attributes."""

    tracer = trace.get_tracer("cardpay.payments")
    with tracer.start_as_current_span(f"payment.{stage}") as span:
        for key, value in attributes.items():
            span.set_attribute(f"payment.{key}", value)
        yield span
