from __future__ import annotations

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from tocr.core.config import settings


def init_otel(app) -> None:
    """Trace incoming requests and the outbound vision/image-fetch calls."""
    if not settings.otel_enabled:
        return

    resource = Resource.create({"service.name": settings.api_name})
    provider = TracerProvider(resource=resource)

    endpoint = settings.otel_otlp_endpoint
    exporter = OTLPSpanExporter(endpoint=endpoint) if endpoint else OTLPSpanExporter()

    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    FastAPIInstrumentor.instrument_app(app)
    # OCR providers and image URL fetches go through httpx.
    HTTPXClientInstrumentor().instrument()
