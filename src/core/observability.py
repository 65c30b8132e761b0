from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource, SERVICE_NAME, SERVICE_VERSION
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.requests import RequestsInstrumentor

from .config import settings
from .utils import get_logger

logger = get_logger(__name__)

SERVICE_VERSION_VALUE = "1.0.0"


def setup_observability(app=None):
    """
    Sets up OpenTelemetry tracing when an OTLP endpoint is configured.

    Supabase (httpx) and Stripe (requests) calls are instrumented so store and
    gateway latency shows up under the request span.
    """
    if not settings.otel.exporter_otlp_endpoint:
        logger.info("otel_disabled", reason="OTEL_EXPORTER_OTLP_ENDPOINT not set")
        return None

    logger.info("otel_setup", service_name=settings.otel.service_name)

    resource = Resource.create({
        SERVICE_NAME: settings.otel.service_name,
        SERVICE_VERSION: SERVICE_VERSION_VALUE,
    })

    provider = TracerProvider(resource=resource)

    # The grpc exporter expects host:port
    endpoint = settings.otel.exporter_otlp_endpoint.replace("http://", "").replace("https://", "")
    otlp_exporter = OTLPSpanExporter(endpoint=endpoint, insecure=True)

    provider.add_span_processor(BatchSpanProcessor(otlp_exporter))
    trace.set_tracer_provider(provider)

    HTTPXClientInstrumentor().instrument()
    RequestsInstrumentor().instrument()

    if app:
        FastAPIInstrumentor.instrument_app(app, tracer_provider=provider)

    logger.info("otel_setup_complete")
    return provider
