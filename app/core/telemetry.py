"""
Telemetry configuration (Metrics & Tracing).
Sets up Prometheus instrumentation, OpenTelemetry and the gateway's
domain counters.
"""
from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from prometheus_client import Counter
from prometheus_fastapi_instrumentator import Instrumentator

from app.config import get_settings

# -----------------------------------------------------------------------------
# Domain counters
# -----------------------------------------------------------------------------

AUTH_FAILURES_TOTAL = Counter(
    "auth_failures_total",
    "Rejected bearer credentials",
    ["reason"],  # 'missing', 'invalid', 'unavailable'
)

CATALOG_BRIDGE_ERRORS_TOTAL = Counter(
    "catalog_bridge_errors_total",
    "Failed external catalog lookups",
    ["reason"],  # 'transport', 'status', 'decode', 'circuit_open'
)

STORE_ERRORS_TOTAL = Counter(
    "store_errors_total",
    "Underlying store failures surfaced to callers",
    ["operation"],
)


def setup_telemetry(app: FastAPI) -> None:
    """
    Setup Observability (Metrics & Tracing).

    1. Prometheus Metrics via /metrics
    2. OpenTelemetry Tracing via OTLP
    """
    settings = get_settings()

    if settings.ENABLE_PROMETHEUS:
        instrumentator = Instrumentator(
            should_group_status_codes=False,
            should_ignore_untemplated=True,
            should_respect_env_var=True,
            should_instrument_requests_inprogress=True,
            excluded_handlers=["/metrics", "/health", "/health/ready"],
            env_var_name="ENABLE_METRICS",
            inprogress_name="inprogress",
            inprogress_labels=True,
        )
        instrumentator.instrument(app).expose(app, include_in_schema=False)

    if settings.ENABLE_OTEL:
        resource = Resource.create(attributes={
            "service.name": settings.APP_NAME,
            "service.version": settings.APP_VERSION,
            "deployment.environment": "production" if not settings.DEBUG else "development",
        })

        provider = TracerProvider(resource=resource)
        # OTLP endpoint comes from OTEL_EXPORTER_OTLP_ENDPOINT (default localhost:4317)
        provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter()))
        trace.set_tracer_provider(provider)

        FastAPIInstrumentor.instrument_app(app, tracer_provider=provider)
