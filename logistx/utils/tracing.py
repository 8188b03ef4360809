"""OpenTelemetry spans around view-model loads and writes, exported over OTLP/HTTP.

Tracing stays a no-op (the API's default provider) unless TRACING_ENABLED is set.
OTLP_ENDPOINT=console prints finished spans to stdout instead of exporting them.
"""

from opentelemetry import trace

from logistx.config import (
    DEPLOYMENT_ENVIRONMENT,
    OTLP_API_KEY,
    OTLP_ENDPOINT,
    SERVICE_NAME,
    STORE_BACKEND,
    TRACE_SAMPLE_RATIO,
    TRACING_ENABLED,
)
from logistx.utils.logger import get_logger

logger = get_logger("logistx.tracing")

TRACER_NAME = "logistx"
TRACER_VERSION = "0.1.0"

_provider = None


def _traces_url(endpoint: str) -> str:
    url = endpoint.rstrip("/")
    return url if url.endswith("/v1/traces") else f"{url}/v1/traces"


def _exporter():
    if OTLP_ENDPOINT.lower() == "console":
        from opentelemetry.sdk.trace.export import ConsoleSpanExporter

        return ConsoleSpanExporter(service_name=SERVICE_NAME)
    from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter

    headers = {"authorization": f"Bearer {OTLP_API_KEY}"} if OTLP_API_KEY else None
    return OTLPSpanExporter(endpoint=_traces_url(OTLP_ENDPOINT), headers=headers)


def init_tracing() -> None:
    """Install the SDK tracer provider once per process. No-op unless TRACING_ENABLED."""
    global _provider
    if _provider is not None or not TRACING_ENABLED:
        return
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor
    from opentelemetry.sdk.trace.sampling import ParentBased, TraceIdRatioBased

    resource = Resource.create(
        {
            "service.name": SERVICE_NAME,
            "service.version": TRACER_VERSION,
            "deployment.environment": DEPLOYMENT_ENVIRONMENT,
            "logistx.store_backend": STORE_BACKEND,
        }
    )
    provider = TracerProvider(resource=resource, sampler=ParentBased(TraceIdRatioBased(TRACE_SAMPLE_RATIO)))
    provider.add_span_processor(BatchSpanProcessor(_exporter()))
    trace.set_tracer_provider(provider)
    _provider = provider
    logger.info("tracing.enabled", endpoint=OTLP_ENDPOINT, sample_ratio=TRACE_SAMPLE_RATIO)


def get_tracer() -> trace.Tracer:
    return trace.get_tracer(TRACER_NAME, TRACER_VERSION)


def shutdown_tracing() -> None:
    """Flush pending spans before exit; safe to call when tracing never started."""
    global _provider
    if _provider is None:
        return
    _provider.force_flush(timeout_millis=5000)
    _provider.shutdown()
    _provider = None
