"""OpenTelemetry tracing for the API and the Redis presence store.

Off unless TELEMETRY_ENABLED is set. Spans go to the console in
development or to an OTLP (gRPC) collector.
"""

import logging

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.redis import RedisInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter, SpanExporter
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased

from helpfromfounder.core.config import Settings

logger = logging.getLogger(__name__)

# Liveness checks would otherwise dominate the trace volume
UNTRACED_URLS = "/api/v1/health,/"


def build_exporter(exporter_type: str, otlp_endpoint: str | None) -> SpanExporter | None:
    """Exporter for TELEMETRY_EXPORTER; None means spans are sampled but not shipped."""
    if exporter_type == "none":
        return None
    if exporter_type == "otlp":
        if otlp_endpoint:
            return OTLPSpanExporter(
                endpoint=otlp_endpoint,
                insecure=otlp_endpoint.startswith("http://"),
            )
        logger.warning("TELEMETRY_OTLP_ENDPOINT not set; falling back to console spans")
    elif exporter_type != "console":
        logger.warning("Unknown exporter type '%s', using console", exporter_type)
    return ConsoleSpanExporter()


class TelemetryConfig:
    """Tracer provider for this service plus its instrumentations."""

    def __init__(
        self,
        service_name: str,
        service_version: str,
        environment: str = "development",
        sample_rate: float = 1.0,
    ) -> None:
        self.service_name = service_name
        self.service_version = service_version
        self.environment = environment
        self.sample_rate = sample_rate
        self.tracer_provider: TracerProvider | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "TelemetryConfig":
        return cls(
            service_name=settings.app_name,
            service_version=settings.app_version,
            environment=settings.telemetry_environment,
            sample_rate=settings.telemetry_sample_rate,
        )

    def start(self, exporter: SpanExporter | None) -> bool:
        """Install the global tracer provider. Returns False if setup failed."""
        try:
            provider = TracerProvider(
                resource=Resource(
                    attributes={
                        SERVICE_NAME: self.service_name,
                        SERVICE_VERSION: self.service_version,
                        "deployment.environment": self.environment,
                    }
                ),
                sampler=TraceIdRatioBased(self.sample_rate),
            )
            if exporter is not None:
                provider.add_span_processor(BatchSpanProcessor(exporter))
            trace.set_tracer_provider(provider)
        except Exception:
            logger.exception("Failed to initialize telemetry")
            return False
        self.tracer_provider = provider
        logger.info(
            "Tracing %s (%s) with %s",
            self.service_name,
            self.environment,
            type(exporter).__name__ if exporter else "no exporter",
        )
        return True

    def instrument(self, app: FastAPI, redis: bool = False) -> None:
        """Trace HTTP requests and, when presence uses Redis, its commands."""
        if self.tracer_provider is None:
            return
        try:
            FastAPIInstrumentor.instrument_app(
                app,
                tracer_provider=self.tracer_provider,
                excluded_urls=UNTRACED_URLS,
            )
            if redis:
                RedisInstrumentor().instrument(tracer_provider=self.tracer_provider)
        except Exception:
            logger.exception("Failed to instrument application")

    def shutdown(self) -> None:
        """Flush buffered spans."""
        if self.tracer_provider is None:
            return
        try:
            self.tracer_provider.shutdown()
        except Exception:
            logger.exception("Error during telemetry shutdown")
        self.tracer_provider = None
