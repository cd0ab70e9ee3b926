"""
OpenTelemetry Configuration

Sets up distributed tracing and logging for the civic issue tracker services.
"""

import logging
from typing import Optional
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

from ..config import Settings

SAMPLING_RATIOS = {
    'production': 0.1,
    'staging': 0.5,
}


def setup_observability(settings: Optional[Settings] = None) -> Optional[TracerProvider]:
    """
    Initialize OpenTelemetry tracing and logging from configuration.

    Returns:
        The installed tracer provider, or None when tracing is disabled
    """
    settings = settings or Settings.from_env()

    setup_structured_logging(settings.environment)

    if not settings.otel_enabled:
        return None

    # Environment-specific sampling, everything in development
    sampler = TraceIdRatioBased(SAMPLING_RATIOS.get(settings.environment, 1.0))

    resource = Resource.create({
        "service.name": settings.service_name,
        "service.version": settings.service_version,
        "deployment.environment": settings.environment
    })

    tracer_provider = TracerProvider(sampler=sampler, resource=resource)

    if settings.otlp_endpoint:
        tracer_provider.add_span_processor(
            BatchSpanProcessor(OTLPSpanExporter(endpoint=settings.otlp_endpoint))
        )
    elif settings.environment == 'development':
        tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(tracer_provider)
    return tracer_provider


def setup_structured_logging(environment: str):
    """Configure logging levels per environment."""
    log_level = {
        'production': logging.WARNING,
        'staging': logging.INFO,
        'development': logging.DEBUG
    }.get(environment, logging.INFO)

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s %(levelname)s %(name)s %(message)s',
        handlers=[logging.StreamHandler()]
    )

    if environment == 'production':
        logging.getLogger('civic_issues.services').setLevel(logging.ERROR)
    elif environment == 'development':
        logging.getLogger('civic_issues').setLevel(logging.DEBUG)
