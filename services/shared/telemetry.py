"""OpenTelemetry instrumentation for the Nova services.

Sets up tracing, metrics, and structured logging with resource attributes
describing the service, its deployment and the AWS region it calls.
"""

import os
from opentelemetry import trace, metrics
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.sdk.resources import Resource, SERVICE_NAME, SERVICE_NAMESPACE
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.botocore import BotocoreInstrumentor

from shared.logging_config import configure_logging


def telemetry_disabled() -> bool:
    return os.getenv("OTEL_SDK_DISABLED", "false").lower() == "true"


def _create_resource(service_name: str, namespace: str) -> Resource:
    attrs = {
        SERVICE_NAME: service_name,
        SERVICE_NAMESPACE: namespace,
        "service.version": os.getenv("SERVICE_VERSION", "0.1.0"),
        "service.instance.id": os.getenv("POD_UID", f"{service_name}-local"),
        "deployment.environment": os.getenv("ENVIRONMENT", "dev"),
        "cloud.provider": "aws",
        "cloud.platform": "aws_bedrock",
        "cloud.region": os.getenv("AWS_REGION", "us-east-1"),
        "lab.team": os.getenv("LAB_TEAM", namespace),
    }
    return Resource.create(attrs)


def setup_telemetry(app, service_name: str, namespace: str = "platform"):
    """
    Initialize OpenTelemetry for a FastAPI application.

    With ``OTEL_SDK_DISABLED=true`` no exporter or instrumentation is
    installed; the returned tracer and meter are the no-op API defaults.
    """
    team = os.getenv("LAB_TEAM", namespace)
    configure_logging(service_name, team, os.getenv("LOG_LEVEL", "INFO"))

    if telemetry_disabled():
        return trace.get_tracer(service_name), metrics.get_meter(service_name)

    resource = _create_resource(service_name, namespace)

    otlp_endpoint = os.getenv(
        "OTEL_EXPORTER_OTLP_ENDPOINT",
        "http://otel-collector.observability.svc.cluster.local:4317"
    )

    trace_provider = TracerProvider(resource=resource)
    trace_provider.add_span_processor(
        BatchSpanProcessor(OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True))
    )
    trace.set_tracer_provider(trace_provider)

    metric_reader = PeriodicExportingMetricReader(
        OTLPMetricExporter(endpoint=otlp_endpoint, insecure=True),
        export_interval_millis=30000
    )
    meter_provider = MeterProvider(resource=resource, metric_readers=[metric_reader])
    metrics.set_meter_provider(meter_provider)

    FastAPIInstrumentor.instrument_app(app)

    # bedrock-runtime calls get their own client spans
    BotocoreInstrumentor().instrument()

    return trace.get_tracer(service_name), metrics.get_meter(service_name)

