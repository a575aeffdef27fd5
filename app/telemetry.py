from flask import g, has_request_context
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.flask import FlaskInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.propagate import set_global_textmap
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from models import db


def _tag_caller(span, status, response_headers):
    """Attach the resolved caller to the request span once auth has run."""
    if not span or not span.is_recording() or not has_request_context():
        return
    identity = getattr(g, "identity", None)
    if identity is not None:
        span.set_attribute("enduser.id", identity.user_id)
        span.set_attribute("enduser.role", identity.role.external)
        if identity.district:
            span.set_attribute("marketplace.district", identity.district)
    request_id = getattr(g, "request_id", None)
    if request_id:
        span.set_attribute("http.request_id", request_id)


def init_tracing(app):
    """Initialize OpenTelemetry tracing for the Flask app."""
    service_name = app.config.get("OTEL_SERVICE_NAME", "marketplace-backend")
    endpoint = app.config.get("OTEL_EXPORTER_OTLP_ENDPOINT", "http://localhost:4318/v1/traces")

    provider = TracerProvider(resource=Resource.create({
        "service.name": service_name,
        "deployment.environment": "testing" if app.config.get("TESTING") else ("development" if app.config.get("DEBUG") else "production"),
    }))
    # Console export under tests keeps the suite off the network
    exporter = ConsoleSpanExporter() if app.config.get("TESTING") else OTLPSpanExporter(endpoint=endpoint)
    provider.add_span_processor(BatchSpanProcessor(exporter))
    trace.set_tracer_provider(provider)

    set_global_textmap(TraceContextTextMapPropagator())

    FlaskInstrumentor().instrument_app(app, response_hook=_tag_caller, excluded_urls="health,metrics")
    with app.app_context():
        SQLAlchemyInstrumentor().instrument(engine=db.engine)
