import logging
import json
import os
from typing import Any
from opentelemetry.trace import get_current_span

# Keys hidden from INFO+ logs. Customer contact details and reset tokens
# travel through order, account and vendor payloads.
SENSITIVE_KEYS = frozenset({
    "password",
    "password_hash",
    "token",
    "access_token",
    "refresh_token",
    "reset_token",
    "email",
    "phone",
    "shipping_address",
    "shippingAddress",
})
REDACTED = "[REDACTED]"


def _flask_g():
    from flask import g, has_app_context
    return g if has_app_context() else None


def current_request_id() -> str:
    g = _flask_g()
    rid = getattr(g, "request_id", None) if g is not None else None
    return rid or "n/a"


def current_user_id() -> str:
    g = _flask_g()
    identity = getattr(g, "identity", None) if g is not None else None
    return identity.user_id if identity is not None else "anonymous"


class RequestIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = current_request_id()
        return True


class IdentityFilter(logging.Filter):
    """Tag records with the authenticated caller, if any."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.user_id = current_user_id()
        return True


def current_trace_ids():
    ctx = get_current_span().get_span_context()
    if not ctx.is_valid:
        return "n/a", "n/a"
    return format(ctx.trace_id, "032x"), format(ctx.span_id, "016x")


class TraceIdFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id, record.span_id = current_trace_ids()
        return True


def mask(value: Any) -> Any:
    """Redact sensitive keys at any depth of a dict/list payload."""
    if isinstance(value, dict):
        return {k: (REDACTED if k in SENSITIVE_KEYS else mask(v)) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return type(value)(mask(v) for v in value)
    return value


class MaskingFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        env = os.getenv("APP_ENV", "development").lower()
        if record.levelno == logging.DEBUG and env != "production":
            return True
        if isinstance(record.msg, dict):
            record.msg = mask(record.msg)
        if isinstance(record.args, dict):
            record.args = mask(record.args)
        return True


class JsonFormatter(logging.Formatter):
    def __init__(self, *args, service: str = "marketplace-backend", **kwargs):
        super().__init__(*args, **kwargs)
        self.service = service

    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        base = {
            "time": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "service": self.service,
            "name": record.name,
            "request_id": getattr(record, "request_id", "n/a"),
            "user_id": getattr(record, "user_id", "anonymous"),
            "trace_id": getattr(record, "trace_id", "n/a"),
            "span_id": getattr(record, "span_id", "n/a"),
        }
        if isinstance(record.msg, dict):
            base.update(record.msg)
        else:
            base["message"] = record.getMessage()
        if record.exc_info:
            base["exc"] = self.formatException(record.exc_info)
        return json.dumps(base, default=str)


def _level_for(app) -> int:
    level_name = os.getenv("LOG_LEVEL")
    if level_name:
        return getattr(logging, level_name.upper(), logging.INFO)
    return logging.DEBUG if app.config.get("DEBUG") else logging.INFO


def configure_logging(app) -> None:
    handler = logging.StreamHandler()
    handler.setFormatter(
        JsonFormatter(datefmt="%Y-%m-%dT%H:%M:%S%z", service=app.config.get("OTEL_SERVICE_NAME", "marketplace-backend"))
    )
    for log_filter in (RequestIdFilter(), IdentityFilter(), TraceIdFilter(), MaskingFilter()):
        handler.addFilter(log_filter)

    level = _level_for(app)
    app.logger.handlers.clear()
    app.logger.addHandler(handler)
    app.logger.setLevel(level)

    root = logging.getLogger()
    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        root.addHandler(handler)
    root.setLevel(level)

    werkzeug_logger = logging.getLogger("werkzeug")
    werkzeug_logger.setLevel(level)
    werkzeug_logger.handlers.clear()
    werkzeug_logger.addHandler(handler)
