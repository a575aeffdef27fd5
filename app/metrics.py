"""
Prometheus instruments beyond the per-request ones from
prometheus-flask-exporter: database latency, error responses and a few
marketplace business events.
"""
import time

from flask import request
from prometheus_client import Counter, Histogram
from sqlalchemy import event

from models import db

DB_QUERY_DURATION = Histogram(
    "db_query_duration_seconds",
    "Database query duration in seconds",
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2, 5),
)

ERROR_COUNTER = Counter(
    "flask_error_total",
    "Count of HTTP responses with status >= 400",
    ["endpoint", "method", "code"],
)

ORDERS_PLACED = Counter(
    "marketplace_orders_placed_total",
    "Orders created through checkout",
    ["payment_method"],
)

ORDER_STATUS_CHANGES = Counter(
    "marketplace_order_status_changes_total",
    "Vendor driven order status updates",
    ["status"],
)

VENDOR_DECISIONS = Counter(
    "marketplace_vendor_decisions_total",
    "Vendor shop approvals and rejections",
    ["decision"],
)

ROLE_CHANGES = Counter(
    "marketplace_role_changes_total",
    "User role changes made by admins",
    ["from_role", "to_role"],
)

_QUERY_START = "_query_start_time"


def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    conn.info.setdefault(_QUERY_START, []).append(time.perf_counter())


def _after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
    started = conn.info.get(_QUERY_START)
    if started:
        DB_QUERY_DURATION.observe(time.perf_counter() - started.pop())


def init_app(app):
    """Attach the DB timing listeners and the error counter to ``app``."""
    with app.app_context():
        engine = db.engine
        if not event.contains(engine, "before_cursor_execute", _before_cursor_execute):
            event.listen(engine, "before_cursor_execute", _before_cursor_execute)
            event.listen(engine, "after_cursor_execute", _after_cursor_execute)

    @app.after_request
    def track_errors(resp):
        if resp.status_code >= 400:
            ERROR_COUNTER.labels(request.endpoint or "unknown", request.method, resp.status_code).inc()
        return resp
