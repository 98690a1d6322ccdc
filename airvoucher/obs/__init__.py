"""Observability utilities."""

from .audit import AuditLogRecord, AuditMiddleware
from .metrics import (
    REQUEST_COUNTER,
    REQUEST_ERROR_COUNTER,
    REQUEST_LATENCY_SECONDS,
    TERMINAL_ACTION_COUNTER,
    PrometheusMiddleware,
    metrics_router,
    record_terminal_action,
)
from .tracing import (
    initialise_tracing,
    inject_traceparent,
    instrument_fastapi_app,
    instrument_sqlalchemy_engine,
    terminal_action_span,
    traced_terminal_action,
)

__all__ = [
    "AuditLogRecord",
    "AuditMiddleware",
    "PrometheusMiddleware",
    "REQUEST_COUNTER",
    "REQUEST_ERROR_COUNTER",
    "REQUEST_LATENCY_SECONDS",
    "TERMINAL_ACTION_COUNTER",
    "metrics_router",
    "record_terminal_action",
    "initialise_tracing",
    "inject_traceparent",
    "instrument_fastapi_app",
    "instrument_sqlalchemy_engine",
    "terminal_action_span",
    "traced_terminal_action",
]
