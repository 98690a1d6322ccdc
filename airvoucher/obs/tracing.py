"""OpenTelemetry tracing helpers for the API and the portal client."""

from __future__ import annotations

import functools
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SimpleSpanProcessor,
)
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

_SERVICE_NAME_ATTRIBUTE = "service.name"
_SERVICE_NAMESPACE_ATTRIBUTE = "service.namespace"
_SERVICE_NAMESPACE = "airvoucher"
_TERMINAL_TRACER = "airvoucher.terminals"

TERMINAL_ACTION_ATTRIBUTE = "airvoucher.terminal.action"
TERMINAL_ID_ATTRIBUTE = "airvoucher.terminal.id"
RETAILER_ID_ATTRIBUTE = "airvoucher.retailer.id"

_F = TypeVar("_F", bound=Callable[..., Any])


def _create_tracer_provider(service_name: str, endpoint: str | None) -> TracerProvider:
    resource = Resource(
        attributes={_SERVICE_NAME_ATTRIBUTE: service_name, _SERVICE_NAMESPACE_ATTRIBUTE: _SERVICE_NAMESPACE}
    )
    provider = TracerProvider(resource=resource)

    if endpoint:
        processor = BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, insecure=True))
    else:
        processor = SimpleSpanProcessor(ConsoleSpanExporter())
    provider.add_span_processor(processor)
    return provider


def initialise_tracing(
    *,
    service_name: str,
    endpoint: str | None = None,
    instrument_logging: bool = True,
) -> None:
    """Initialise a global tracer provider if one has not already been configured."""

    current_provider = trace.get_tracer_provider()
    if (
        isinstance(current_provider, TracerProvider)
        and getattr(current_provider.resource, "attributes", {}).get(_SERVICE_NAME_ATTRIBUTE)
        == service_name
    ):
        return

    provider = _create_tracer_provider(service_name, endpoint)
    trace.set_tracer_provider(provider)
    if instrument_logging:
        LoggingInstrumentor().instrument(set_logging_format=True)


def instrument_fastapi_app(app: FastAPI) -> None:
    """Enable FastAPI OpenTelemetry instrumentation."""
    FastAPIInstrumentor().instrument_app(app)


def instrument_sqlalchemy_engine(engine: Any) -> None:
    """Instrument SQLAlchemy engine for tracing if not already instrumented."""
    SQLAlchemyInstrumentor().instrument(engine=engine)


def inject_traceparent(headers: dict[str, str]) -> dict[str, str]:
    """Return ``headers`` with the current trace context added for outgoing requests."""

    carrier: dict[str, str] = dict(headers)
    TraceContextTextMapPropagator().inject(carrier)
    return carrier


@contextmanager
def terminal_action_span(
    action: str,
    *,
    terminal_id: str | None = None,
    retailer_id: str | None = None,
) -> Iterator[trace.Span]:
    """Span around one terminal lifecycle action.

    Exceptions raised inside are recorded on the span and re-raised.
    """
    tracer = trace.get_tracer(_TERMINAL_TRACER)
    with tracer.start_as_current_span(f"terminal.{action}") as span:
        span.set_attribute(TERMINAL_ACTION_ATTRIBUTE, action)
        if terminal_id is not None:
            span.set_attribute(TERMINAL_ID_ATTRIBUTE, terminal_id)
        if retailer_id is not None:
            span.set_attribute(RETAILER_ID_ATTRIBUTE, retailer_id)
        yield span


def traced_terminal_action(action: str) -> Callable[[_F], _F]:
    """Run a keyword-only service function inside :func:`terminal_action_span`.

    ``terminal_id`` and ``retailer_id`` keyword arguments become span
    attributes, and so does the ``id`` of the returned object when the call
    creates one.
    """

    def decorator(func: _F) -> _F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            with terminal_action_span(
                action,
                terminal_id=kwargs.get("terminal_id"),
                retailer_id=kwargs.get("retailer_id"),
            ) as span:
                result = func(*args, **kwargs)
                created_id = getattr(result, "id", None)
                if created_id is not None:
                    span.set_attribute(TERMINAL_ID_ATTRIBUTE, str(created_id))
                return result

        return wrapper  # type: ignore[return-value]

    return decorator


__all__ = [
    "RETAILER_ID_ATTRIBUTE",
    "TERMINAL_ACTION_ATTRIBUTE",
    "TERMINAL_ID_ATTRIBUTE",
    "initialise_tracing",
    "inject_traceparent",
    "instrument_fastapi_app",
    "instrument_sqlalchemy_engine",
    "terminal_action_span",
    "traced_terminal_action",
]
