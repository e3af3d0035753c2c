"""Observability – distributed tracing ports."""
from mp_search.observability.tracing.noop import NoopTracer
from mp_search.observability.tracing.ports import Span, SpanKind, Tracer

__all__ = ["NoopTracer", "Span", "SpanKind", "Tracer"]
