"""OpenTelemetry adapter for the tracing port."""
from mp_search.adapters.opentelemetry.tracer import OtelTracer

__all__ = ["OtelTracer"]
