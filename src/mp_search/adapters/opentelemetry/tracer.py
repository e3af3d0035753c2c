"""OpenTelemetry adapter – OtelTracer."""
from __future__ import annotations

import contextlib
from typing import Any, Iterator

from mp_search.observability.tracing import Span, SpanKind, Tracer


def _require_otel() -> None:
    try:
        import opentelemetry  # noqa: F401
    except ImportError as exc:
        raise ImportError("Install 'mp-search[otel]' to use the OpenTelemetry adapter") from exc


class _OtelSpan(Span):
    def __init__(self, span: Any) -> None:
        self._span = span

    def set_attribute(self, key: str, value: Any) -> None:
        self._span.set_attribute(key, value)

    def set_status_ok(self) -> None:
        from opentelemetry.trace import StatusCode  # type: ignore[import-untyped]
        self._span.set_status(StatusCode.OK)

    def record_exception(self, exc: Exception) -> None:
        from opentelemetry.trace import StatusCode  # type: ignore[import-untyped]
        self._span.record_exception(exc)
        self._span.set_status(StatusCode.ERROR, str(exc))


class OtelTracer(Tracer):
    """Spans on the globally configured OpenTelemetry tracer provider.

    Only ``opentelemetry-api`` is needed here; without an SDK installed and
    configured the spans are non-recording. A search error raised inside the
    block (``CorruptedSearchDocumentError``, an unknown facet) marks the span
    as failed and propagates unchanged.
    """

    def __init__(self, service_name: str = "mp-search") -> None:
        _require_otel()
        from opentelemetry import trace  # type: ignore[import-untyped]
        self._tracer = trace.get_tracer(service_name)

    @contextlib.contextmanager
    def start_span(
        self,
        name: str,
        kind: SpanKind = SpanKind.INTERNAL,
        attributes: dict[str, Any] | None = None,
    ) -> Iterator[Span]:
        from opentelemetry.trace import SpanKind as OtelKind  # type: ignore[import-untyped]
        otel_kind = OtelKind.CLIENT if kind is SpanKind.CLIENT else OtelKind.INTERNAL
        with self._tracer.start_as_current_span(
            name,
            kind=otel_kind,
            attributes=attributes,
            record_exception=False,
            set_status_on_exception=False,
        ) as otel_span:
            span = _OtelSpan(otel_span)
            try:
                yield span
            except Exception as exc:
                span.record_exception(exc)
                raise
            span.set_status_ok()


__all__ = ["OtelTracer"]
