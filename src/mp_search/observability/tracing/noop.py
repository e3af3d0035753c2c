"""Observability – NoopTracer, the default when no tracing backend is wired."""
from __future__ import annotations

import contextlib
from typing import Any, Iterator

from mp_search.observability.tracing.ports import Span, SpanKind, Tracer


class _DiscardingSpan(Span):
    def set_attribute(self, key: str, value: Any) -> None:
        pass

    def set_status_ok(self) -> None:
        pass

    def record_exception(self, exc: Exception) -> None:
        pass


class NoopTracer(Tracer):
    """Opens spans that record nothing. Exceptions pass straight through."""

    @contextlib.contextmanager
    def start_span(
        self,
        name: str,  # noqa: ARG002
        kind: SpanKind = SpanKind.INTERNAL,  # noqa: ARG002
        attributes: dict[str, Any] | None = None,  # noqa: ARG002
    ) -> Iterator[Span]:
        yield _DiscardingSpan()


__all__ = ["NoopTracer"]
