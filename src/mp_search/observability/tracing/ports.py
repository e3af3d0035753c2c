"""Observability – Tracer and Span ports.

The handler opens one span per request build or extraction and annotates it
with window sizes and result counts. Backends plug in through
:class:`Tracer`; without one, :class:`~mp_search.observability.tracing.noop.NoopTracer`
is used.
"""
from __future__ import annotations

import abc
import contextlib
from enum import Enum
from typing import Any, Iterator, Mapping


class SpanKind(str, Enum):
    INTERNAL = "INTERNAL"
    CLIENT = "CLIENT"


class Span(abc.ABC):
    """An open span. Ending it is the tracer's job, not the caller's."""

    @abc.abstractmethod
    def set_attribute(self, key: str, value: Any) -> None: ...

    @abc.abstractmethod
    def set_status_ok(self) -> None: ...

    @abc.abstractmethod
    def record_exception(self, exc: Exception) -> None: ...

    def set_attributes(self, attributes: Mapping[str, Any]) -> None:
        for key, value in attributes.items():
            if value is not None:
                self.set_attribute(key, value)


class Tracer(abc.ABC):
    """Port: open a span around a block.

    Implementations must record an exception raised inside the block on the
    span and re-raise it unchanged.
    """

    @abc.abstractmethod
    @contextlib.contextmanager
    def start_span(
        self,
        name: str,
        kind: SpanKind = SpanKind.INTERNAL,
        attributes: dict[str, Any] | None = None,
    ) -> Iterator[Span]: ...


__all__ = ["Span", "SpanKind", "Tracer"]
