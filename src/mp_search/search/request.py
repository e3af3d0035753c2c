"""Search – the abstract query handed to the backend client.

:class:`AbstractQuery` is built once per call and never mutated. Its
:meth:`AbstractQuery.to_body` renders an Elasticsearch/OpenSearch style
request body; executing it is the backend client's job.
"""
from __future__ import annotations

import dataclasses
import re
from datetime import timedelta
from typing import Any, Union

from mp_search.kernel.errors import InvalidKeepAliveError
from mp_search.search.filters import BoolQuery

__all__ = [
    "AbstractQuery",
    "AggregationRequest",
    "CursorWindow",
    "HighlightConfig",
    "OffsetWindow",
    "Pagination",
    "parse_keep_alive",
]

_KEEP_ALIVE_RE = re.compile(r"([0-9]+)(nanos|micros|ms|s|m|h|d)")
_UNIT_MICROSECONDS = {
    "nanos": 0.001,
    "micros": 1,
    "ms": 1_000,
    "s": 1_000_000,
    "m": 60 * 1_000_000,
    "h": 60 * 60 * 1_000_000,
    "d": 24 * 60 * 60 * 1_000_000,
}


def parse_keep_alive(keep_alive: str) -> timedelta:
    """Parse a backend time value such as ``"30s"``, ``"5m"`` or ``"1h"``.

    The value is sent to the backend verbatim, so surrounding whitespace is
    rejected rather than stripped. Raises :class:`InvalidKeepAliveError` for
    anything else.
    """
    if not isinstance(keep_alive, str):
        raise InvalidKeepAliveError(repr(keep_alive), "expected a string such as '5m'")
    match = _KEEP_ALIVE_RE.fullmatch(keep_alive)
    if match is None:
        raise InvalidKeepAliveError(keep_alive, "expected <number><unit> with unit in d/h/m/s/ms/micros/nanos")
    amount, unit = int(match.group(1)), match.group(2)
    return timedelta(microseconds=amount * _UNIT_MICROSECONDS[unit])


@dataclasses.dataclass(frozen=True)
class HighlightConfig:
    """Highlight every default field and its sub-fields, with no markup tags
    so fragments carry the original field value."""
    fields: tuple[str, ...]
    pre_tags: str = ""
    post_tags: str = ""

    @classmethod
    def for_fields(cls, field_names: frozenset[str] | set[str]) -> "HighlightConfig":
        expanded: list[str] = []
        for name in sorted(field_names):
            for candidate in (name, f"{name}.*"):
                if candidate not in expanded:
                    expanded.append(candidate)
        return cls(fields=tuple(expanded))

    def to_dict(self) -> dict[str, Any]:
        return {
            "pre_tags": [self.pre_tags],
            "post_tags": [self.post_tags],
            "fields": {name: {} for name in self.fields},
        }


@dataclasses.dataclass(frozen=True)
class AggregationRequest:
    """A terms aggregation bucketed on *field*."""
    name: str
    field: str
    size: int

    def to_dict(self) -> dict[str, Any]:
        return {"terms": {"field": self.field, "size": self.size}}


@dataclasses.dataclass(frozen=True)
class OffsetWindow:
    from_: int
    size: int


@dataclasses.dataclass(frozen=True)
class CursorWindow:
    """Continuation after *prior_sort_values* inside backend session *session_id*.

    Both absent means a first page; with *keep_alive* set the backend client
    opens a new session for it.
    """
    size: int
    prior_sort_values: tuple[Any, ...] | None = None
    session_id: str | None = None
    keep_alive: str | None = None

    @property
    def opens_session(self) -> bool:
        return self.session_id is None and self.keep_alive is not None


Pagination = Union[OffsetWindow, CursorWindow]


@dataclasses.dataclass(frozen=True)
class AbstractQuery:
    must_query: dict[str, Any] | None
    filter_query: BoolQuery
    pagination: Pagination
    source_fields: tuple[str, ...] | None = None
    sort: tuple[dict[str, Any], ...] = ()
    aggregations: tuple[AggregationRequest, ...] = ()
    highlighter: HighlightConfig | None = None
    suggestions: dict[str, Any] | None = None

    @property
    def size(self) -> int:
        return self.pagination.size

    def to_body(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if self.must_query is None:
            body["query"] = self.filter_query.to_dict()
        else:
            body["query"] = {
                "bool": {
                    "must": [self.must_query],
                    "filter": [self.filter_query.to_dict()],
                }
            }

        pagination = self.pagination
        if isinstance(pagination, OffsetWindow):
            body["from"] = pagination.from_
        else:
            if pagination.prior_sort_values is not None:
                body["search_after"] = list(pagination.prior_sort_values)
            if pagination.session_id is not None:
                pit: dict[str, Any] = {"id": pagination.session_id}
                if pagination.keep_alive is not None:
                    pit["keep_alive"] = pagination.keep_alive
                body["pit"] = pit
        body["size"] = pagination.size

        if self.source_fields is not None:
            body["_source"] = {"includes": list(self.source_fields)}
        if self.sort:
            body["sort"] = list(self.sort)
        if self.aggregations:
            body["aggs"] = {agg.name: agg.to_dict() for agg in self.aggregations}
        if self.highlighter is not None:
            body["highlight"] = self.highlighter.to_dict()
        if self.suggestions:
            body["suggest"] = self.suggestions
        return body
