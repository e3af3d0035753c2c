"""Search – raw backend response model and typed search results."""
from __future__ import annotations

import dataclasses
import math
from typing import Any, Mapping

__all__ = [
    "AggregationMetadata",
    "FilterValue",
    "MatchedField",
    "RawHit",
    "ScrollResult",
    "SearchEntity",
    "SearchResponse",
    "SearchResult",
    "SearchResultMetadata",
    "SearchSuggestion",
]


# ---------------------------------------------------------------------------
# Raw backend response
# ---------------------------------------------------------------------------


def _as_tuple(value: Any) -> tuple[Any, ...]:
    if value is None:
        return ()
    if isinstance(value, (list, tuple)):
        return tuple(value)
    return (value,)


@dataclasses.dataclass(frozen=True)
class RawHit:
    """One document as returned by the backend.

    ``score`` is NaN when the backend did not score the hit (pure field sort).
    """
    source: Mapping[str, Any]
    score: float = math.nan
    document_id: str | None = None
    highlight: Mapping[str, tuple[str, ...]] = dataclasses.field(default_factory=dict)
    matched_queries: tuple[str, ...] = ()
    fields: Mapping[str, tuple[Any, ...]] = dataclasses.field(default_factory=dict)
    sort_values: tuple[Any, ...] = ()

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "RawHit":
        score = raw.get("_score")
        matched = raw.get("matched_queries") or ()
        # Newer backends return {name: score} when named query scores are requested.
        if isinstance(matched, Mapping):
            matched = tuple(matched.keys())
        return cls(
            source=raw.get("_source") or {},
            score=math.nan if score is None else float(score),
            document_id=raw.get("_id"),
            highlight={key: _as_tuple(fragments) for key, fragments in (raw.get("highlight") or {}).items()},
            matched_queries=tuple(matched),
            fields={key: _as_tuple(values) for key, values in (raw.get("fields") or {}).items()},
            sort_values=_as_tuple(raw.get("sort")),
        )


@dataclasses.dataclass(frozen=True)
class SearchResponse:
    total: int
    hits: tuple[RawHit, ...] = ()
    aggregations: Mapping[str, Any] = dataclasses.field(default_factory=dict)
    suggest: Mapping[str, Any] | None = None
    session_id: str | None = None

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "SearchResponse":
        hits_block = raw.get("hits") or {}
        hits = tuple(RawHit.from_dict(hit) for hit in hits_block.get("hits") or ())
        total = hits_block.get("total")
        if isinstance(total, Mapping):
            total = total.get("value")
        return cls(
            total=len(hits) if total is None else int(total),
            hits=hits,
            aggregations=raw.get("aggregations") or {},
            suggest=raw.get("suggest"),
            session_id=raw.get("pit_id"),
        )


# ---------------------------------------------------------------------------
# Typed results
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True)
class MatchedField:
    """Why a document matched: a field name and the value that matched."""
    name: str
    value: str


@dataclasses.dataclass(frozen=True)
class SearchEntity:
    entity: str
    matched_fields: frozenset[MatchedField] = frozenset()
    score: float = math.nan
    features: Mapping[str, float] = dataclasses.field(default_factory=dict)


@dataclasses.dataclass(frozen=True)
class SearchSuggestion:
    text: str
    frequency: int
    score: float


@dataclasses.dataclass(frozen=True)
class FilterValue:
    value: str
    facet_count: int
    filtered: bool = False


@dataclasses.dataclass(frozen=True)
class AggregationMetadata:
    name: str
    display_name: str
    aggregations: Mapping[str, int]
    filter_values: tuple[FilterValue, ...] = ()


@dataclasses.dataclass(frozen=True)
class SearchResultMetadata:
    aggregations: tuple[AggregationMetadata, ...] = ()
    suggestions: tuple[SearchSuggestion, ...] = ()


@dataclasses.dataclass(frozen=True)
class SearchResult:
    entities: tuple[SearchEntity, ...]
    metadata: SearchResultMetadata
    from_: int
    page_size: int
    total_count: int


@dataclasses.dataclass(frozen=True)
class ScrollResult:
    """A cursor page. ``next_cursor`` is ``None`` at end of results."""
    entities: tuple[SearchEntity, ...]
    metadata: SearchResultMetadata
    page_size: int
    total_count: int
    next_cursor: str | None = None

    @property
    def has_more(self) -> bool:
        return self.next_cursor is not None
