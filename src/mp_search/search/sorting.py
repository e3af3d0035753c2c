"""Search – sort criterion and sort-order construction."""
from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Any, Protocol, Sequence

from mp_search.search.filters import to_keyword_field
from mp_search.search.schema import EntityType, merge_field_types

__all__ = ["DefaultSortOrder", "SortCriterion", "SortOrder", "SortOrderBuilder"]


class SortOrder(str, Enum):
    ASCENDING = "asc"
    DESCENDING = "desc"


@dataclasses.dataclass(frozen=True)
class SortCriterion:
    field: str
    order: SortOrder = SortOrder.ASCENDING


class SortOrderBuilder(Protocol):
    """Port: sort clauses for a criterion (relevance order when ``None``)."""

    def apply_sort(
        self, sort_criterion: SortCriterion | None, entity_types: Sequence[EntityType]
    ) -> tuple[dict[str, Any], ...]: ...


class DefaultSortOrder:
    """Relevance or single-field order, always tie-broken on the identifier.

    The identifier tie-breaker gives a total order, so offset pages and
    cursor pages walk entities in the same sequence. It names the identifier
    the same way an explicit sort on it does (``urn.keyword`` when ``urn`` is
    analyzed).
    """

    def __init__(self, identifier_field: str = "urn") -> None:
        self._identifier_field = identifier_field

    def apply_sort(
        self, sort_criterion: SortCriterion | None, entity_types: Sequence[EntityType]
    ) -> tuple[dict[str, Any], ...]:
        field_types = merge_field_types(entity_types)
        identifier = to_keyword_field(self._identifier_field, field_types)
        tie_breaker = {identifier: {"order": SortOrder.ASCENDING.value}}
        if sort_criterion is None:
            return ({"_score": {"order": SortOrder.DESCENDING.value}}, tie_breaker)

        if sort_criterion.field not in field_types and sort_criterion.field != self._identifier_field:
            raise ValueError(f"Unknown sort field '{sort_criterion.field}'")
        field = to_keyword_field(sort_criterion.field, field_types)
        clauses: list[dict[str, Any]] = [{field: {"order": SortOrder(sort_criterion.order).value}}]
        if sort_criterion.field != self._identifier_field:
            clauses.append(tie_breaker)
        return tuple(clauses)
