"""Search – filter model, boolean query value and the soft-delete aware compiler.

A :class:`Filter` is a disjunction of conjunctions::

    Filter(or_=(
        ConjunctiveCriterion(and_=(Criterion("platform", ("hive",)),
                                   Criterion("origin", ("PROD",)))),
        ConjunctiveCriterion(and_=(Criterion("tags", ("pii",)),)),
    ))

The compiler turns it into a :class:`BoolQuery`; query clauses themselves are
plain dicts in the backend's JSON query DSL.
"""
from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Any, Mapping, Protocol

from mp_search.search.schema import ANALYZED_FIELD_TYPES, FieldType

__all__ = [
    "BoolQuery",
    "Condition",
    "ConjunctiveCriterion",
    "Criterion",
    "DefaultFilterCompiler",
    "Filter",
    "FilterCompiler",
    "KEYWORD_SUFFIX",
    "soft_delete_aware_filter_query",
    "to_keyword_field",
]

KEYWORD_SUFFIX = ".keyword"

FieldTypeMap = Mapping[str, frozenset[FieldType]]


class Condition(str, Enum):
    EQUAL = "EQUAL"
    IN = "IN"
    CONTAIN = "CONTAIN"
    START_WITH = "START_WITH"
    END_WITH = "END_WITH"
    GREATER_THAN = "GREATER_THAN"
    GREATER_THAN_OR_EQUAL_TO = "GREATER_THAN_OR_EQUAL_TO"
    LESS_THAN = "LESS_THAN"
    LESS_THAN_OR_EQUAL_TO = "LESS_THAN_OR_EQUAL_TO"
    EXISTS = "EXISTS"


_RANGE_OPERATORS = {
    Condition.GREATER_THAN: "gt",
    Condition.GREATER_THAN_OR_EQUAL_TO: "gte",
    Condition.LESS_THAN: "lt",
    Condition.LESS_THAN_OR_EQUAL_TO: "lte",
}


@dataclasses.dataclass(frozen=True)
class Criterion:
    """A single field/value condition."""
    field: str
    values: tuple[Any, ...] = ()
    condition: Condition = Condition.EQUAL
    negated: bool = False


@dataclasses.dataclass(frozen=True)
class ConjunctiveCriterion:
    """Criteria that must all hold."""
    and_: tuple[Criterion, ...] = ()


@dataclasses.dataclass(frozen=True)
class Filter:
    """Disjunction of :class:`ConjunctiveCriterion` groups."""
    or_: tuple[ConjunctiveCriterion, ...] = ()

    @classmethod
    def of(cls, *criteria: Criterion) -> "Filter":
        """Single conjunction of *criteria*."""
        return cls(or_=(ConjunctiveCriterion(and_=tuple(criteria)),))

    @property
    def is_empty(self) -> bool:
        return not any(group.and_ for group in self.or_)

    def criteria(self) -> list[Criterion]:
        return [criterion for group in self.or_ for criterion in group.and_]

    def mentions(self, field: str) -> bool:
        """``True`` if any criterion constrains *field* or its keyword form."""
        names = {field, field + KEYWORD_SUFFIX}
        return any(criterion.field in names for criterion in self.criteria())


@dataclasses.dataclass(frozen=True)
class BoolQuery:
    """Immutable boolean query; every list holds JSON-DSL clauses."""
    must: tuple[dict[str, Any], ...] = ()
    filter: tuple[dict[str, Any], ...] = ()
    should: tuple[dict[str, Any], ...] = ()
    must_not: tuple[dict[str, Any], ...] = ()
    minimum_should_match: int | None = None

    def with_must_not(self, clause: dict[str, Any]) -> "BoolQuery":
        return dataclasses.replace(self, must_not=self.must_not + (clause,))

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        for name in ("must", "filter", "should", "must_not"):
            clauses = getattr(self, name)
            if clauses:
                body[name] = [_render(clause) for clause in clauses]
        if self.minimum_should_match is not None:
            body["minimum_should_match"] = self.minimum_should_match
        return {"bool": body}


def _render(clause: Any) -> Any:
    return clause.to_dict() if isinstance(clause, BoolQuery) else clause


class FilterCompiler(Protocol):
    """Port: structural translation of a :class:`Filter` to a :class:`BoolQuery`."""

    def compile(self, filter: Filter | None, field_types: FieldTypeMap) -> BoolQuery: ...


def to_keyword_field(field: str, field_types: FieldTypeMap) -> str:
    """Exact-match form of *field*: analyzed fields use their ``.keyword`` sub-field."""
    if field.endswith(KEYWORD_SUFFIX):
        return field
    if field_types.get(field, frozenset()) & ANALYZED_FIELD_TYPES:
        return field + KEYWORD_SUFFIX
    return field


class DefaultFilterCompiler:
    """Compiles each conjunction to a ``bool`` and ORs them with ``should``."""

    def compile(self, filter: Filter | None, field_types: FieldTypeMap) -> BoolQuery:
        if filter is None or filter.is_empty:
            return BoolQuery()
        groups = [group for group in filter.or_ if group.and_]
        if len(groups) == 1:
            return self._conjunction(groups[0], field_types)
        return BoolQuery(
            should=tuple(self._conjunction(group, field_types).to_dict() for group in groups),
            minimum_should_match=1,
        )

    def _conjunction(self, group: ConjunctiveCriterion, field_types: FieldTypeMap) -> BoolQuery:
        must: list[dict[str, Any]] = []
        must_not: list[dict[str, Any]] = []
        for criterion in group.and_:
            if not criterion.values and criterion.condition is not Condition.EXISTS:
                continue
            clause = self._criterion(criterion, field_types)
            (must_not if criterion.negated else must).append(clause)
        return BoolQuery(filter=tuple(must), must_not=tuple(must_not))

    def _criterion(self, criterion: Criterion, field_types: FieldTypeMap) -> dict[str, Any]:
        condition = criterion.condition
        if condition is Condition.EXISTS:
            return {"exists": {"field": criterion.field}}
        if condition in _RANGE_OPERATORS:
            return {"range": {criterion.field: {_RANGE_OPERATORS[condition]: criterion.values[0]}}}

        field = to_keyword_field(criterion.field, field_types)
        if condition in (Condition.EQUAL, Condition.IN):
            return {"terms": {field: list(criterion.values)}}

        patterns = {
            Condition.CONTAIN: "*{}*",
            Condition.START_WITH: "{}*",
            Condition.END_WITH: "*{}",
        }
        wildcards = [
            {"wildcard": {field: {"value": patterns[condition].format(value), "case_insensitive": True}}}
            for value in criterion.values
        ]
        if len(wildcards) == 1:
            return wildcards[0]
        return BoolQuery(should=tuple(wildcards), minimum_should_match=1).to_dict()


def soft_delete_aware_filter_query(
    filter: Filter | None,
    field_types: FieldTypeMap,
    compiler: FilterCompiler,
    soft_delete_field: str = "removed",
) -> BoolQuery:
    """Compile *filter* and hide soft-deleted documents unless it asks about them.

    The exclusion is appended at most once.
    """
    query = compiler.compile(filter, field_types)
    if filter is not None and filter.mentions(soft_delete_field):
        return query
    clause = {"match": {soft_delete_field: True}}
    if clause in query.must_not:
        return query
    return query.with_must_not(clause)
