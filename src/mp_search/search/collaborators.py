"""Search – text-query, aggregation and suggestion collaborators.

Each concern is a ``Protocol`` port plus a default implementation, so the
handler can be used as-is or wired to a deployment's own query builders.
"""
from __future__ import annotations

from typing import Any, Protocol, Sequence

from mp_search.search.configuration import CustomSearchConfiguration, SearchConfiguration
from mp_search.search.filters import Filter, to_keyword_field
from mp_search.search.flags import is_match_all_input
from mp_search.search.matching import NAME_SUGGESTION
from mp_search.search.request import AggregationRequest
from mp_search.search.results import AggregationMetadata, FilterValue, SearchResponse
from mp_search.search.schema import ANALYZED_FIELD_TYPES, EntityType, merge_field_types

__all__ = [
    "AggregationBuilder",
    "DefaultAggregationBuilder",
    "DefaultTextQueryBuilder",
    "NameSuggestionBuilder",
    "SuggestionBuilder",
    "TextQueryBuilder",
]


# ---------------------------------------------------------------------------
# Ports
# ---------------------------------------------------------------------------


class TextQueryBuilder(Protocol):
    def build_text_query(
        self, entity_types: Sequence[EntityType], input_text: str, fulltext: bool
    ) -> dict[str, Any]: ...


class AggregationBuilder(Protocol):
    def build_aggregation_requests(
        self, facets: Sequence[str] | None, max_values: int | None = None
    ) -> list[AggregationRequest]: ...

    def extract_aggregation_metadata(
        self, response: SearchResponse, filter: Filter | None
    ) -> list[AggregationMetadata]: ...


class SuggestionBuilder(Protocol):
    def attach_name_suggestion(self, input_text: str) -> dict[str, Any]: ...


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------


class DefaultTextQueryBuilder:
    """Free-text or structured query over the query-by-default fields.

    Structured mode adds one named exact-match ``term`` clause per
    non-analyzed default field; those names come back as the hit's matched
    queries and are reconciled with highlights during extraction.
    """

    def __init__(
        self,
        config: SearchConfiguration,
        custom_config: CustomSearchConfiguration | None = None,
    ) -> None:
        self._config = config
        self._custom = custom_config or CustomSearchConfiguration()

    def _query_fields(self, entity_types: Sequence[EntityType]) -> dict[str, float]:
        boosts: dict[str, float] = {}
        for entity_type in entity_types:
            for field in entity_type.searchable_fields:
                if field.query_by_default:
                    boosts[field.name] = max(boosts.get(field.name, 0.0), field.boost_score)
        for extra in self._custom.extra_query_fields:
            boosts[extra.name] = max(boosts.get(extra.name, 0.0), extra.boost)
        boosts.setdefault(self._config.identifier_field, 1.0)
        return boosts

    def build_text_query(
        self, entity_types: Sequence[EntityType], input_text: str, fulltext: bool
    ) -> dict[str, Any]:
        if is_match_all_input(input_text):
            return {"match_all": {}}

        boosts = self._query_fields(entity_types)
        fields = [f"{name}^{boost:g}" for name, boost in sorted(boosts.items())]
        text = input_text.strip()
        if fulltext:
            return {
                "simple_query_string": {
                    "query": text,
                    "fields": fields,
                    "default_operator": "and",
                }
            }

        field_types = merge_field_types(entity_types)
        should: list[dict[str, Any]] = [
            {"query_string": {"query": text, "fields": fields, "default_operator": "and"}}
        ]
        for name in sorted(boosts):
            if field_types.get(name, frozenset()) & ANALYZED_FIELD_TYPES and name != self._config.identifier_field:
                continue
            should.append(
                {
                    "term": {
                        to_keyword_field(name, field_types): {
                            "value": text,
                            "boost": self._custom.exact_match_boost,
                            "_name": name,
                        }
                    }
                }
            )
        return {"bool": {"should": should, "minimum_should_match": 1}}


class DefaultAggregationBuilder:
    """Terms aggregations on the keyword form of each facet field."""

    def __init__(self, config: SearchConfiguration, entity_types: Sequence[EntityType]) -> None:
        self._config = config
        self._field_types = merge_field_types(entity_types)

    def build_aggregation_requests(
        self, facets: Sequence[str] | None, max_values: int | None = None
    ) -> list[AggregationRequest]:
        names = self._config.default_facets if facets is None else facets
        size = max_values or self._config.max_agg_values
        requests: list[AggregationRequest] = []
        for facet in names:
            if facet not in self._field_types:
                raise ValueError(f"Unknown facet '{facet}'")
            requests.append(
                AggregationRequest(name=facet, field=to_keyword_field(facet, self._field_types), size=size)
            )
        return requests

    def extract_aggregation_metadata(
        self, response: SearchResponse, filter: Filter | None
    ) -> list[AggregationMetadata]:
        metadata: list[AggregationMetadata] = []
        for name, aggregation in response.aggregations.items():
            buckets = aggregation.get("buckets") if isinstance(aggregation, dict) else None
            if buckets is None:
                continue
            counts = {str(bucket["key"]): int(bucket.get("doc_count", 0)) for bucket in buckets}
            selected = self._selected_values(name, filter)
            for value in selected:
                counts.setdefault(value, 0)
            filter_values = tuple(
                FilterValue(value=value, facet_count=count, filtered=value in selected)
                for value, count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
            )
            metadata.append(
                AggregationMetadata(
                    name=name,
                    display_name=name,
                    aggregations=counts,
                    filter_values=filter_values,
                )
            )
        return metadata

    @staticmethod
    def _selected_values(name: str, filter: Filter | None) -> set[str]:
        if filter is None:
            return set()
        return {
            str(value)
            for criterion in filter.criteria()
            if criterion.field in (name, f"{name}.keyword") and not criterion.negated
            for value in criterion.values
        }


class NameSuggestionBuilder:
    """Term suggester on the configured name field."""

    def __init__(self, field: str = "name") -> None:
        self._field = field

    def attach_name_suggestion(self, input_text: str) -> dict[str, Any]:
        return {NAME_SUGGESTION: {"text": input_text, "term": {"field": self._field}}}
