"""Search – request building, result extraction and scroll cursors."""
from mp_search.search.configuration import (
    CustomSearchConfiguration,
    QueryFieldOverride,
    SearchConfiguration,
)
from mp_search.search.cursor import ScrollCursor
from mp_search.search.filters import (
    BoolQuery,
    Condition,
    ConjunctiveCriterion,
    Criterion,
    DefaultFilterCompiler,
    Filter,
    FilterCompiler,
)
from mp_search.search.flags import EffectiveFlags, InputDependentDefaults, SearchFlags, resolve_flags
from mp_search.search.handler import SearchRequestHandler
from mp_search.search.registry import HandlerRegistry
from mp_search.search.request import (
    AbstractQuery,
    AggregationRequest,
    CursorWindow,
    HighlightConfig,
    OffsetWindow,
    parse_keep_alive,
)
from mp_search.search.results import (
    AggregationMetadata,
    FilterValue,
    MatchedField,
    RawHit,
    ScrollResult,
    SearchEntity,
    SearchResponse,
    SearchResult,
    SearchResultMetadata,
    SearchSuggestion,
)
from mp_search.search.schema import EntityType, FieldType, SearchableField
from mp_search.search.sorting import SortCriterion, SortOrder

__all__ = [
    "AbstractQuery",
    "AggregationMetadata",
    "AggregationRequest",
    "BoolQuery",
    "Condition",
    "ConjunctiveCriterion",
    "Criterion",
    "CursorWindow",
    "CustomSearchConfiguration",
    "DefaultFilterCompiler",
    "EffectiveFlags",
    "EntityType",
    "FieldType",
    "Filter",
    "FilterCompiler",
    "FilterValue",
    "HandlerRegistry",
    "HighlightConfig",
    "InputDependentDefaults",
    "MatchedField",
    "OffsetWindow",
    "QueryFieldOverride",
    "RawHit",
    "ScrollCursor",
    "ScrollResult",
    "SearchConfiguration",
    "SearchEntity",
    "SearchFlags",
    "SearchRequestHandler",
    "SearchResponse",
    "SearchResult",
    "SearchResultMetadata",
    "SearchSuggestion",
    "SearchableField",
    "SortCriterion",
    "SortOrder",
    "parse_keep_alive",
    "resolve_flags",
]
