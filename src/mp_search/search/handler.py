"""Search – request building and result extraction for a set of entity types.

A :class:`SearchRequestHandler` is created once per ordered list of entity
types (see :class:`~mp_search.search.registry.HandlerRegistry`) and
precomputes everything derived from their schemas: the default query
fields, the merged field-type map and the highlight configuration.

Every public method is pure with respect to the handler: it builds only
per-call values, so one instance is safe to share between threads.
"""
from __future__ import annotations

from typing import Any, Mapping, Sequence

from mp_search.kernel.errors import CorruptedSearchDocumentError, SerializationError
from mp_search.kernel.time import Clock, SystemClock
from mp_search.observability.logging import get_logger
from mp_search.observability.tracing import NoopTracer, Tracer
from mp_search.search.collaborators import (
    AggregationBuilder,
    DefaultAggregationBuilder,
    DefaultTextQueryBuilder,
    NameSuggestionBuilder,
    SuggestionBuilder,
    TextQueryBuilder,
)
from mp_search.search.configuration import CustomSearchConfiguration, SearchConfiguration
from mp_search.search.cursor import ScrollCursor
from mp_search.search.filters import (
    BoolQuery,
    DefaultFilterCompiler,
    Filter,
    FilterCompiler,
    soft_delete_aware_filter_query,
    to_keyword_field,
)
from mp_search.search.flags import EffectiveFlags, FlagPolicy, SearchFlags, resolve_flags
from mp_search.search.identifiers import IdentifierParser, parse_plain_identifier, parse_urn
from mp_search.search.matching import extract_features, extract_matched_fields, extract_suggestions
from mp_search.search.request import (
    AbstractQuery,
    AggregationRequest,
    CursorWindow,
    HighlightConfig,
    OffsetWindow,
    Pagination,
    parse_keep_alive,
)
from mp_search.search.results import (
    RawHit,
    ScrollResult,
    SearchEntity,
    SearchResponse,
    SearchResult,
    SearchResultMetadata,
)
from mp_search.search.schema import EntityType, default_query_field_names, merge_field_types
from mp_search.search.sorting import DefaultSortOrder, SortCriterion, SortOrderBuilder

__all__ = ["SearchRequestHandler"]

logger = get_logger(__name__)


class SearchRequestHandler:
    def __init__(
        self,
        entity_types: Sequence[EntityType],
        config: SearchConfiguration,
        custom_config: CustomSearchConfiguration | None = None,
        *,
        text_query_builder: TextQueryBuilder | None = None,
        filter_compiler: FilterCompiler | None = None,
        aggregation_builder: AggregationBuilder | None = None,
        sort_order: SortOrderBuilder | None = None,
        suggestion_builder: SuggestionBuilder | None = None,
        flag_policy: FlagPolicy | None = None,
        identifier_parser: IdentifierParser | None = None,
        clock: Clock | None = None,
        tracer: Tracer | None = None,
    ) -> None:
        self._entity_types = tuple(entity_types)
        self._config = config
        self._default_query_field_names = default_query_field_names(
            self._entity_types, config.identifier_field
        )
        self._field_types = merge_field_types(self._entity_types)
        self._highlights = HighlightConfig.for_fields(self._default_query_field_names)

        self._text_query_builder = text_query_builder or DefaultTextQueryBuilder(config, custom_config)
        self._filter_compiler = filter_compiler or DefaultFilterCompiler()
        self._aggregation_builder = aggregation_builder or DefaultAggregationBuilder(config, self._entity_types)
        self._sort_order = sort_order or DefaultSortOrder(config.identifier_field)
        self._suggestion_builder = suggestion_builder or NameSuggestionBuilder(config.name_suggestion_field)
        self._flag_policy = flag_policy
        if identifier_parser is None:
            identifier_parser = parse_urn if config.identifier_field == "urn" else parse_plain_identifier
        self._parse_identifier = identifier_parser
        self._clock = clock or SystemClock()
        self._tracer = tracer or NoopTracer()

    # ------------------------------------------------------------------
    # Precomputed state
    # ------------------------------------------------------------------

    @property
    def entity_types(self) -> tuple[EntityType, ...]:
        return self._entity_types

    @property
    def default_query_field_names(self) -> frozenset[str]:
        return self._default_query_field_names

    @property
    def field_types(self) -> Mapping[str, frozenset]:
        return self._field_types

    @property
    def highlights(self) -> HighlightConfig:
        return self._highlights

    # ------------------------------------------------------------------
    # Request building
    # ------------------------------------------------------------------

    def resolve_flags(self, flags: SearchFlags | None, input_text: str | None) -> EffectiveFlags:
        return resolve_flags(flags, input_text, self._config.default_flags(), self._flag_policy)

    def get_filter_query(self, filter: Filter | None) -> BoolQuery:
        return soft_delete_aware_filter_query(
            filter, self._field_types, self._filter_compiler, self._config.soft_delete_field
        )

    def get_text_query(self, input_text: str, fulltext: bool) -> dict[str, Any]:
        return self._text_query_builder.build_text_query(self._entity_types, input_text, fulltext)

    def build_request(
        self,
        input_text: str,
        filter: Filter | None = None,
        sort: SortCriterion | None = None,
        from_: int = 0,
        size: int = 10,
        flags: SearchFlags | None = None,
        facets: Sequence[str] | None = None,
    ) -> AbstractQuery:
        """Offset-paginated search over ``[from_, from_ + size)``.

        ``facets=None`` requests the default facets; ``facets=[]`` requests
        no aggregations at all.
        """
        with self._tracer.start_span("search.build_request", attributes={"from": from_, "size": size}) as span:
            effective = self.resolve_flags(flags, input_text)
            query = self._assemble(input_text, filter, sort, OffsetWindow(from_=from_, size=size), effective, facets)
            span.set_attributes(_request_attributes(query))
        logger.debug("search.request.built", mode="offset", body=query.to_body())
        return query

    def build_scroll_request(
        self,
        input_text: str,
        filter: Filter | None = None,
        sort: SortCriterion | None = None,
        prior_sort_values: Sequence[Any] | None = None,
        session_id: str | None = None,
        keep_alive: str | None = None,
        size: int = 10,
        flags: SearchFlags | None = None,
        facets: Sequence[str] | None = None,
    ) -> AbstractQuery:
        """Cursor-paginated search continuing after *prior_sort_values*.

        Name suggestions are never requested in this mode; they belong to
        offset search only. An unparseable *keep_alive* fails here, before
        anything reaches the backend.
        """
        if keep_alive is not None:
            parse_keep_alive(keep_alive)
        window = CursorWindow(
            size=size,
            prior_sort_values=tuple(prior_sort_values) if prior_sort_values is not None else None,
            session_id=session_id,
            keep_alive=keep_alive,
        )
        with self._tracer.start_span("search.build_scroll_request", attributes={"size": size}) as span:
            effective = self.resolve_flags(flags, input_text)
            query = self._assemble(input_text, filter, sort, window, effective, facets)
            span.set_attributes(_request_attributes(query))
        logger.debug("search.request.built", mode="cursor", body=query.to_body())
        return query

    def build_filter_request(
        self,
        filter: Filter | None,
        sort: SortCriterion | None = None,
        from_: int = 0,
        size: int = 10,
    ) -> AbstractQuery:
        """Filter-only listing: no text query, aggregations or highlighting."""
        query = AbstractQuery(
            must_query=None,
            filter_query=self.get_filter_query(filter),
            pagination=OffsetWindow(from_=from_, size=size),
            sort=self._sort_order.apply_sort(sort, self._entity_types),
        )
        logger.debug("search.request.built", mode="filter", body=query.to_body())
        return query

    def build_aggregation_only_request(
        self, field: str, filter: Filter | None = None, limit: int = 20
    ) -> AbstractQuery:
        """Document counts per value of *field*, at most *limit* buckets, no hits."""
        aggregation = AggregationRequest(
            name=field, field=to_keyword_field(field, self._field_types), size=limit
        )
        return AbstractQuery(
            must_query=None,
            filter_query=self.get_filter_query(filter),
            pagination=OffsetWindow(from_=0, size=0),
            aggregations=(aggregation,),
        )

    def _assemble(
        self,
        input_text: str,
        filter: Filter | None,
        sort: SortCriterion | None,
        pagination: Pagination,
        flags: EffectiveFlags,
        facets: Sequence[str] | None,
    ) -> AbstractQuery:
        suggestions = None
        if isinstance(pagination, OffsetWindow) and flags.get_suggestions:
            suggestions = self._suggestion_builder.attach_name_suggestion(input_text)
        return AbstractQuery(
            must_query=self.get_text_query(input_text, flags.fulltext),
            filter_query=self.get_filter_query(filter),
            pagination=pagination,
            source_fields=(self._config.identifier_field,),
            sort=self._sort_order.apply_sort(sort, self._entity_types),
            aggregations=self._aggregations(facets, flags),
            highlighter=None if flags.skip_highlighting else self._highlights,
            suggestions=suggestions,
        )

    def _aggregations(
        self, facets: Sequence[str] | None, flags: EffectiveFlags
    ) -> tuple[AggregationRequest, ...]:
        if flags.skip_aggregates or (facets is not None and len(facets) == 0):
            return ()
        return tuple(self._aggregation_builder.build_aggregation_requests(facets, flags.max_agg_values))

    # ------------------------------------------------------------------
    # Result extraction
    # ------------------------------------------------------------------

    def extract(
        self,
        response: SearchResponse | Mapping[str, Any],
        filter: Filter | None,
        from_: int,
        size: int,
    ) -> SearchResult:
        response = _as_response(response)
        with self._tracer.start_span("search.extract", attributes={"hits": len(response.hits)}) as span:
            result = SearchResult(
                entities=self._entities(response),
                metadata=self._metadata(response, filter),
                from_=from_,
                page_size=size,
                total_count=response.total,
            )
            span.set_attribute("total", result.total_count)
            return result

    def extract_scroll(
        self,
        response: SearchResponse | Mapping[str, Any],
        filter: Filter | None,
        prior_cursor: ScrollCursor | str | None = None,
        keep_alive: str | None = None,
        size: int = 10,
        supports_session: bool = False,
    ) -> ScrollResult:
        """Scroll page plus the cursor for the next one.

        A full page (``len(hits) == size``) always yields a cursor, even if
        it happens to be the last page; the caller then receives one empty
        page as the end-of-results signal.
        """
        response = _as_response(response)
        if isinstance(prior_cursor, str):
            prior_cursor = ScrollCursor.decode(prior_cursor)
        with self._tracer.start_span("search.extract_scroll", attributes={"hits": len(response.hits)}) as span:
            entities = self._entities(response)
            next_cursor = None
            if response.hits and len(response.hits) == size:
                next_cursor = self._next_cursor(response, prior_cursor, keep_alive, supports_session)
            span.set_attributes({"total": response.total, "has_more": next_cursor is not None})
            return ScrollResult(
                entities=entities,
                metadata=self._metadata(response, filter),
                page_size=size,
                total_count=response.total,
                next_cursor=next_cursor,
            )

    def _next_cursor(
        self,
        response: SearchResponse,
        prior_cursor: ScrollCursor | None,
        keep_alive: str | None,
        supports_session: bool,
    ) -> str:
        last_hit = response.hits[-1]
        if not last_hit.sort_values:
            raise SerializationError(
                "Last hit of a full scroll page carries no sort values",
                payload_type="search_hit",
                detail={"document_id": last_hit.document_id},
            )
        session_id = None
        expires_at = 0
        if supports_session:
            session_id = response.session_id or (prior_cursor.session_id if prior_cursor else None)
            if keep_alive is not None:
                keep_alive_ms = int(parse_keep_alive(keep_alive).total_seconds() * 1000)
                expires_at = self._clock.epoch_millis() + keep_alive_ms
        return ScrollCursor(
            sort_values=last_hit.sort_values,
            session_id=session_id,
            expires_at_epoch_ms=expires_at,
        ).encode()

    def _entities(self, response: SearchResponse) -> tuple[SearchEntity, ...]:
        return tuple(self._entity(hit) for hit in response.hits)

    def _entity(self, hit: RawHit) -> SearchEntity:
        return SearchEntity(
            entity=self._identifier(hit),
            matched_fields=extract_matched_fields(hit, self._default_query_field_names),
            score=hit.score,
            features=extract_features(hit),
        )

    def _identifier(self, hit: RawHit) -> str:
        raw = hit.source.get(self._config.identifier_field)
        try:
            if raw is None:
                raise ValueError(f"missing '{self._config.identifier_field}' in document source")
            return self._parse_identifier(raw)
        except ValueError as exc:
            error = CorruptedSearchDocumentError(
                f"Invalid {self._config.identifier_field} in search document: {exc}",
                document_id=hit.document_id,
                raw_identifier=raw,
                cause=exc,
            )
            logger.error("search.document.corrupted", **error.log_fields())
            raise error from exc

    def _metadata(self, response: SearchResponse, filter: Filter | None) -> SearchResultMetadata:
        return SearchResultMetadata(
            aggregations=tuple(self._aggregation_builder.extract_aggregation_metadata(response, filter)),
            suggestions=tuple(extract_suggestions(response.suggest)),
        )


def _request_attributes(query: AbstractQuery) -> dict[str, Any]:
    return {
        "aggregations": len(query.aggregations),
        "highlight": query.highlighter is not None,
        "suggestions": query.suggestions is not None,
    }


def _as_response(response: SearchResponse | Mapping[str, Any]) -> SearchResponse:
    if isinstance(response, SearchResponse):
        return response
    return SearchResponse.from_dict(response)
