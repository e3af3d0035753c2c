"""Entity types and raw-response builders shared by the search tests."""
from __future__ import annotations

from mp_search.search import EntityType, FieldType, SearchableField

DATASET = EntityType(
    name="dataset",
    searchable_fields=(
        SearchableField("urn", FieldType.URN),
        SearchableField("name", FieldType.TEXT, query_by_default=True, boost_score=10.0),
        SearchableField("title", FieldType.TEXT, query_by_default=True),
        SearchableField("description", FieldType.TEXT, query_by_default=True),
        SearchableField("platform", FieldType.KEYWORD),
        SearchableField("origin", FieldType.KEYWORD),
        SearchableField("qualifiedName", FieldType.KEYWORD, query_by_default=True),
        SearchableField("removed", FieldType.BOOLEAN),
        SearchableField("rowCount", FieldType.COUNT),
    ),
)

DASHBOARD = EntityType(
    name="dashboard",
    searchable_fields=(
        SearchableField("urn", FieldType.URN),
        SearchableField("name", FieldType.KEYWORD),
        SearchableField("title", FieldType.TEXT, query_by_default=True),
        SearchableField("tool", FieldType.KEYWORD),
        SearchableField("removed", FieldType.BOOLEAN),
    ),
)

# 2026-01-01 12:00 UTC
FROZEN_EPOCH_MS = 1_767_268_800_000


def make_hit(
    urn: object = "urn:li:dataset:1",
    *,
    score: float | None = 1.5,
    highlight: dict | None = None,
    matched_queries: list | None = None,
    fields: dict | None = None,
    sort: list | None = None,
    doc_id: str = "doc-1",
) -> dict:
    """Raw backend hit in JSON form."""
    hit: dict = {"_id": doc_id, "_score": score, "_source": {"urn": urn}}
    if highlight is not None:
        hit["highlight"] = highlight
    if matched_queries is not None:
        hit["matched_queries"] = matched_queries
    if fields is not None:
        hit["fields"] = fields
    if sort is not None:
        hit["sort"] = sort
    return hit


def make_response(hits: list[dict], total: int | None = None, **extra: object) -> dict:
    response: dict = {
        "hits": {
            "total": {"value": len(hits) if total is None else total, "relation": "eq"},
            "hits": hits,
        }
    }
    response.update(extra)
    return response
