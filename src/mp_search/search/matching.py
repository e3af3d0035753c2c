"""Search – reconcile highlight and exact-match evidence into matched fields.

Two kinds of evidence explain why a hit matched:

* highlight fragments, keyed by the (sub-)field that produced them,
  e.g. ``title.delimited``;
* named queries that matched, for non-analyzed fields that cannot be
  highlighted, with the value taken from the hit's stored fields.

Both collapse into one set of ``(field, value)`` pairs per hit.
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping

from mp_search.search.results import MatchedField, RawHit, SearchSuggestion

__all__ = [
    "NAME_SUGGESTION",
    "SEARCH_BACKEND_SCORE",
    "extract_features",
    "extract_matched_fields",
    "extract_suggestions",
    "resolve_base_field_name",
]

NAME_SUGGESTION = "name_suggestion"
SEARCH_BACKEND_SCORE = "SEARCH_BACKEND_SCORE"

# Value recorded for a named query that matched on a field with no stored value.
NO_VALUE = ""


def resolve_base_field_name(key: str, known_fields: Iterable[str]) -> str | None:
    """Return the known field that *key* belongs to, by prefix.

    ``title.delimited`` belongs to ``title``. Candidates are tried longest
    first so the most specific known field wins; ``None`` if nothing matches.
    """
    for name in sorted(known_fields, key=lambda n: (-len(n), n)):
        if key.startswith(name):
            return name
    return None


def extract_matched_fields(hit: RawHit, known_fields: Iterable[str]) -> frozenset[MatchedField]:
    known = tuple(known_fields)
    values_by_field: dict[str, set[str]] = {}

    for key, fragments in hit.highlight.items():
        base = resolve_base_field_name(key, known)
        if base is None:
            continue
        values_by_field.setdefault(base, set()).update(str(fragment) for fragment in fragments)

    for query_name in hit.matched_queries:
        if query_name in values_by_field:
            continue
        stored = hit.fields.get(query_name)
        if stored:
            values_by_field[query_name] = {str(value) for value in stored}
        else:
            values_by_field[query_name] = {NO_VALUE}

    return frozenset(
        MatchedField(name=name, value=value)
        for name, values in values_by_field.items()
        for value in values
    )


def extract_features(hit: RawHit) -> dict[str, float]:
    return {SEARCH_BACKEND_SCORE: float(hit.score)}


def extract_suggestions(suggest: Mapping[str, Any] | None) -> list[SearchSuggestion]:
    """Options of the first ``name_suggestion`` entry; empty when absent."""
    if not suggest:
        return []
    entries = suggest.get(NAME_SUGGESTION) or []
    if not entries:
        return []
    return [
        SearchSuggestion(
            text=str(option.get("text", "")),
            frequency=int(option.get("freq", 0)),
            score=float(option.get("score", 0.0)),
        )
        for option in entries[0].get("options") or []
    ]
