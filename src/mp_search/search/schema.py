"""Search – entity type schema and the field maps derived from it."""
from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Iterable


class FieldType(str, Enum):
    """How a searchable field is indexed by the backend."""

    KEYWORD = "KEYWORD"
    TEXT = "TEXT"
    TEXT_PARTIAL = "TEXT_PARTIAL"
    BROWSE_PATH = "BROWSE_PATH"
    URN = "URN"
    URN_PARTIAL = "URN_PARTIAL"
    BOOLEAN = "BOOLEAN"
    COUNT = "COUNT"
    DATETIME = "DATETIME"
    DOUBLE = "DOUBLE"
    OBJECT = "OBJECT"


# Field types whose values are stored as analyzed text and need a ``.keyword``
# sub-field for exact matching.
ANALYZED_FIELD_TYPES = frozenset(
    {
        FieldType.TEXT,
        FieldType.TEXT_PARTIAL,
        FieldType.BROWSE_PATH,
        FieldType.URN,
        FieldType.URN_PARTIAL,
    }
)


@dataclasses.dataclass(frozen=True)
class SearchableField:
    """One searchable field descriptor of an entity type."""
    name: str
    field_type: FieldType
    query_by_default: bool = False
    boost_score: float = 1.0


@dataclasses.dataclass(frozen=True)
class EntityType:
    """A searchable entity kind (dataset, dashboard, ...) and its fields."""
    name: str
    searchable_fields: tuple[SearchableField, ...] = ()

    def searchable_field_types(self) -> dict[str, set[FieldType]]:
        types: dict[str, set[FieldType]] = {}
        for field in self.searchable_fields:
            types.setdefault(field.name, set()).add(field.field_type)
        return types


def merge_field_types(entity_types: Iterable[EntityType]) -> dict[str, frozenset[FieldType]]:
    """Union the per-entity field-type sets; a shared field keeps every type."""
    merged: dict[str, set[FieldType]] = {}
    for entity_type in entity_types:
        for name, types in entity_type.searchable_field_types().items():
            merged.setdefault(name, set()).update(types)
    return {name: frozenset(types) for name, types in merged.items()}


def default_query_field_names(
    entity_types: Iterable[EntityType], identifier_field: str
) -> frozenset[str]:
    """Fields queried and highlighted by default, always including *identifier_field*."""
    names = {
        field.name
        for entity_type in entity_types
        for field in entity_type.searchable_fields
        if field.query_by_default
    }
    names.add(identifier_field)
    return frozenset(names)


__all__ = [
    "ANALYZED_FIELD_TYPES",
    "EntityType",
    "FieldType",
    "SearchableField",
    "default_query_field_names",
    "merge_field_types",
]
