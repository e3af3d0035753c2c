"""Infrastructure errors — malformed payloads coming back from the backend."""

from __future__ import annotations

from typing import Any

from mp_search.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a caller input problem."""

    default_code = "infrastructure_error"


class SerializationError(InfrastructureError):
    """Failed to serialize or deserialize a payload."""

    default_code = "serialization_error"

    def __init__(
        self,
        message: str,
        *,
        payload_type: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.payload_type = payload_type


class CorruptedSearchDocumentError(SerializationError):
    """A returned hit has a missing or malformed document identifier.

    Fatal for the whole extraction call: the hit is never dropped or given a
    placeholder identifier.
    """

    default_code = "corrupted_search_document"

    def __init__(
        self,
        message: str,
        *,
        document_id: str | None = None,
        raw_identifier: Any = None,
        **kwargs: Any,
    ) -> None:
        detail = kwargs.pop("detail", None) or {}
        detail.setdefault("document_id", document_id)
        detail.setdefault("raw_identifier", raw_identifier)
        super().__init__(message, payload_type="search_hit", detail=detail, **kwargs)
        self.document_id = document_id
        self.raw_identifier = raw_identifier


__all__ = [
    "CorruptedSearchDocumentError",
    "InfrastructureError",
    "SerializationError",
]
