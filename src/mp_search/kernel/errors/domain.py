"""Domain errors — invalid caller input."""

from __future__ import annotations

from typing import Any

from mp_search.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised when caller input violates a rule of the search domain."""

    default_code = "domain_error"


class ValidationError(DomainError):
    """Input data does not meet validation rules.

    ``errors`` is a list of field-level validation failures.
    """

    default_code = "validation_error"

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[dict[str, Any]] = errors or []

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["errors"] = self.errors
        return base


class InvalidKeepAliveError(ValidationError):
    """A keep-alive duration could not be parsed."""

    default_code = "invalid_keep_alive"

    def __init__(self, keep_alive: str, reason: str | None = None, **kwargs: Any) -> None:
        msg = f"Invalid keep-alive duration {keep_alive!r}"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg, errors=[{"field": "keep_alive", "value": keep_alive}], **kwargs)
        self.keep_alive = keep_alive


class InvalidScrollCursorError(ValidationError):
    """A scroll token is not a cursor produced by this library."""

    default_code = "invalid_scroll_cursor"

    def __init__(self, token: str, reason: str, **kwargs: Any) -> None:
        super().__init__(f"Invalid scroll cursor: {reason}", errors=[{"field": "scroll_id"}], **kwargs)
        self.token = token
        self.reason = reason


__all__ = [
    "DomainError",
    "InvalidKeepAliveError",
    "InvalidScrollCursorError",
    "ValidationError",
]
