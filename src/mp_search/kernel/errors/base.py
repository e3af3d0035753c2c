"""Root error class for the mp-search error hierarchy."""

from __future__ import annotations

import json
from typing import Any


class BaseError(Exception):
    """Root of the error hierarchy.

    Every error carries a stable ``code`` that callers can branch on without
    parsing messages, and a ``detail`` dict with the offending values
    (a cursor token, a setting name, a document id).

    Args:
        message: Human-readable description.
        code: Machine-readable slug (defaults to the class ``default_code``).
        detail: Extra context; must be JSON-friendly or ``str()``-able.
        cause: Original exception that triggered this error.
    """

    default_code: str = "base_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail: dict[str, Any] = detail or {}
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, default=str)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "detail": self.detail,
        }
        if self.cause is not None:
            payload["cause"] = repr(self.cause)
        return payload

    def log_fields(self) -> dict[str, Any]:
        """Flat key/values for a structlog event: ``logger.warning("x", **err.log_fields())``."""
        fields: dict[str, Any] = {"error_code": self.code, "error": self.message}
        for key, value in self.detail.items():
            fields.setdefault(key, value)
        return fields


__all__ = ["BaseError"]
