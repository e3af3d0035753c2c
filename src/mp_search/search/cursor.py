"""Search – self-contained scroll cursor.

The token is this library's own envelope (url-safe base64 of compact JSON)
and never depends on a backend's native pagination token format. Nothing is
persisted server side: everything needed for the next page is in the token.
"""
from __future__ import annotations

import base64
import binascii
import dataclasses
import json
from typing import Any

from mp_search.kernel.errors import InvalidScrollCursorError

__all__ = ["ScrollCursor"]

_SORT_KEY = "sort"
_SESSION_KEY = "pitId"
_EXPIRATION_KEY = "expirationTime"
_SCALARS = (str, int, float, bool, type(None))


@dataclasses.dataclass(frozen=True)
class ScrollCursor:
    """Position after the last hit of a page.

    Sort values are JSON scalars, as the backend returns them, so a decoded
    cursor equals the one that was encoded.
    """

    sort_values: tuple[Any, ...]
    session_id: str | None = None
    expires_at_epoch_ms: int = 0

    def __post_init__(self) -> None:
        if not self.sort_values:
            raise ValueError("sort_values must not be empty")
        if not all(isinstance(value, _SCALARS) for value in self.sort_values):
            raise ValueError("sort_values must be JSON scalars")

    def is_expired(self, now_epoch_ms: int) -> bool:
        """``False`` when the cursor carries no expiration (``0``)."""
        return self.expires_at_epoch_ms > 0 and now_epoch_ms >= self.expires_at_epoch_ms

    def encode(self) -> str:
        payload = {
            _SORT_KEY: list(self.sort_values),
            _SESSION_KEY: self.session_id,
            _EXPIRATION_KEY: self.expires_at_epoch_ms,
        }
        raw = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
        return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii")

    @classmethod
    def decode(cls, token: str) -> "ScrollCursor":
        try:
            raw = base64.urlsafe_b64decode(token.encode("ascii"))
            payload = json.loads(raw.decode("utf-8"))
        except (binascii.Error, UnicodeError, ValueError) as exc:
            raise InvalidScrollCursorError(token, "not a valid encoded cursor", cause=exc) from exc

        if not isinstance(payload, dict):
            raise InvalidScrollCursorError(token, "payload is not an object")
        sort_values = payload.get(_SORT_KEY)
        if not isinstance(sort_values, list) or not sort_values:
            raise InvalidScrollCursorError(token, "missing sort values")
        if not all(isinstance(value, _SCALARS) for value in sort_values):
            raise InvalidScrollCursorError(token, "sort values must be scalars")
        session_id = payload.get(_SESSION_KEY)
        if session_id is not None and not isinstance(session_id, str):
            raise InvalidScrollCursorError(token, "session id must be a string")
        expires_at = payload.get(_EXPIRATION_KEY, 0)
        if isinstance(expires_at, bool) or not isinstance(expires_at, int):
            raise InvalidScrollCursorError(token, "expiration must be an integer")
        return cls(tuple(sort_values), session_id, expires_at)
