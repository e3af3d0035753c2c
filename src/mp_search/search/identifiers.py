"""Search – document identifier parsing."""
from __future__ import annotations

import re
from typing import Any, Callable

__all__ = ["IdentifierParser", "parse_plain_identifier", "parse_urn"]

IdentifierParser = Callable[[Any], str]

# urn:<namespace>:<entity type>:<key>
_URN_RE = re.compile(r"^urn:[A-Za-z0-9][A-Za-z0-9-]*:[A-Za-z][A-Za-z0-9_]*:\S.*$")


def parse_urn(raw: Any) -> str:
    if not isinstance(raw, str):
        raise ValueError(f"urn must be a string, got {type(raw).__name__}")
    if not _URN_RE.match(raw):
        raise ValueError(f"malformed urn {raw!r}")
    return raw


def parse_plain_identifier(raw: Any) -> str:
    if isinstance(raw, bool) or not isinstance(raw, (str, int)):
        raise ValueError(f"identifier must be a string or integer, got {type(raw).__name__}")
    value = str(raw)
    if not value.strip():
        raise ValueError("identifier is blank")
    return value
