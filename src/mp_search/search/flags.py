"""Search – request flags and their resolution against defaults.

Resolution order, per field:

1. an explicit (non-``None``) value supplied by the caller;
2. an input-dependent default from :class:`InputDependentDefaults`;
3. the global default configured once at process start.
"""
from __future__ import annotations

import dataclasses
from typing import Protocol

__all__ = [
    "EffectiveFlags",
    "FlagPolicy",
    "InputDependentDefaults",
    "SearchFlags",
    "is_match_all_input",
    "resolve_flags",
]

_MATCH_ALL_INPUTS = frozenset({"", "*"})


def is_match_all_input(input_text: str | None) -> bool:
    """``True`` when *input_text* carries no query terms."""
    return input_text is None or input_text.strip() in _MATCH_ALL_INPUTS


@dataclasses.dataclass(frozen=True)
class SearchFlags:
    """Caller-supplied flags. ``None`` means "not set, use a default"."""
    fulltext: bool | None = None
    max_agg_values: int | None = None
    skip_cache: bool | None = None
    skip_aggregates: bool | None = None
    skip_highlighting: bool | None = None
    get_suggestions: bool | None = None


@dataclasses.dataclass(frozen=True)
class EffectiveFlags:
    """Fully resolved flags for one call."""
    fulltext: bool = False
    max_agg_values: int = 20
    skip_cache: bool = False
    skip_aggregates: bool = False
    skip_highlighting: bool = False
    get_suggestions: bool = False


class FlagPolicy(Protocol):
    """Port: defaults that depend on the search input."""

    def defaults_for(self, input_text: str | None) -> SearchFlags: ...


class InputDependentDefaults:
    """Default policy: nothing to highlight or suggest for a match-all input."""

    def defaults_for(self, input_text: str | None) -> SearchFlags:
        if is_match_all_input(input_text):
            return SearchFlags(skip_highlighting=True, get_suggestions=False)
        return SearchFlags()


def resolve_flags(
    caller_flags: SearchFlags | None,
    input_text: str | None,
    defaults: EffectiveFlags,
    policy: FlagPolicy | None = None,
) -> EffectiveFlags:
    caller = caller_flags or SearchFlags()
    input_defaults = (policy or InputDependentDefaults()).defaults_for(input_text)
    resolved = {}
    for field in dataclasses.fields(EffectiveFlags):
        value = getattr(caller, field.name)
        if value is None:
            value = getattr(input_defaults, field.name)
        if value is None:
            value = getattr(defaults, field.name)
        resolved[field.name] = value
    return EffectiveFlags(**resolved)
