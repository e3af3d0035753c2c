"""Search – process-wide configuration values."""
from __future__ import annotations

import dataclasses
from typing import Any, ClassVar

from mp_search.config.settings import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    Settings,
    SettingsFactory,
    SettingsLoader,
)
from mp_search.kernel.errors import InvalidSettingValueError
from mp_search.search.flags import EffectiveFlags


@dataclasses.dataclass(frozen=True)
class SearchConfiguration(Settings):
    """Global search defaults, loaded once from ``SEARCH_*`` variables.

    The flag fields are the global defaults applied when neither the caller
    nor the input-dependent policy sets a flag.
    """

    _prefix: ClassVar[str] = "SEARCH"

    fulltext: bool = False
    max_agg_values: int = 20
    skip_cache: bool = False
    skip_aggregates: bool = False
    skip_highlighting: bool = False
    get_suggestions: bool = False
    identifier_field: str = "urn"
    soft_delete_field: str = "removed"
    name_suggestion_field: str = "name"
    default_facets: tuple[str, ...] = ()

    def _validate(self) -> None:
        if self.max_agg_values < 1:
            raise InvalidSettingValueError("max_agg_values", self.max_agg_values, "must be >= 1")
        if not self.identifier_field:
            raise InvalidSettingValueError("identifier_field", self.identifier_field, "must not be empty")
        if not self.soft_delete_field:
            raise InvalidSettingValueError("soft_delete_field", self.soft_delete_field, "must not be empty")

    @classmethod
    def load(cls, env_file: str | None = None, **overrides: Any) -> "SearchConfiguration":
        """Read ``SEARCH_*`` variables, then *env_file* if given, then *overrides*."""
        loaders: list[SettingsLoader] = [EnvSettingsLoader()]
        if env_file is not None:
            loaders.append(DotenvSettingsLoader(env_file, override=True))
        return SettingsFactory.create(cls, loaders, overrides)

    def default_flags(self) -> EffectiveFlags:
        return EffectiveFlags(
            fulltext=self.fulltext,
            max_agg_values=self.max_agg_values,
            skip_cache=self.skip_cache,
            skip_aggregates=self.skip_aggregates,
            skip_highlighting=self.skip_highlighting,
            get_suggestions=self.get_suggestions,
        )


@dataclasses.dataclass(frozen=True)
class QueryFieldOverride:
    """An extra field (with boost) added to every text query."""
    name: str
    boost: float = 1.0


@dataclasses.dataclass(frozen=True)
class CustomSearchConfiguration:
    """Per-registry tweaks to text-query construction."""
    extra_query_fields: tuple[QueryFieldOverride, ...] = ()
    exact_match_boost: float = 10.0


__all__ = ["CustomSearchConfiguration", "QueryFieldOverride", "SearchConfiguration"]
