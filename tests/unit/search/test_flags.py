"""Unit tests for search flag resolution."""
from __future__ import annotations

import pytest

from mp_search.search import SearchConfiguration
from mp_search.search.flags import (
    EffectiveFlags,
    InputDependentDefaults,
    SearchFlags,
    is_match_all_input,
    resolve_flags,
)

DEFAULTS = SearchConfiguration().default_flags()


class TestGlobalDefaults:
    def test_configuration_defaults(self) -> None:
        assert DEFAULTS == EffectiveFlags(
            fulltext=False,
            max_agg_values=20,
            skip_cache=False,
            skip_aggregates=False,
            skip_highlighting=False,
            get_suggestions=False,
        )

    def test_no_caller_flags_uses_defaults(self) -> None:
        assert resolve_flags(None, "orders", DEFAULTS) == DEFAULTS


class TestResolutionOrder:
    def test_explicit_caller_value_wins(self) -> None:
        flags = resolve_flags(SearchFlags(fulltext=True, max_agg_values=5), "orders", DEFAULTS)
        assert flags.fulltext is True
        assert flags.max_agg_values == 5
        assert flags.skip_cache is False

    def test_explicit_false_is_not_unset(self) -> None:
        defaults = EffectiveFlags(skip_aggregates=True)
        flags = resolve_flags(SearchFlags(skip_aggregates=False), "orders", defaults)
        assert flags.skip_aggregates is False

    def test_match_all_input_skips_highlighting(self) -> None:
        assert resolve_flags(None, "*", DEFAULTS).skip_highlighting is True
        assert resolve_flags(None, "", DEFAULTS).skip_highlighting is True

    def test_caller_overrides_input_dependent_default(self) -> None:
        flags = resolve_flags(SearchFlags(skip_highlighting=False), "*", DEFAULTS)
        assert flags.skip_highlighting is False

    def test_suggestions_only_when_requested(self) -> None:
        assert resolve_flags(None, "orders", DEFAULTS).get_suggestions is False
        assert resolve_flags(SearchFlags(get_suggestions=True), "orders", DEFAULTS).get_suggestions is True

    def test_input_default_beats_global_default(self) -> None:
        defaults = EffectiveFlags(get_suggestions=True)
        assert resolve_flags(None, "", defaults).get_suggestions is False
        assert resolve_flags(None, "orders", defaults).get_suggestions is True

    def test_custom_policy(self) -> None:
        class AlwaysFulltext:
            def defaults_for(self, input_text: str | None) -> SearchFlags:
                return SearchFlags(fulltext=True)

        assert resolve_flags(None, "orders", DEFAULTS, AlwaysFulltext()).fulltext is True

    def test_caller_flags_not_mutated(self) -> None:
        caller = SearchFlags(fulltext=True)
        resolve_flags(caller, "*", DEFAULTS)
        assert caller == SearchFlags(fulltext=True)


class TestInputDependentDefaults:
    @pytest.mark.parametrize("text", [None, "", "   ", "*", " * "])
    def test_match_all_inputs(self, text: str | None) -> None:
        assert is_match_all_input(text)
        assert InputDependentDefaults().defaults_for(text).skip_highlighting is True

    def test_regular_input_sets_nothing(self) -> None:
        assert InputDependentDefaults().defaults_for("orders") == SearchFlags()
