"""Unit tests for settings loading applied to SearchConfiguration."""
from __future__ import annotations

import dataclasses
from pathlib import Path
from typing import ClassVar

import pytest

from mp_search.config import (
    ConfigError,
    DotenvSettingsLoader,
    EnvSettingsLoader,
    InvalidSettingValueError,
    MissingRequiredSettingError,
    Settings,
    SettingsFactory,
)
from mp_search.search import SearchConfiguration


@dataclasses.dataclass(frozen=True)
class BackendSettings(Settings):
    _prefix: ClassVar[str] = "BACKEND"
    index: str  # required
    timeout_seconds: float = 5.0


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for field in dataclasses.fields(SearchConfiguration):
        monkeypatch.delenv(f"SEARCH_{field.name}".upper(), raising=False)
    monkeypatch.delenv("BACKEND_INDEX", raising=False)
    monkeypatch.delenv("BACKEND_TIMEOUT_SECONDS", raising=False)


# ---------------------------------------------------------------------------
# SearchConfiguration
# ---------------------------------------------------------------------------


class TestSearchConfiguration:
    def test_defaults(self) -> None:
        config = SearchConfiguration()
        assert config.max_agg_values == 20
        assert config.identifier_field == "urn"
        assert config.soft_delete_field == "removed"
        assert config.default_facets == ()

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            SearchConfiguration().fulltext = True  # type: ignore[misc]

    def test_default_flags(self) -> None:
        flags = SearchConfiguration(fulltext=True, max_agg_values=7).default_flags()
        assert flags.fulltext is True
        assert flags.max_agg_values == 7
        assert flags.skip_highlighting is False

    @pytest.mark.parametrize(
        "kwargs",
        [{"max_agg_values": 0}, {"identifier_field": ""}, {"soft_delete_field": ""}],
    )
    def test_invalid_values(self, kwargs: dict) -> None:
        with pytest.raises(InvalidSettingValueError):
            SearchConfiguration(**kwargs)


class TestEnvSettingsLoader:
    def test_env_key(self) -> None:
        assert SearchConfiguration.env_key("max_agg_values") == "SEARCH_MAX_AGG_VALUES"
        assert Settings.env_key("debug") == "DEBUG"

    def test_defaults_when_env_absent(self) -> None:
        assert EnvSettingsLoader().load(SearchConfiguration) == SearchConfiguration()

    def test_prefixed_variables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SEARCH_FULLTEXT", "true")
        monkeypatch.setenv("SEARCH_MAX_AGG_VALUES", "50")
        monkeypatch.setenv("SEARCH_DEFAULT_FACETS", "platform, origin")
        config = EnvSettingsLoader().load(SearchConfiguration)
        assert config.fulltext is True
        assert config.max_agg_values == 50
        assert config.default_facets == ("platform", "origin")

    def test_uncoercible_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SEARCH_MAX_AGG_VALUES", "many")
        with pytest.raises(InvalidSettingValueError) as exc_info:
            EnvSettingsLoader().load(SearchConfiguration)
        assert exc_info.value.setting_name == "SEARCH_MAX_AGG_VALUES"

    def test_rejected_by_validation(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SEARCH_MAX_AGG_VALUES", "0")
        with pytest.raises(InvalidSettingValueError):
            EnvSettingsLoader().load(SearchConfiguration)

    def test_missing_required(self) -> None:
        with pytest.raises(MissingRequiredSettingError) as exc_info:
            EnvSettingsLoader().load(BackendSettings)
        assert exc_info.value.setting_name == "BACKEND_INDEX"

    def test_float_coercion(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("BACKEND_INDEX", "datasets")
        monkeypatch.setenv("BACKEND_TIMEOUT_SECONDS", "2.5")
        settings = EnvSettingsLoader().load(BackendSettings)
        assert settings.timeout_seconds == 2.5


class TestDotenvSettingsLoader:
    def test_reads_env_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("SEARCH_SKIP_AGGREGATES=yes\nSEARCH_IDENTIFIER_FIELD=id\n")
        # registered with monkeypatch so teardown removes what the file sets
        monkeypatch.setenv("SEARCH_SKIP_AGGREGATES", "no")
        monkeypatch.setenv("SEARCH_IDENTIFIER_FIELD", "urn")
        config = DotenvSettingsLoader(str(env_file), override=True).load(SearchConfiguration)
        assert config.skip_aggregates is True
        assert config.identifier_field == "id"

    def test_existing_env_wins_without_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        env_file = tmp_path / ".env"
        env_file.write_text("SEARCH_MAX_AGG_VALUES=99\n")
        monkeypatch.setenv("SEARCH_MAX_AGG_VALUES", "30")
        config = DotenvSettingsLoader(str(env_file)).load(SearchConfiguration)
        assert config.max_agg_values == 30


class TestSettingsFactory:
    def test_overrides_win(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SEARCH_MAX_AGG_VALUES", "50")
        config = SettingsFactory.create(
            SearchConfiguration, [EnvSettingsLoader()], overrides={"max_agg_values": 10}
        )
        assert config.max_agg_values == 10

    def test_failing_loader_is_skipped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SEARCH_MAX_AGG_VALUES", "many")
        config = SettingsFactory.create(SearchConfiguration, [EnvSettingsLoader()])
        assert config.max_agg_values == 20

    def test_required_field_missing(self) -> None:
        with pytest.raises(MissingRequiredSettingError):
            SettingsFactory.create(BackendSettings, [EnvSettingsLoader()])

    def test_required_field_from_overrides(self) -> None:
        settings = SettingsFactory.create(BackendSettings, overrides={"index": "datasets"})
        assert settings.index == "datasets"

    def test_invalid_override_is_config_error(self) -> None:
        with pytest.raises(ConfigError):
            SettingsFactory.create(SearchConfiguration, overrides={"max_agg_values": 0})

    def test_unknown_override_is_config_error(self) -> None:
        with pytest.raises(ConfigError):
            SettingsFactory.create(SearchConfiguration, overrides={"nope": 1})


class TestSearchConfigurationLoad:
    def test_environment_then_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SEARCH_MAX_AGG_VALUES", "40")
        monkeypatch.setenv("SEARCH_GET_SUGGESTIONS", "on")
        config = SearchConfiguration.load(fulltext=True)
        assert config.max_agg_values == 40
        assert config.get_suggestions is True
        assert config.fulltext is True

    def test_env_file_wins_over_environment(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        env_file = tmp_path / "search.env"
        env_file.write_text("SEARCH_DEFAULT_FACETS=platform,origin\n")
        monkeypatch.setenv("SEARCH_DEFAULT_FACETS", "tool")
        config = SearchConfiguration.load(str(env_file))
        assert config.default_facets == ("platform", "origin")
