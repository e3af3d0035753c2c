"""Config settings – SettingsFactory."""
from __future__ import annotations

import dataclasses
from typing import Any, Sequence, TypeVar

from mp_search.config.settings.base import Settings
from mp_search.config.settings.loaders import EnvSettingsLoader, SettingsLoader
from mp_search.kernel.errors import ConfigError, MissingRequiredSettingError
from mp_search.observability.logging import get_logger

T = TypeVar("T", bound=Settings)

logger = get_logger(__name__)


def _has_default(field: dataclasses.Field) -> bool:  # type: ignore[type-arg]
    return not (
        field.default is dataclasses.MISSING
        and field.default_factory is dataclasses.MISSING  # type: ignore[misc]
    )


class SettingsFactory:
    """Build one settings object from several sources.

    Sources are applied in order, later ones winning per field, and
    *overrides* win over all of them. A source that raises ``ConfigError``
    is logged (``settings.loader_skipped``) and ignored, so a broken
    ``.env`` file does not hide values that the process environment provides.
    Without *loaders* only the process environment is read.

    Example::

        config = SettingsFactory.create(
            SearchConfiguration,
            [EnvSettingsLoader(), DotenvSettingsLoader("search.env")],
            overrides={"max_agg_values": 50},
        )
    """

    @staticmethod
    def create(
        settings_cls: type[T],
        loaders: Sequence[SettingsLoader] | None = None,
        overrides: dict[str, Any] | None = None,
    ) -> T:
        """
        Raises
        ------
        MissingRequiredSettingError
            A field without a default was supplied by no source.
        ConfigError
            The merged values were rejected, either by the settings class
            ``_validate`` hook or because a key is not a field.
        """
        merged: dict[str, Any] = {}

        for loader in loaders if loaders is not None else [EnvSettingsLoader()]:
            try:
                instance = loader.load(settings_cls)
            except ConfigError as exc:
                logger.warning(
                    "settings.loader_skipped",
                    loader=type(loader).__name__,
                    **exc.log_fields(),
                )
                continue
            merged.update(
                (field.name, getattr(instance, field.name))
                for field in dataclasses.fields(instance)  # type: ignore[arg-type]
            )

        merged.update(overrides or {})

        for field in dataclasses.fields(settings_cls):  # type: ignore[arg-type]
            if field.name not in merged and not _has_default(field):
                raise MissingRequiredSettingError(field.name)

        try:
            return settings_cls(**merged)
        except ConfigError:
            raise
        except TypeError as exc:
            raise ConfigError(f"Failed to construct {settings_cls.__name__}: {exc}", cause=exc) from exc


__all__ = ["SettingsFactory"]
