"""Config settings – Settings base class."""
from __future__ import annotations

import dataclasses
from typing import ClassVar


@dataclasses.dataclass(frozen=True)
class Settings:
    """Base class for 12-factor settings.

    Settings are frozen: a populated instance is built once at process start
    and passed explicitly to whatever needs it. Each field is read from the
    environment variable ``<_prefix>_<FIELD>``; see :meth:`env_key`.
    """

    _prefix: ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add cross-field validation."""

    @classmethod
    def env_key(cls, field_name: str) -> str:
        """``SearchConfiguration.env_key("max_agg_values") == "SEARCH_MAX_AGG_VALUES"``."""
        if not cls._prefix:
            return field_name.upper()
        return f"{cls._prefix}_{field_name}".upper()


__all__ = ["Settings"]
