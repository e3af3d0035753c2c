"""Observability – structlog processors and get_logger helper."""
from __future__ import annotations

from typing import Any

import structlog


class SearchContextProcessor:
    """structlog processor that stamps every event with the search component.

    Usage::

        structlog.configure(processors=[SearchContextProcessor("catalog-api"), ...])
    """

    def __init__(self, service: str | None = None) -> None:
        self._service = service

    def __call__(
        self,
        logger: Any,           # noqa: ARG002
        method_name: str,      # noqa: ARG002
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        event_dict.setdefault("component", "mp_search")
        if self._service is not None:
            event_dict.setdefault("service", self._service)
        return event_dict


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a bound structlog logger.

    Parameters
    ----------
    name:
        Logger name (typically ``__name__`` of the calling module).
    **initial_values:
        Key-value pairs to bind on the returned logger.
    """
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


__all__ = ["SearchContextProcessor", "get_logger"]
