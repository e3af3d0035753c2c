"""Search – one shared handler per ordered list of entity types."""
from __future__ import annotations

import threading
from typing import Any, Callable, Sequence

from mp_search.kernel.time import Clock
from mp_search.observability.logging import get_logger
from mp_search.observability.tracing import Tracer
from mp_search.search.configuration import CustomSearchConfiguration, SearchConfiguration
from mp_search.search.handler import SearchRequestHandler
from mp_search.search.schema import EntityType

__all__ = ["HandlerRegistry"]

logger = get_logger(__name__)

HandlerKey = tuple[EntityType, ...]


class HandlerRegistry:
    """Thread-safe cache of :class:`SearchRequestHandler` instances.

    The key is the ordered tuple of entity types, so ``[a, b]`` and ``[b, a]``
    get distinct handlers. Construction happens at most once per key: lookups
    are lock-free once a handler exists, and a miss takes the registry lock
    and checks again before building.

    The configuration is read only when a key is first built; later calls
    with a different configuration get the existing handler. There is no
    module-level instance; the application owns the registry and passes it
    (or the handlers it returns) to the code that needs them.

    Example::

        registry = HandlerRegistry()
        handler = registry.get_handler([DATASET, DASHBOARD], config)
        assert handler is registry.get_handler([DATASET, DASHBOARD], config)
    """

    def __init__(
        self,
        *,
        clock: Clock | None = None,
        tracer: Tracer | None = None,
        handler_factory: Callable[..., SearchRequestHandler] = SearchRequestHandler,
        **handler_kwargs: Any,
    ) -> None:
        self._handlers: dict[HandlerKey, SearchRequestHandler] = {}
        self._lock = threading.Lock()
        self._factory = handler_factory
        self._handler_kwargs: dict[str, Any] = dict(handler_kwargs)
        if clock is not None:
            self._handler_kwargs["clock"] = clock
        if tracer is not None:
            self._handler_kwargs["tracer"] = tracer

    def get_handler(
        self,
        entity_types: Sequence[EntityType],
        config: SearchConfiguration,
        custom_config: CustomSearchConfiguration | None = None,
    ) -> SearchRequestHandler:
        key: HandlerKey = tuple(entity_types)
        handler = self._handlers.get(key)
        if handler is not None:
            return handler
        with self._lock:
            handler = self._handlers.get(key)
            if handler is None:
                handler = self._factory(key, config, custom_config, **self._handler_kwargs)
                self._handlers[key] = handler
                logger.info(
                    "search.handler.created",
                    entity_types=[entity_type.name for entity_type in key],
                    default_fields=sorted(handler.default_query_field_names),
                )
        return handler

    def __len__(self) -> int:
        return len(self._handlers)

    def __contains__(self, entity_types: object) -> bool:
        if not isinstance(entity_types, (list, tuple)):
            return False
        return tuple(entity_types) in self._handlers

    def clear(self) -> None:
        with self._lock:
            self._handlers.clear()
