"""Unit tests for HandlerRegistry."""
from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

from search_fixtures import DASHBOARD, DATASET

from mp_search.kernel.time import FrozenClock
from mp_search.search import HandlerRegistry, SearchConfiguration, SearchRequestHandler


class _CountingFactory:
    def __init__(self) -> None:
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self, *args, **kwargs) -> SearchRequestHandler:
        with self._lock:
            self.calls += 1
        return SearchRequestHandler(*args, **kwargs)


class TestHandlerRegistry:
    def test_same_key_same_instance(self, config: SearchConfiguration) -> None:
        registry = HandlerRegistry()
        first = registry.get_handler([DATASET, DASHBOARD], config)
        assert registry.get_handler((DATASET, DASHBOARD), config) is first

    def test_order_matters(self, config: SearchConfiguration) -> None:
        registry = HandlerRegistry()
        ab = registry.get_handler([DATASET, DASHBOARD], config)
        ba = registry.get_handler([DASHBOARD, DATASET], config)
        assert ab is not ba
        assert len(registry) == 2

    def test_config_read_only_on_first_build(self, config: SearchConfiguration) -> None:
        registry = HandlerRegistry()
        first = registry.get_handler([DATASET], config)
        other = SearchConfiguration(max_agg_values=5)
        assert registry.get_handler([DATASET], other) is first

    def test_contains_and_clear(self, config: SearchConfiguration) -> None:
        registry = HandlerRegistry()
        registry.get_handler([DATASET], config)
        assert [DATASET] in registry
        assert [DASHBOARD] not in registry
        assert "dataset" not in registry
        registry.clear()
        assert len(registry) == 0
        assert [DATASET] not in registry

    def test_clock_passed_to_handlers(self, config: SearchConfiguration, clock: FrozenClock) -> None:
        factory = _CountingFactory()
        registry = HandlerRegistry(clock=clock, handler_factory=factory)
        handler = registry.get_handler([DATASET], config)
        assert handler._clock is clock

    def test_concurrent_first_access_builds_once(self, config: SearchConfiguration) -> None:
        factory = _CountingFactory()
        registry = HandlerRegistry(handler_factory=factory)
        barrier = threading.Barrier(16)

        def fetch(_: int) -> SearchRequestHandler:
            barrier.wait()
            return registry.get_handler([DATASET, DASHBOARD], config)

        with ThreadPoolExecutor(max_workers=16) as pool:
            handlers = list(pool.map(fetch, range(16)))

        assert factory.calls == 1
        assert all(h is handlers[0] for h in handlers)

    def test_distinct_keys_under_contention(self, config: SearchConfiguration) -> None:
        factory = _CountingFactory()
        registry = HandlerRegistry(handler_factory=factory)
        keys = [[DATASET], [DASHBOARD], [DATASET, DASHBOARD], [DASHBOARD, DATASET]]

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(lambda i: registry.get_handler(keys[i % 4], config), range(64)))

        assert factory.calls == 4
        assert len(registry) == 4
