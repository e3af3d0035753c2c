"""Handler fixtures for search tests."""
from __future__ import annotations

import pytest
from search_fixtures import DATASET, FROZEN_EPOCH_MS

from mp_search.kernel.time import FrozenClock
from mp_search.search import SearchConfiguration, SearchRequestHandler


@pytest.fixture
def config() -> SearchConfiguration:
    return SearchConfiguration(default_facets=("platform", "origin"))


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock.at_epoch_millis(FROZEN_EPOCH_MS)


@pytest.fixture
def handler(config: SearchConfiguration, clock: FrozenClock) -> SearchRequestHandler:
    return SearchRequestHandler([DATASET], config, clock=clock)
