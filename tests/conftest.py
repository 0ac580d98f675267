"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from random import Random
from typing import Generator

import pytest

from src.core.config import EngineSettings, get_settings
from src.db.memory_repository import InMemorySessionRepository


@pytest.fixture
def rng() -> Random:
    """Seeded random source: computer opponents become reproducible."""
    return Random(1234)


@pytest.fixture
def fast_settings() -> EngineSettings:
    """No thinking delay and a shallow search, so that service tests run quickly."""
    return EngineSettings(
        opponent_delay_seconds=0.0,
        chess_search_depth=2,
        checkers_search_depth=2,
        random_seed=7,
    )


@pytest.fixture
def repository() -> InMemorySessionRepository:
    return InMemorySessionRepository()


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Settings are cached per process: tests changing the environment must not leak into each other."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
