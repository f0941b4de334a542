"""
Fixtures pytest partagees pour les tests ratings-wrapper.

Ce module contient les fixtures communes utilisees dans les tests:
- Horloge et sommeil factices (temps controle par le test)
- Cache memoire et collecteur de metriques
- Base SQLite temporaire
- Settings de test avec chemins temporaires
"""

from collections.abc import Callable
from pathlib import Path

import pytest
from sqlmodel import Session

from ratings_wrapper.adapters.cache import MemoryCacheTier, TieredCache
from ratings_wrapper.adapters.metrics import InMemoryMetrics
from ratings_wrapper.config import Settings
from ratings_wrapper.infrastructure.persistence.database import (
    create_db_engine,
    init_db,
    make_session_factory,
)
from tests.fixtures.clock import FakeClock


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def metrics() -> InMemoryMetrics:
    return InMemoryMetrics()


@pytest.fixture
def memory_cache(clock: FakeClock, metrics: InMemoryMetrics) -> TieredCache:
    """Cache a un seul niveau (memoire) pilote par l'horloge factice."""
    return TieredCache(MemoryCacheTier(max_entries=1000), clock=clock, metrics=metrics)


@pytest.fixture
def session_factory(tmp_path: Path) -> Callable[[], Session]:
    """Base SQLite temporaire avec toutes les tables creees."""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'ratings.db'}")
    init_db(engine)
    yield make_session_factory(engine)
    engine.dispose()


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings de test avec chemins temporaires et sans cles API.
    """
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'ratings.db'}",
        cache_dir=tmp_path / "cache",
        log_file=tmp_path / "logs" / "ratings.log",
        tmdb_api_key=None,
        omdb_api_key=None,
        mal_client_id=None,
        _env_file=None,
    )
