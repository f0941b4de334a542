"""
Tests de la configuration pydantic-settings.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from ratings_wrapper.config import Settings


class TestSettings:
    """Tests pour Settings."""

    def test_defaults(self, test_settings: Settings) -> None:
        assert test_settings.batch_concurrency == 10
        assert test_settings.consolidated_ttl_seconds == 86_400
        assert test_settings.source_ttl_seconds == 7 * 86_400
        assert test_settings.scrape_not_found_ttl_seconds == 86_400
        assert test_settings.scrape_max_concurrent == 3
        assert test_settings.memory_cache_eviction == "lru"
        assert test_settings.api_max_attempts == 2
        assert test_settings.api_retry_max_wait == 5

    def test_sources_disabled_without_keys(self, test_settings: Settings) -> None:
        assert not test_settings.tmdb_enabled
        assert not test_settings.omdb_enabled
        assert not test_settings.mal_enabled

    def test_env_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RATINGS_OMDB_API_KEY", "abc")
        monkeypatch.setenv("RATINGS_BATCH_CONCURRENCY", "20")

        settings = Settings(_env_file=None)

        assert settings.omdb_enabled
        assert settings.batch_concurrency == 20

    def test_home_is_expanded(self) -> None:
        settings = Settings(cache_dir="~/ratings-cache", _env_file=None)
        assert settings.cache_dir == Path.home() / "ratings-cache"

    def test_delay_range_is_checked(self) -> None:
        with pytest.raises(ValidationError):
            Settings(scrape_min_delay=3.0, scrape_max_delay=1.0, _env_file=None)

    def test_unknown_eviction_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(memory_cache_eviction="random", _env_file=None)
