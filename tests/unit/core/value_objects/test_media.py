"""
Tests des objets valeur de media et de cache.
"""

import pytest

from ratings_wrapper.core.value_objects import (
    CacheEntry,
    CacheLookup,
    FetchOutcome,
    FetchStatus,
    MediaRef,
    MediaType,
)


class TestMediaRef:
    """Tests pour MediaRef."""

    def test_movie_cache_key(self) -> None:
        ref = MediaRef("tt0111161", MediaType.MOVIE)
        assert ref.cache_key == "tt0111161"
        assert ref.has_imdb_id
        assert not ref.is_episode

    def test_episode_cache_key(self) -> None:
        ref = MediaRef("tt0944947", MediaType.EPISODE, season=1, episode=2)
        assert ref.cache_key == "tt0944947:1:2"
        assert ref.is_episode

    def test_mal_only_reference(self) -> None:
        ref = MediaRef("mal:40028", MediaType.SERIES, mal_id="40028")
        assert not ref.has_imdb_id


class TestCacheEntry:
    """Tests pour CacheEntry."""

    def test_expiry_is_strict(self) -> None:
        """Une entree reste valide a expires_at exactement."""
        entry = CacheEntry("k", 1, fetched_at=100.0, expires_at=160.0)
        assert not entry.is_expired(160.0)
        assert entry.is_expired(160.001)

    def test_expires_at_must_follow_fetched_at(self) -> None:
        with pytest.raises(ValueError):
            CacheEntry("k", 1, fetched_at=100.0, expires_at=100.0)

    def test_lookup_from_negative_entry(self) -> None:
        entry = CacheEntry("k", None, 0.0, 10.0, is_negative=True)
        lookup = CacheLookup.hit(entry)
        assert lookup.found and lookup.negative
        assert not lookup.has_value


class TestFetchOutcome:
    """Tests pour FetchOutcome."""

    def test_constructors(self) -> None:
        assert FetchOutcome.found(1).is_found
        assert FetchOutcome.not_found("x").status is FetchStatus.NOT_FOUND
        assert FetchOutcome.transient("timeout").is_transient
        assert not FetchOutcome.not_found().is_transient
