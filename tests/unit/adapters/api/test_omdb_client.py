"""
Tests for OMDBClient - Rotten Tomatoes and Metacritic through OMDB.
"""

import httpx
import pytest
import respx

from ratings_wrapper.adapters.api.omdb_client import OMDBClient, parse_score
from ratings_wrapper.adapters.cache import TieredCache
from ratings_wrapper.core.entities import RatingSource
from ratings_wrapper.core.value_objects import FetchStatus, MediaRef, MediaType
from tests.fixtures.omdb_responses import (
    OMDB_INVALID_KEY_RESPONSE,
    OMDB_METASCORE_ONLY_RESPONSE,
    OMDB_MOVIE_RESPONSE,
    OMDB_NOT_FOUND_RESPONSE,
    OMDB_SERIES_WITHOUT_CRITICS_RESPONSE,
)

OMDB_URL = "https://www.omdbapi.com/"


@pytest.fixture
def omdb_client(memory_cache: TieredCache) -> OMDBClient:
    return OMDBClient(api_key="test_key", cache=memory_cache)


class TestParseScore:
    """Tests for parse_score()."""

    @pytest.mark.parametrize(
        "raw, expected",
        [("83%", 83.0), ("68/100", 68.0), ("7.5/10", 7.5), ("N/A", None), (None, None), ("", None)],
    )
    def test_parse_score(self, raw, expected):
        assert parse_score(raw) == expected


class TestOMDBParsePayload:
    """Tests for OMDBClient.parse_payload()."""

    def test_rt_and_mc_normalized(self):
        """RT 91% -> 9.1, MC 82/100 -> 8.2."""
        lookup = OMDBClient.parse_payload(OMDB_MOVIE_RESPONSE)

        values = {value.source: value.value for value in lookup.values}
        assert values == {RatingSource.OMDB_RT: 9.1, RatingSource.OMDB_MC: 8.2}
        assert all(value.origin == "omdb" for value in lookup.values)
        assert lookup.title == "The Shawshank Redemption"
        assert lookup.year == 1994

    def test_metascore_fallback(self):
        lookup = OMDBClient.parse_payload(OMDB_METASCORE_ONLY_RESPONSE)

        assert [v.source for v in lookup.values] == [RatingSource.OMDB_MC]
        assert lookup.values[0].value == 6.8

    def test_series_without_critics(self):
        """A series year range "2008–2013" keeps the first year."""
        lookup = OMDBClient.parse_payload(OMDB_SERIES_WITHOUT_CRITICS_RESPONSE)

        assert lookup.values == ()
        assert lookup.year == 2008


class TestOMDBFetch:
    """Tests for OMDBClient.fetch_by_canonical_id()."""

    def test_does_not_support_episodes(self, omdb_client: OMDBClient):
        assert not omdb_client.supports(MediaRef("tt0903747", MediaType.EPISODE, 1, 1))
        assert omdb_client.supports(MediaRef("tt0903747", MediaType.SERIES))

    @pytest.mark.asyncio
    @respx.mock
    async def test_fetch_movie(self, omdb_client: OMDBClient):
        route = respx.get(OMDB_URL).mock(return_value=httpx.Response(200, json=OMDB_MOVIE_RESPONSE))

        lookup = await omdb_client.fetch_by_canonical_id(MediaRef("tt0111161", MediaType.MOVIE))

        assert lookup.status is FetchStatus.FOUND
        assert len(lookup.values) == 2
        params = route.calls.last.request.url.params
        assert params["i"] == "tt0111161"
        assert params["apikey"] == "test_key"

    @pytest.mark.asyncio
    @respx.mock
    async def test_response_false_is_not_found_and_cached(self, omdb_client: OMDBClient):
        route = respx.get(OMDB_URL).mock(return_value=httpx.Response(200, json=OMDB_NOT_FOUND_RESPONSE))
        ref = MediaRef("tt0000001", MediaType.MOVIE)

        first = await omdb_client.fetch_by_canonical_id(ref)
        second = await omdb_client.fetch_by_canonical_id(ref)

        assert first.status is FetchStatus.NOT_FOUND
        assert second.status is FetchStatus.NOT_FOUND
        assert route.call_count == 1

    @pytest.mark.asyncio
    @respx.mock
    async def test_invalid_key_is_transient(self, omdb_client: OMDBClient):
        """An invalid key is not an absence: nothing is cached."""
        route = respx.get(OMDB_URL).mock(return_value=httpx.Response(200, json=OMDB_INVALID_KEY_RESPONSE))
        ref = MediaRef("tt0111161", MediaType.MOVIE)

        first = await omdb_client.fetch_by_canonical_id(ref)
        await omdb_client.fetch_by_canonical_id(ref)

        assert first.is_transient
        assert route.call_count == 2
