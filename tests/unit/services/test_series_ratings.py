"""
Tests du service de notes de series par scraping.
"""

from collections.abc import Callable

import httpx
import pytest
import respx
from sqlmodel import Session

from ratings_wrapper.adapters.api.rate_limiter import ScrapingRateLimiter
from ratings_wrapper.adapters.cache import TieredCache
from ratings_wrapper.adapters.scrapers import MetacriticScraper, RottenTomatoesScraper
from ratings_wrapper.core.entities import RatingSource
from ratings_wrapper.core.value_objects import MediaRef, MediaType
from ratings_wrapper.infrastructure.persistence.repositories import (
    SQLModelScrapeRecordRepository,
)
from ratings_wrapper.services.series_ratings import SeriesRatingsService
from tests.fixtures.clock import FakeClock
from tests.fixtures.scraper_pages import MC_PAGE_WITH_JSON_LD, RT_PAGE_WITH_JSON_LD

RT = "https://www.rottentomatoes.com/tv"
MC = "https://www.metacritic.com/tv"
REF = MediaRef("tt0903747", MediaType.SERIES)


@pytest.fixture
def repository(session_factory: Callable[[], Session]) -> SQLModelScrapeRecordRepository:
    return SQLModelScrapeRecordRepository(session_factory)


@pytest.fixture
def service(
    memory_cache: TieredCache, repository: SQLModelScrapeRecordRepository
) -> SeriesRatingsService:
    limiter = ScrapingRateLimiter(poll_interval=0.01)
    limiter.register("rottenTomatoes", min_delay=0.0, max_delay=0.0)
    limiter.register("metacritic", min_delay=0.0, max_delay=0.0)
    return SeriesRatingsService(
        cache=memory_cache,
        scrapers=[
            RottenTomatoesScraper(limiter, retry_wait=0),
            MetacriticScraper(limiter, retry_wait=0),
        ],
        record_repository=repository,
    )


class TestSeriesRatingsService:
    """Tests pour SeriesRatingsService.get_series_ratings()."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_both_sites_found(
        self, service: SeriesRatingsService, repository: SQLModelScrapeRecordRepository
    ) -> None:
        """Les notes critiques sont normalisees et l'historique est mis a jour."""
        respx.get(f"{RT}/breaking_bad_2008").mock(
            return_value=httpx.Response(200, text=RT_PAGE_WITH_JSON_LD)
        )
        respx.get(f"{MC}/breaking-bad").mock(
            return_value=httpx.Response(200, text=MC_PAGE_WITH_JSON_LD)
        )

        result = await service.get_series_ratings(REF, "Breaking Bad", 2008)

        values = {value.source: value for value in result.values}
        assert values[RatingSource.OMDB_RT].value == 9.6
        assert values[RatingSource.OMDB_MC].value == 8.7
        assert all(value.origin == "scraper" for value in result.values)
        assert not result.transient
        record = repository.get("tt0903747", "rottenTomatoes")
        assert record.failed_count == 0
        assert record.last_score == 96.0

    @pytest.mark.asyncio
    @respx.mock
    async def test_all_404_increments_failure_counter(
        self, service: SeriesRatingsService, repository: SQLModelScrapeRecordRepository
    ) -> None:
        """Toutes les URL en 404 -> absence, compteur d'echecs +1, rien d'autre."""
        respx.get(url__startswith=RT).mock(return_value=httpx.Response(404))

        result = await service.get_series_ratings(
            REF, "Breaking Bad", 2008, want_rt=True, want_mc=False
        )

        assert result.values == ()
        assert not result.transient
        assert repository.get("tt0903747", "rottenTomatoes").failed_count == 1
        assert repository.get("tt0903747", "metacritic") is None

    @pytest.mark.asyncio
    @respx.mock
    async def test_not_found_is_cached_for_a_day(
        self, service: SeriesRatingsService, clock: FakeClock
    ) -> None:
        route = respx.get(url__startswith=RT).mock(return_value=httpx.Response(404))

        await service.get_series_ratings(REF, "Breaking Bad", None, want_mc=False)
        await service.get_series_ratings(REF, "Breaking Bad", None, want_mc=False)
        assert route.call_count == 1

        clock.advance(86_401)
        await service.get_series_ratings(REF, "Breaking Bad", None, want_mc=False)
        assert route.call_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_repeated_exhaustion_increments_by_one(
        self,
        service: SeriesRatingsService,
        repository: SQLModelScrapeRecordRepository,
        clock: FakeClock,
    ) -> None:
        """Apres expiration de l'absence, un nouvel echec fait passer le compteur de 1 a 2."""
        route = respx.get(url__startswith=RT).mock(return_value=httpx.Response(404))

        await service.get_series_ratings(REF, "Breaking Bad", 2008, want_mc=False)
        assert repository.get("tt0903747", "rottenTomatoes").failed_count == 1
        calls_after_first = route.call_count

        clock.advance(86_401)
        await service.get_series_ratings(REF, "Breaking Bad", 2008, want_mc=False)

        assert route.call_count == 2 * calls_after_first
        assert repository.get("tt0903747", "rottenTomatoes").failed_count == 2

    @pytest.mark.asyncio
    @respx.mock
    async def test_network_failure_is_transient_and_not_recorded(
        self, service: SeriesRatingsService, repository: SQLModelScrapeRecordRepository
    ) -> None:
        respx.get(url__startswith=RT).mock(side_effect=httpx.ConnectError("down"))

        result = await service.get_series_ratings(REF, "Breaking Bad", None, want_mc=False)

        assert result.transient
        assert repository.get("tt0903747", "rottenTomatoes") is None

    @pytest.mark.asyncio
    async def test_without_title_skips_scraping(self, service: SeriesRatingsService) -> None:
        with respx.mock(assert_all_called=False) as router:
            result = await service.get_series_ratings(REF, None)
        assert result.values == ()
        assert not result.transient
        assert router.calls.call_count == 0
