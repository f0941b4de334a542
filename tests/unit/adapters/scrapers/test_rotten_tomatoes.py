"""
Tests du scraper Rotten Tomatoes.
"""

import httpx
import pytest
import respx

from ratings_wrapper.adapters.api.rate_limiter import ScrapingRateLimiter
from ratings_wrapper.adapters.scrapers import RottenTomatoesScraper, ScrapeParseError
from ratings_wrapper.core.value_objects import FetchStatus
from tests.fixtures.scraper_pages import (
    RT_PAGE_DOM_ONLY,
    RT_PAGE_WITH_RATING_LIST,
    RT_PAGE_WITH_JSON_LD,
    RT_PAGE_WITHOUT_SCORE,
)

BASE = "https://www.rottentomatoes.com/tv"


@pytest.fixture
def scraper(limiter: ScrapingRateLimiter) -> RottenTomatoesScraper:
    return RottenTomatoesScraper(limiter, retry_wait=0)


class TestRottenTomatoesUrls:
    """Tests de construction des URL candidates."""

    def test_candidates_with_year(self, scraper: RottenTomatoesScraper) -> None:
        assert scraper.candidate_urls("Breaking Bad", 2008) == [
            f"{BASE}/breaking_bad_2008",
            f"{BASE}/breaking_bad",
            f"{BASE}/breaking_bad_2008_2",
        ]

    def test_candidates_without_year(self, scraper: RottenTomatoesScraper) -> None:
        assert scraper.candidate_urls("Breaking Bad", None) == [f"{BASE}/breaking_bad"]


class TestRottenTomatoesParse:
    """Tests du parsing des pages."""

    def test_json_ld_first(self, scraper: RottenTomatoesScraper) -> None:
        """Les donnees structurees priment sur le DOM."""
        assert scraper.parse(RT_PAGE_WITH_JSON_LD) == (96.0, 97.0)

    def test_json_ld_rating_list(self, scraper: RottenTomatoesScraper) -> None:
        """aggregateRating sous forme de liste : le premier objet est retenu."""
        assert scraper.parse(RT_PAGE_WITH_RATING_LIST) == (90.0, 88.0)

    def test_dom_fallback(self, scraper: RottenTomatoesScraper) -> None:
        assert scraper.parse(RT_PAGE_DOM_ONLY) == (87.0, 79.0)

    def test_no_score_raises(self, scraper: RottenTomatoesScraper) -> None:
        with pytest.raises(ScrapeParseError):
            scraper.parse(RT_PAGE_WITHOUT_SCORE)


class TestRottenTomatoesScrape:
    """Tests de scrape()."""

    @pytest.mark.asyncio
    @respx.mock
    async def test_falls_back_to_next_candidate_on_404(
        self, scraper: RottenTomatoesScraper
    ) -> None:
        first = respx.get(f"{BASE}/breaking_bad_2008").mock(return_value=httpx.Response(404))
        second = respx.get(f"{BASE}/breaking_bad").mock(
            return_value=httpx.Response(200, text=RT_PAGE_WITH_JSON_LD)
        )

        result = await scraper.scrape("Breaking Bad", 2008)

        assert first.called and second.called
        assert result.status is FetchStatus.FOUND
        assert result.critics_score == 96.0
        assert result.url == f"{BASE}/breaking_bad"

    @pytest.mark.asyncio
    @respx.mock
    async def test_all_404_is_not_found(self, scraper: RottenTomatoesScraper) -> None:
        respx.get(url__startswith=BASE).mock(return_value=httpx.Response(404))

        result = await scraper.scrape("Unknown Show", 2020)

        assert result.status is FetchStatus.NOT_FOUND

    @pytest.mark.asyncio
    @respx.mock
    async def test_page_without_score_is_not_found(self, scraper: RottenTomatoesScraper) -> None:
        respx.get(url__startswith=BASE).mock(
            return_value=httpx.Response(200, text=RT_PAGE_WITHOUT_SCORE)
        )

        result = await scraper.scrape("Breaking Bad", None)

        assert result.status is FetchStatus.NOT_FOUND

    @pytest.mark.asyncio
    @respx.mock
    async def test_network_errors_only_is_transient(self, scraper: RottenTomatoesScraper) -> None:
        """Uniquement des erreurs reseau -> TRANSIENT, avec relances sur chaque URL."""
        route = respx.get(url__startswith=BASE).mock(side_effect=httpx.ConnectError("down"))

        result = await scraper.scrape("Breaking Bad", 2008)

        assert result.status is FetchStatus.TRANSIENT_ERROR
        # 3 URL candidates x (1 essai + 2 relances)
        assert route.call_count == 9

    @pytest.mark.asyncio
    @respx.mock
    async def test_retry_then_success(self, scraper: RottenTomatoesScraper) -> None:
        respx.get(f"{BASE}/breaking_bad").mock(
            side_effect=[
                httpx.ReadTimeout("slow"),
                httpx.Response(200, text=RT_PAGE_DOM_ONLY),
            ]
        )

        result = await scraper.scrape("Breaking Bad", None)

        assert result.status is FetchStatus.FOUND
        assert result.critics_score == 87.0

    @pytest.mark.asyncio
    async def test_without_title_is_not_found(self, scraper: RottenTomatoesScraper) -> None:
        result = await scraper.scrape(None)
        assert result.status is FetchStatus.NOT_FOUND

    @pytest.mark.asyncio
    @respx.mock
    async def test_queue_full_is_transient(
        self, scraper: RottenTomatoesScraper, limiter: ScrapingRateLimiter
    ) -> None:
        route = respx.get(url__startswith=BASE).mock(return_value=httpx.Response(404))
        limiter.state("rottenTomatoes").waiting = 50

        result = await scraper.scrape("Breaking Bad", 2008)

        assert result.status is FetchStatus.TRANSIENT_ERROR
        assert not route.called

    @pytest.mark.asyncio
    @respx.mock
    async def test_sends_browser_headers(self, scraper: RottenTomatoesScraper) -> None:
        route = respx.get(f"{BASE}/breaking_bad").mock(
            return_value=httpx.Response(200, text=RT_PAGE_WITH_JSON_LD)
        )

        await scraper.scrape("Breaking Bad", None)

        headers = route.calls.last.request.headers
        assert headers["Referer"] == "https://www.rottentomatoes.com"
        assert "Mozilla" in headers["User-Agent"]

    @pytest.mark.asyncio
    @respx.mock
    async def test_rating_list_page_is_found(self, scraper: RottenTomatoesScraper) -> None:
        respx.get(f"{BASE}/severance").mock(
            return_value=httpx.Response(200, text=RT_PAGE_WITH_RATING_LIST)
        )

        result = await scraper.scrape("Severance")

        assert result.status is FetchStatus.FOUND
        assert result.critics_score == 90.0
        assert result.audience_score == 88.0

    @pytest.mark.asyncio
    @respx.mock
    async def test_unexpected_parse_error_moves_to_next_candidate(
        self, scraper: RottenTomatoesScraper, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Une erreur imprevue du parsing est journalisee, la candidate suivante est essayee."""
        route = respx.get(url__startswith=BASE).mock(
            return_value=httpx.Response(200, text=RT_PAGE_WITH_JSON_LD)
        )

        def broken_parse(html: str):
            raise AttributeError("'list' object has no attribute 'get'")

        monkeypatch.setattr(scraper, "parse", broken_parse)

        result = await scraper.scrape("Breaking Bad", 2008)

        assert result.status is FetchStatus.NOT_FOUND
        assert route.call_count == 3
