"""
Tests du repository SQLModel des historiques de scraping.
"""

from collections.abc import Callable

from sqlmodel import Session

from ratings_wrapper.infrastructure.persistence.repositories import (
    SQLModelScrapeRecordRepository,
)


class TestSQLModelScrapeRecordRepository:
    """Tests pour SQLModelScrapeRecordRepository."""

    def test_get_unknown_returns_none(self, session_factory: Callable[[], Session]) -> None:
        repo = SQLModelScrapeRecordRepository(session_factory)
        assert repo.get("tt0903747", "rottenTomatoes") is None

    def test_failures_accumulate(self, session_factory: Callable[[], Session]) -> None:
        """Chaque absence confirmee incremente le compteur d'echecs."""
        repo = SQLModelScrapeRecordRepository(session_factory)

        repo.record_failure("tt0903747", "rottenTomatoes")
        record = repo.record_failure("tt0903747", "rottenTomatoes")

        assert record.failed_count == 2
        assert record.last_attempt_at is not None
        assert record.last_success_at is None

    def test_success_resets_counter(self, session_factory: Callable[[], Session]) -> None:
        repo = SQLModelScrapeRecordRepository(session_factory)
        repo.record_failure("tt0903747", "metacritic")

        record = repo.record_success(
            "tt0903747", "metacritic", "https://www.metacritic.com/tv/breaking-bad", 87.0
        )

        assert record.failed_count == 0
        assert record.last_score == 87.0
        assert record.last_url.endswith("breaking-bad")
        assert repo.get("tt0903747", "metacritic").failed_count == 0

    def test_sources_are_tracked_separately(self, session_factory: Callable[[], Session]) -> None:
        repo = SQLModelScrapeRecordRepository(session_factory)
        repo.record_failure("tt0903747", "rottenTomatoes")

        assert repo.get("tt0903747", "metacritic") is None
