"""
Repository SQLModel des historiques de scraping.
"""

from collections.abc import Callable
from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Session, select

from ratings_wrapper.core.entities import ScrapeRecord
from ratings_wrapper.core.ports.repositories import IScrapeRecordRepository
from ratings_wrapper.infrastructure.persistence.models import ScrapeRecordModel


def _now() -> datetime:
    return datetime.now(timezone.utc)


class SQLModelScrapeRecordRepository(IScrapeRecordRepository):
    """
    Implementation SQLModel du repository d'historiques de scraping.

    Chaque operation ouvre sa propre session via la fabrique.
    """

    def __init__(self, session_factory: Callable[[], Session]) -> None:
        self._session_factory = session_factory

    def _to_entity(self, model: ScrapeRecordModel) -> ScrapeRecord:
        return ScrapeRecord(
            imdb_id=model.imdb_id,
            source=model.source,
            failed_count=model.failed_count,
            last_attempt_at=model.last_attempt_at,
            last_success_at=model.last_success_at,
            last_url=model.last_url,
            last_score=model.last_score,
        )

    def _find(self, session: Session, imdb_id: str, source: str) -> Optional[ScrapeRecordModel]:
        statement = select(ScrapeRecordModel).where(
            ScrapeRecordModel.imdb_id == imdb_id,
            ScrapeRecordModel.source == source,
        )
        return session.exec(statement).first()

    def get(self, imdb_id: str, source: str) -> Optional[ScrapeRecord]:
        with self._session_factory() as session:
            model = self._find(session, imdb_id, source)
            return self._to_entity(model) if model else None

    def record_failure(self, imdb_id: str, source: str) -> ScrapeRecord:
        with self._session_factory() as session:
            model = self._find(session, imdb_id, source)
            if model is None:
                model = ScrapeRecordModel(imdb_id=imdb_id, source=source)
            model.failed_count += 1
            model.last_attempt_at = _now()
            session.add(model)
            session.commit()
            session.refresh(model)
            return self._to_entity(model)

    def record_success(
        self, imdb_id: str, source: str, url: str, score: float
    ) -> ScrapeRecord:
        with self._session_factory() as session:
            model = self._find(session, imdb_id, source)
            if model is None:
                model = ScrapeRecordModel(imdb_id=imdb_id, source=source)
            now = _now()
            model.failed_count = 0
            model.last_attempt_at = now
            model.last_success_at = now
            model.last_url = url
            model.last_score = score
            session.add(model)
            session.commit()
            session.refresh(model)
            return self._to_entity(model)
