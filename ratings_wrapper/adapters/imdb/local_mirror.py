"""
Source de notes IMDb depuis le miroir local SQLite.

Les tables imdb_ratings et imdb_episodes sont remplies par un ETL externe.
Les lectures SQLModel sont synchrones : elles sont executees dans le pool
de threads pour ne pas bloquer la boucle asyncio.
"""

import asyncio
from collections.abc import Callable
from typing import Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from ratings_wrapper.adapters.api.source_client import CachedRatingClient
from ratings_wrapper.core.entities import RatingScale, RatingSource, SourceValue
from ratings_wrapper.core.ports.rating_sources import SourceLookup
from ratings_wrapper.core.value_objects import FetchOutcome, FetchStatus, MediaRef
from ratings_wrapper.infrastructure.persistence.models import (
    IMDbEpisodeModel,
    IMDbRatingModel,
)


class LocalMirrorClient(CachedRatingClient):
    """
    Lecture des notes IMDb dans le miroir local.

    Example:
        client = LocalMirrorClient(session_factory=factory, cache=cache)
        lookup = await client.fetch_by_canonical_id(MediaRef("tt0944947", MediaType.EPISODE, 1, 1))
    """

    def __init__(self, session_factory: Callable[[], Session], **kwargs) -> None:
        super().__init__(**kwargs)
        self._session_factory = session_factory

    @property
    def name(self) -> str:
        return "imdb"

    @property
    def provides(self) -> tuple[RatingSource, ...]:
        return (RatingSource.LOCAL_MIRROR,)

    def supports(self, ref: MediaRef) -> bool:
        return ref.has_imdb_id

    def _episode_tconst(self, session: Session, ref: MediaRef) -> Optional[str]:
        statement = select(IMDbEpisodeModel.tconst).where(
            IMDbEpisodeModel.parent_tconst == ref.canonical_id,
            IMDbEpisodeModel.season_number == ref.season,
            IMDbEpisodeModel.episode_number == ref.episode,
        )
        return session.exec(statement).first()

    def _read_rating(self, ref: MediaRef) -> Optional[IMDbRatingModel]:
        with self._session_factory() as session:
            tconst = ref.canonical_id
            if ref.is_episode:
                tconst = self._episode_tconst(session, ref)
                if tconst is None:
                    return None
            return session.get(IMDbRatingModel, tconst)

    async def _fetch_live(self, ref: MediaRef) -> FetchOutcome:
        loop = asyncio.get_running_loop()
        try:
            rating = await loop.run_in_executor(None, self._read_rating, ref)
        except SQLAlchemyError as e:
            logger.warning(f"Miroir IMDb indisponible pour {ref.cache_key}: {e}")
            return FetchOutcome.transient("database_error")

        if rating is None:
            return FetchOutcome.not_found("imdb_not_in_mirror")

        value = SourceValue.from_raw(
            RatingSource.LOCAL_MIRROR,
            rating.average_rating,
            RatingScale.TEN,
            vote_count=rating.num_votes,
            origin="mirror",
        )
        return FetchOutcome.found(SourceLookup(FetchStatus.FOUND, values=(value,)))
