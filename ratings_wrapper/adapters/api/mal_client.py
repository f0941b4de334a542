"""
Client MyAnimeList (API v2) pour les notes des animes.

Necessite un identifiant MAL sur la reference (obtenu via la table de
correspondance kitsu/mal -> IMDb). Le champ "mean" est deja sur 0-10 ;
son absence signifie que l'anime n'a pas encore de note.
"""

from typing import Optional

import httpx

from ratings_wrapper.adapters.api.source_client import CachedRatingClient
from ratings_wrapper.core.entities import RatingScale, RatingSource, SourceValue
from ratings_wrapper.core.ports.rating_sources import SourceLookup
from ratings_wrapper.core.value_objects import FetchOutcome, FetchStatus, MediaRef


class MALClient(CachedRatingClient):
    """Client API MyAnimeList."""

    MAL_BASE_URL = "https://api.myanimelist.net/v2"
    FIELDS = "mean,num_scoring_users,title,start_date"

    def __init__(self, client_id: Optional[str], timeout: float = 10.0, **kwargs) -> None:
        super().__init__(**kwargs)
        self._client_id = client_id
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "mal"

    @property
    def provides(self) -> tuple[RatingSource, ...]:
        return (RatingSource.MAL,)

    @property
    def enabled(self) -> bool:
        return bool(self._client_id)

    def supports(self, ref: MediaRef) -> bool:
        return ref.mal_id is not None and not ref.is_episode

    def cache_key(self, ref: MediaRef) -> str:
        return self._cache.make_key(self.name, ref.mal_id)

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.MAL_BASE_URL,
                headers={"X-MAL-CLIENT-ID": self._client_id},
                timeout=self._timeout,
            )
        return self._client

    async def _fetch_live(self, ref: MediaRef) -> FetchOutcome:
        response = await self._request(
            "GET",
            f"/anime/{ref.mal_id}",
            params={"fields": self.FIELDS},
        )
        data = response.json()
        mean = data.get("mean")
        if mean is None:
            return FetchOutcome.not_found("mal_without_mean")

        start_date = data.get("start_date") or ""
        value = SourceValue.from_raw(
            RatingSource.MAL,
            mean,
            RatingScale.TEN,
            vote_count=data.get("num_scoring_users"),
        )
        return FetchOutcome.found(
            SourceLookup(
                FetchStatus.FOUND,
                values=(value,),
                title=data.get("title"),
                year=int(start_date[:4]) if start_date[:4].isdigit() else None,
            )
        )
