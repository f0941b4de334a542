"""
Client TMDB pour les notes des films, series et episodes.

Recherche par identifiant IMDb via /find, puis lecture de vote_average
(echelle 0-10) et vote_count. Les episodes passent par
/tv/{id}/season/{s}/episode/{e}.

Le titre et l'annee retournes servent a alimenter les scrapers.

Usage:
    client = TMDBClient(api_key="your_key", cache=cache)
    lookup = await client.fetch_by_canonical_id(MediaRef("tt0903747", MediaType.SERIES))
    await client.close()
"""

from typing import Any, Optional

import httpx

from ratings_wrapper.adapters.api.source_client import CachedRatingClient
from ratings_wrapper.core.entities import RatingScale, RatingSource, SourceValue
from ratings_wrapper.core.ports.rating_sources import SourceLookup
from ratings_wrapper.core.value_objects import FetchOutcome, FetchStatus, MediaRef, MediaType


def _year_of(date_value: Optional[str]) -> Optional[int]:
    if date_value and len(date_value) >= 4 and date_value[:4].isdigit():
        return int(date_value[:4])
    return None


class TMDBClient(CachedRatingClient):
    """
    Client API TMDB.

    Attributes:
        TMDB_BASE_URL: URL de base de l'API TMDB v3
    """

    TMDB_BASE_URL = "https://api.themoviedb.org/3"

    def __init__(self, api_key: Optional[str], timeout: float = 10.0, **kwargs) -> None:
        """
        Initialise le client TMDB.

        Args:
            api_key: Cle API TMDB (v3) ou Read Access Token (v4), None si non configure
            timeout: Timeout des requetes en secondes
            **kwargs: Cache, TTL et metriques (voir CachedRatingClient)
        """
        super().__init__(**kwargs)
        self._api_key = api_key
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "tmdb"

    @property
    def provides(self) -> tuple[RatingSource, ...]:
        return (RatingSource.TMDB,)

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    def supports(self, ref: MediaRef) -> bool:
        return ref.has_imdb_id

    def _get_client(self) -> httpx.AsyncClient:
        """
        Retourne le client HTTP, le cree si necessaire (lazy init).

        Supporte les deux modes d'authentification TMDB:
        - API Key v3 (32 caracteres hex) : passe en parametre api_key
        - Read Access Token v4 (long JWT) : passe en header Bearer
        """
        if self._client is None or self._client.is_closed:
            is_v4_token = len(self._api_key) > 40

            headers = {"Accept": "application/json"}
            params = {}
            if is_v4_token:
                headers["Authorization"] = f"Bearer {self._api_key}"
            else:
                params["api_key"] = self._api_key

            self._client = httpx.AsyncClient(
                base_url=self.TMDB_BASE_URL,
                headers=headers,
                params=params,
                timeout=self._timeout,
            )
        return self._client

    async def _find(self, imdb_id: str) -> dict[str, Any]:
        response = await self._request(
            "GET",
            f"/find/{imdb_id}",
            params={"external_source": "imdb_id"},
        )
        return response.json()

    def _lookup_from(self, data: dict[str, Any], title_key: str, date_key: str) -> SourceLookup:
        title = data.get(title_key) or data.get(f"original_{title_key}")
        year = _year_of(data.get(date_key))
        average = data.get("vote_average")
        votes = data.get("vote_count") or 0
        values: tuple[SourceValue, ...] = ()
        if average and votes > 0:
            values = (
                SourceValue.from_raw(
                    RatingSource.TMDB, average, RatingScale.TEN, vote_count=votes
                ),
            )
        return SourceLookup(FetchStatus.FOUND, values=values, title=title, year=year)

    async def _fetch_live(self, ref: MediaRef) -> FetchOutcome:
        data = await self._find(ref.canonical_id)
        movies = data.get("movie_results") or []
        shows = data.get("tv_results") or []

        if ref.is_episode:
            if not shows:
                return FetchOutcome.not_found("tmdb_no_tv_result")
            return await self._fetch_episode(shows[0]["id"], ref)

        if ref.media_type is MediaType.MOVIE:
            candidates = [(m, "title", "release_date") for m in movies]
            candidates += [(s, "name", "first_air_date") for s in shows]
        else:
            candidates = [(s, "name", "first_air_date") for s in shows]
            candidates += [(m, "title", "release_date") for m in movies]

        if not candidates:
            return FetchOutcome.not_found("tmdb_no_result")
        result, title_key, date_key = candidates[0]
        return FetchOutcome.found(self._lookup_from(result, title_key, date_key))

    async def _fetch_episode(self, tv_id: int, ref: MediaRef) -> FetchOutcome:
        response = await self._request(
            "GET",
            f"/tv/{tv_id}/season/{ref.season}/episode/{ref.episode}",
        )
        lookup = self._lookup_from(response.json(), "name", "air_date")
        if not lookup.values:
            return FetchOutcome.not_found("tmdb_episode_without_votes")
        return FetchOutcome.found(lookup)
