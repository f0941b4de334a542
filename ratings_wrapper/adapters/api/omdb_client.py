"""
Client OMDB, agregateur des notes Rotten Tomatoes et Metacritic.

Une seule requete par media : le tableau Ratings fournit
"Rotten Tomatoes" ("83%") et "Metacritic" ("68/100") ; le champ
Metascore sert de repli pour Metacritic.
"""

import re
from typing import Any, Optional

import httpx

from ratings_wrapper.adapters.api.source_client import (
    CachedRatingClient,
    SourceUnavailableError,
)
from ratings_wrapper.core.entities import RatingScale, RatingSource, SourceValue
from ratings_wrapper.core.ports.rating_sources import SourceLookup
from ratings_wrapper.core.value_objects import FetchOutcome, FetchStatus, MediaRef

_LEADING_NUMBER = re.compile(r"^\s*(\d+(?:\.\d+)?)")


def parse_score(value: Optional[str]) -> Optional[float]:
    """Extrait 83 de "83%", 68 de "68/100" ; None si absent ou "N/A"."""
    if not value:
        return None
    match = _LEADING_NUMBER.match(value)
    return float(match.group(1)) if match else None


class OMDBClient(CachedRatingClient):
    """
    Client API OMDB.

    Attributes:
        OMDB_BASE_URL: URL de l'API OMDB
    """

    OMDB_BASE_URL = "https://www.omdbapi.com/"

    def __init__(self, api_key: Optional[str], timeout: float = 10.0, **kwargs) -> None:
        super().__init__(**kwargs)
        self._api_key = api_key
        self._timeout = timeout

    @property
    def name(self) -> str:
        return "omdb"

    @property
    def provides(self) -> tuple[RatingSource, ...]:
        return (RatingSource.OMDB_RT, RatingSource.OMDB_MC)

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    def supports(self, ref: MediaRef) -> bool:
        return ref.has_imdb_id and not ref.is_episode

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers={"Accept": "application/json"},
                timeout=self._timeout,
            )
        return self._client

    async def _fetch_live(self, ref: MediaRef) -> FetchOutcome:
        response = await self._request(
            "GET",
            self.OMDB_BASE_URL,
            params={"apikey": self._api_key, "i": ref.canonical_id, "plot": "short"},
        )
        data = response.json()
        if data.get("Response") == "False":
            error = data.get("Error", "")
            if "api key" in error.lower() or "limit" in error.lower():
                # Cle invalide ou quota journalier epuise : pas une absence
                raise SourceUnavailableError(error)
            return FetchOutcome.not_found(error or "omdb_not_found")

        return FetchOutcome.found(self.parse_payload(data))

    @staticmethod
    def parse_payload(data: dict[str, Any]) -> SourceLookup:
        """Convertit une reponse OMDB en SourceLookup FOUND."""
        ratings = {
            rating.get("Source"): rating.get("Value")
            for rating in data.get("Ratings") or []
        }
        values: list[SourceValue] = []

        rotten = parse_score(ratings.get("Rotten Tomatoes"))
        if rotten is not None:
            values.append(
                SourceValue.from_raw(
                    RatingSource.OMDB_RT, rotten, RatingScale.HUNDRED, origin="omdb"
                )
            )

        metacritic = parse_score(ratings.get("Metacritic"))
        if metacritic is None:
            metacritic = parse_score(data.get("Metascore"))
        if metacritic is not None:
            values.append(
                SourceValue.from_raw(
                    RatingSource.OMDB_MC, metacritic, RatingScale.HUNDRED, origin="omdb"
                )
            )

        year_text = data.get("Year") or ""
        year = int(year_text[:4]) if year_text[:4].isdigit() else None
        return SourceLookup(
            FetchStatus.FOUND,
            values=tuple(values),
            title=data.get("Title"),
            year=year,
        )
