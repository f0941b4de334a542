"""
Objets valeur decrivant les medias a noter.

MediaItem est l'entree telle que fournie par le catalogue ; MediaRef est
la reference canonique (identifiant IMDb) obtenue apres resolution.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MediaType(Enum):
    """Type de media pris en charge."""

    MOVIE = "movie"
    SERIES = "series"
    EPISODE = "episode"


@dataclass(frozen=True)
class MediaItem:
    """
    Element de catalogue a noter.

    Attributs :
        id : Identifiant tel que recu ("tt0111161", "tt0944947:1:2", "kitsu:31", "mal:40028")
        media_type : Type de media
        title : Titre optionnel (utilise par les scrapers)
        year : Annee optionnelle (utilisee par les scrapers)
    """

    id: str
    media_type: MediaType
    title: Optional[str] = None
    year: Optional[int] = None


@dataclass(frozen=True)
class MediaRef:
    """
    Reference canonique d'un media, cle commune a toutes les sources.

    Attributs :
        canonical_id : Identifiant IMDb (tconst) du film ou de la serie
        media_type : Type de media
        season : Numero de saison (episodes uniquement)
        episode : Numero d'episode (episodes uniquement)
        mal_id : Identifiant MyAnimeList si connu
    """

    canonical_id: str
    media_type: MediaType
    season: Optional[int] = None
    episode: Optional[int] = None
    mal_id: Optional[str] = None

    @property
    def has_imdb_id(self) -> bool:
        return self.canonical_id.startswith("tt")

    @property
    def is_episode(self) -> bool:
        return self.season is not None and self.episode is not None

    @property
    def cache_key(self) -> str:
        """Cle canonique : "tt123" ou "tt123:S:E" pour un episode."""
        if self.is_episode:
            return f"{self.canonical_id}:{self.season}:{self.episode}"
        return self.canonical_id
