"""
Resolution des identifiants du catalogue en reference canonique.

Formats acceptes :
- tt0111161           film ou serie
- tt0944947:1:2       episode (serie, saison, episode)
- kitsu:31 / kitsu:31:5   anime kitsu (l'episode est ramene a la serie)
- mal:40028           anime MyAnimeList

Les identifiants kitsu/mal sont traduits en IMDb via la table de
correspondance ; un anime sans equivalent IMDb garde un identifiant "mal:"
et n'est note que par MyAnimeList.
"""

import re
from typing import Optional

from loguru import logger

from ratings_wrapper.core.ports.id_mapping import IIdMapper
from ratings_wrapper.core.value_objects import MediaItem, MediaRef, MediaType

_IMDB_PATTERN = re.compile(r"^(tt\d+)(?::(\d+):(\d+))?$")
_ANIME_PATTERN = re.compile(r"^(kitsu|mal)[:-](\d+)(?::(\d+))?$")


class IdResolver:
    """Traduit un MediaItem en MediaRef."""

    def __init__(self, id_mapper: Optional[IIdMapper] = None) -> None:
        self._id_mapper = id_mapper

    def resolve(self, item: MediaItem) -> Optional[MediaRef]:
        """
        Retourne la reference canonique, ou None si l'identifiant est inexploitable.
        """
        item_id = item.id.strip()

        match = _IMDB_PATTERN.match(item_id)
        if match:
            imdb_id, season, episode = match.groups()
            if season is not None:
                return MediaRef(imdb_id, MediaType.EPISODE, int(season), int(episode))
            return MediaRef(imdb_id, item.media_type, mal_id=self._mal_id_for(imdb_id))

        match = _ANIME_PATTERN.match(item_id)
        if match:
            return self._resolve_anime(match.group(1), match.group(2), item)

        logger.debug(f"Identifiant non pris en charge: {item.id}")
        return None

    def _mal_id_for(self, imdb_id: str) -> Optional[str]:
        if self._id_mapper is None:
            return None
        return self._id_mapper.foreign_id_for(imdb_id, "mal")

    def _resolve_anime(self, namespace: str, value: str, item: MediaItem) -> Optional[MediaRef]:
        foreign_id = f"{namespace}:{value}"
        media_type = MediaType.MOVIE if item.media_type is MediaType.MOVIE else MediaType.SERIES

        if self._id_mapper is None:
            if namespace == "mal":
                return MediaRef(foreign_id, media_type, mal_id=value)
            logger.debug(f"Aucune table de correspondance pour {foreign_id}")
            return None

        imdb_id = self._id_mapper.map_to_canonical_id(foreign_id)
        mal_id = value if namespace == "mal" else self._id_mapper.foreign_id_for(foreign_id, "mal")
        if imdb_id:
            logger.debug(f"{foreign_id} -> {imdb_id}")
            return MediaRef(imdb_id, media_type, mal_id=mal_id)
        if mal_id:
            return MediaRef(f"mal:{mal_id}", media_type, mal_id=mal_id)

        logger.debug(f"Aucune correspondance pour {foreign_id}")
        return None
