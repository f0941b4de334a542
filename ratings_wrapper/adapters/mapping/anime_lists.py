"""
Table de correspondance kitsu / MyAnimeList / IMDb.

Alimentee a partir d'un export au format anime-lists (liste d'objets JSON
avec les champs kitsu_id, mal_id et imdb_id). La maintenance de la table
est externe ; ce module ne fait que la lire.
"""

import json
from collections.abc import Iterable
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from ratings_wrapper.core.ports.id_mapping import IIdMapper

NAMESPACES = ("kitsu", "mal", "imdb")


class AnimeListsIdMapper(IIdMapper):
    """
    Implementation memoire de IIdMapper.

    Example:
        mapper = AnimeListsIdMapper.from_file(Path("anime-list.json"))
        mapper.map_to_canonical_id("kitsu:1376")  # "tt2560140"
        mapper.foreign_id_for("tt2560140", "mal")  # "16498"
    """

    def __init__(self, entries: Iterable[dict[str, Any]] = ()) -> None:
        self._index: dict[str, dict[str, str]] = {}
        for entry in entries:
            self.add(entry)

    @classmethod
    def from_file(cls, path: Optional[Path]) -> "AnimeListsIdMapper":
        """
        Charge la table depuis un fichier JSON.

        Un chemin absent ou inexistant donne une table vide.
        """
        if path is None or not path.exists():
            if path is not None:
                logger.warning(f"Fichier de correspondance anime introuvable: {path}")
            return cls()
        with path.open(encoding="utf-8") as handle:
            entries = json.load(handle)
        mapper = cls(entries)
        logger.info(f"Correspondances anime chargees: {len(mapper)} identifiants")
        return mapper

    def __len__(self) -> int:
        return len(self._index)

    def add(self, entry: dict[str, Any]) -> None:
        """Ajoute une ligne de correspondance."""
        ids = {
            namespace: str(entry[f"{namespace}_id"])
            for namespace in NAMESPACES
            if entry.get(f"{namespace}_id")
        }
        if len(ids) < 2:
            return
        for namespace, value in ids.items():
            key = value if namespace == "imdb" else f"{namespace}:{value}"
            # La premiere ligne connue pour un identifiant fait foi
            self._index.setdefault(key, ids)

    def map_to_canonical_id(self, foreign_id: str) -> Optional[str]:
        ids = self._index.get(foreign_id)
        return ids.get("imdb") if ids else None

    def foreign_id_for(self, known_id: str, namespace: str) -> Optional[str]:
        ids = self._index.get(known_id)
        return ids.get(namespace) if ids else None
