"""
Interface port pour la correspondance entre identifiants etrangers et IMDb.
"""

from abc import ABC, abstractmethod
from typing import Optional


class IIdMapper(ABC):
    """
    Table de correspondance d'identifiants (kitsu, mal, ... <-> IMDb).

    La table elle-meme est maintenue par un collaborateur externe.
    """

    @abstractmethod
    def map_to_canonical_id(self, foreign_id: str) -> Optional[str]:
        """
        Retourne l'identifiant IMDb d'un identifiant etranger.

        Args:
            foreign_id: Identifiant prefixe ("kitsu:31", "mal:40028")

        Returns:
            Identifiant IMDb ou None si inconnu
        """
        ...

    @abstractmethod
    def foreign_id_for(self, known_id: str, namespace: str) -> Optional[str]:
        """
        Retourne l'identifiant d'un media dans un autre namespace.

        Args:
            known_id: Identifiant IMDb ou identifiant etranger prefixe
            namespace: Namespace cible ("mal", "kitsu")

        Returns:
            Identifiant etranger (sans prefixe) ou None
        """
        ...
