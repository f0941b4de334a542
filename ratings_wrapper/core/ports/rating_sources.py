"""
Interfaces ports pour les sources de notes.

Chaque source (miroir IMDb local, TMDB, OMDB, MAL) renvoie un SourceLookup
dont le statut est l'un des trois etats terminaux de FetchStatus.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

from ratings_wrapper.core.entities import RatingSource, SourceValue
from ratings_wrapper.core.value_objects import FetchStatus, MediaRef


@dataclass(frozen=True)
class SourceLookup:
    """
    Reponse d'une source pour un media.

    Attributs :
        status : Etat terminal de la recuperation
        values : Valeurs normalisees (vide si non trouve ou erreur)
        title : Titre retourne par la source (metadonnees)
        year : Annee retournee par la source (metadonnees)
        stale : La reponse provient d'une entree expiree servie en tolerance
    """

    status: FetchStatus
    values: tuple[SourceValue, ...] = ()
    title: Optional[str] = None
    year: Optional[int] = None
    stale: bool = False

    @classmethod
    def not_found(cls) -> "SourceLookup":
        return cls(FetchStatus.NOT_FOUND)

    @classmethod
    def transient(cls) -> "SourceLookup":
        return cls(FetchStatus.TRANSIENT_ERROR)

    @property
    def is_transient(self) -> bool:
        return self.status is FetchStatus.TRANSIENT_ERROR


class IRatingSource(ABC):
    """
    Interface commune des clients de notes.

    Les implementations consultent le cache avant tout appel reseau
    et ne levent jamais d'exception pour un echec de la source.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Identifiant court de la source (namespace de cache)."""
        ...

    @property
    @abstractmethod
    def provides(self) -> tuple[RatingSource, ...]:
        """Sources de notes que ce client peut produire."""
        ...

    @property
    def enabled(self) -> bool:
        """False si le client n'est pas configure (cle API absente)."""
        return True

    def supports(self, ref: MediaRef) -> bool:
        """Indique si le client sait traiter cette reference."""
        return True

    @abstractmethod
    async def fetch_by_canonical_id(self, ref: MediaRef) -> SourceLookup:
        """
        Recupere les notes d'un media a partir de sa reference canonique.

        Args:
            ref: Reference canonique resolue

        Returns:
            SourceLookup avec statut FOUND, NOT_FOUND ou TRANSIENT_ERROR
        """
        ...

    async def close(self) -> None:
        """Ferme les ressources reseau du client."""
