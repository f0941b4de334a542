"""
Etats terminaux d'une recuperation aupres d'une source externe.

Trois issues possibles et exclusives :
- FOUND : donnee obtenue, mise en cache positive
- NOT_FOUND : absence confirmee, mise en cache negative
- TRANSIENT_ERROR : echec temporaire, jamais mis en cache
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class FetchStatus(Enum):
    """Issue d'un appel a une source."""

    FOUND = "found"
    NOT_FOUND = "not_found"
    TRANSIENT_ERROR = "transient_error"


@dataclass(frozen=True)
class FetchOutcome:
    """
    Resultat d'une fonction de recuperation passee au cache.

    Attributs :
        status : Etat terminal
        payload : Donnee obtenue (FOUND uniquement)
        reason : Explication courte pour les logs (echecs)
    """

    status: FetchStatus
    payload: Any = None
    reason: Optional[str] = None

    @classmethod
    def found(cls, payload: Any) -> "FetchOutcome":
        return cls(FetchStatus.FOUND, payload=payload)

    @classmethod
    def not_found(cls, reason: Optional[str] = None) -> "FetchOutcome":
        return cls(FetchStatus.NOT_FOUND, reason=reason)

    @classmethod
    def transient(cls, reason: Optional[str] = None) -> "FetchOutcome":
        return cls(FetchStatus.TRANSIENT_ERROR, reason=reason)

    @property
    def is_found(self) -> bool:
        return self.status is FetchStatus.FOUND

    @property
    def is_transient(self) -> bool:
        return self.status is FetchStatus.TRANSIENT_ERROR
