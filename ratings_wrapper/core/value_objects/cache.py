"""
Objets valeur du cache : entree stockee et resultat de lecture.
"""

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class CacheEntry:
    """
    Entree de cache horodatee.

    Une entree negative (is_negative=True, payload=None) signifie
    "absence confirmee" et expire comme une entree positive.

    Attributs :
        key : Cle de cache
        payload : Donnee stockee (None pour une entree negative)
        fetched_at : Horodatage d'ecriture (secondes, horloge du cache)
        expires_at : Horodatage d'expiration (strictement apres fetched_at)
        is_negative : True si l'entree enregistre une absence
    """

    key: str
    payload: Any
    fetched_at: float
    expires_at: float
    is_negative: bool = False

    def __post_init__(self) -> None:
        if self.expires_at <= self.fetched_at:
            raise ValueError(
                f"expires_at doit etre posterieur a fetched_at pour {self.key}"
            )

    def is_expired(self, now: float) -> bool:
        return now > self.expires_at


@dataclass(frozen=True)
class CacheLookup:
    """
    Resultat d'une lecture de cache.

    Attributs :
        found : Une entree exploitable a ete trouvee
        stale : L'entree est expiree mais servie dans la fenetre de tolerance
        negative : L'entree enregistre une absence confirmee
        payload : Donnee (None si absente ou negative)
        fetched_at : Horodatage d'ecriture de l'entree
    """

    found: bool = False
    stale: bool = False
    negative: bool = False
    payload: Any = None
    fetched_at: Optional[float] = None

    @classmethod
    def miss(cls) -> "CacheLookup":
        return cls()

    @classmethod
    def hit(cls, entry: CacheEntry, stale: bool = False) -> "CacheLookup":
        return cls(
            found=True,
            stale=stale,
            negative=entry.is_negative,
            payload=entry.payload,
            fetched_at=entry.fetched_at,
        )

    @property
    def has_value(self) -> bool:
        """True si la lecture fournit une donnee positive."""
        return self.found and not self.negative
