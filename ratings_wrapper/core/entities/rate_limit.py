"""
Etat du limiteur de debit pour une source scrapee.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class RateLimitState:
    """
    Compteurs mutables d'une source soumise au limiteur.

    Invariant : active_count <= max_concurrent.

    Attributs :
        max_concurrent : Nombre maximum de requetes simultanees
        min_delay : Espacement minimum entre deux requetes (secondes)
        max_delay : Espacement maximum tire au hasard (secondes)
        active_count : Requetes en cours
        waiting : Appelants en attente d'un creneau
        last_request_at : Horodatage du dernier envoi
    """

    max_concurrent: int
    min_delay: float
    max_delay: float
    active_count: int = 0
    waiting: int = 0
    last_request_at: Optional[float] = None

    def __post_init__(self) -> None:
        if self.max_concurrent < 1:
            raise ValueError("max_concurrent doit etre >= 1")
        if self.min_delay < 0 or self.max_delay < self.min_delay:
            raise ValueError("Intervalle de delai invalide")

    @property
    def has_capacity(self) -> bool:
        return self.active_count < self.max_concurrent
