"""
Strategies d'eviction pour le niveau memoire du cache.

Les strategies operent sur un OrderedDict dont le premier element est
le prochain a evincer.
"""

from abc import ABC, abstractmethod
from collections import OrderedDict
from typing import Any


class EvictionStrategy(ABC):
    """Politique d'ordre et de choix de la victime."""

    name: str = ""

    @abstractmethod
    def on_access(self, entries: OrderedDict, key: str) -> None:
        """Appelee apres une lecture reussie."""
        ...

    @abstractmethod
    def on_write(self, entries: OrderedDict, key: str, existed: bool) -> None:
        """Appelee apres une ecriture."""
        ...

    def select_victim(self, entries: OrderedDict) -> Any:
        return next(iter(entries))


class LRUEviction(EvictionStrategy):
    """Evince l'entree la moins recemment utilisee."""

    name = "lru"

    def on_access(self, entries: OrderedDict, key: str) -> None:
        entries.move_to_end(key)

    def on_write(self, entries: OrderedDict, key: str, existed: bool) -> None:
        entries.move_to_end(key)


class FIFOEviction(EvictionStrategy):
    """Evince l'entree la plus anciennement inseree."""

    name = "fifo"

    def on_access(self, entries: OrderedDict, key: str) -> None:
        pass

    def on_write(self, entries: OrderedDict, key: str, existed: bool) -> None:
        # Une reecriture conserve la position d'insertion d'origine
        pass


_STRATEGIES = {
    LRUEviction.name: LRUEviction,
    FIFOEviction.name: FIFOEviction,
}


def eviction_strategy(name: str) -> EvictionStrategy:
    """
    Retourne une strategie d'eviction par son nom.

    Raises:
        ValueError: Si le nom est inconnu
    """
    try:
        return _STRATEGIES[name.lower()]()
    except KeyError:
        raise ValueError(f"Strategie d'eviction inconnue: {name}") from None
