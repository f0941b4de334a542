"""
Niveau memoire du cache : dictionnaire borne en processus.
"""

from collections import OrderedDict
from typing import Optional

from ratings_wrapper.adapters.cache.eviction import EvictionStrategy, LRUEviction
from ratings_wrapper.core.ports.cache import ICacheTier
from ratings_wrapper.core.value_objects import CacheEntry


class MemoryCacheTier(ICacheTier):
    """
    Cache memoire borne avec strategie d'eviction injectable.

    Example:
        tier = MemoryCacheTier(max_entries=1000, eviction=FIFOEviction())
    """

    def __init__(
        self,
        max_entries: int = 10_000,
        eviction: Optional[EvictionStrategy] = None,
    ) -> None:
        """
        Initialise le cache memoire.

        Args:
            max_entries: Nombre maximum d'entrees conservees
            eviction: Strategie d'eviction (LRU par defaut)

        Raises:
            ValueError: Si max_entries < 1
        """
        if max_entries < 1:
            raise ValueError("max_entries doit etre >= 1")
        self._max_entries = max_entries
        self._eviction = eviction or LRUEviction()
        self._entries: OrderedDict[str, CacheEntry] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    async def get_entry(self, key: str) -> Optional[CacheEntry]:
        """
        Recupere une entree et la signale a la strategie d'eviction.

        Args:
            key: Cle complete de l'entree

        Returns:
            L'entree stockee, expiree ou non, ou None si absente
        """
        entry = self._entries.get(key)
        if entry is not None:
            self._eviction.on_access(self._entries, key)
        return entry

    async def set_entry(self, entry: CacheEntry) -> None:
        """
        Stocke une entree puis evince jusqu'a respecter max_entries.

        Args:
            entry: Entree a stocker (remplace l'entree de meme cle)
        """
        existed = entry.key in self._entries
        self._entries[entry.key] = entry
        self._eviction.on_write(self._entries, entry.key, existed)
        while len(self._entries) > self._max_entries:
            victim = self._eviction.select_victim(self._entries)
            del self._entries[victim]

    async def delete(self, key: str) -> None:
        """
        Supprime une entree (sans erreur si absente).

        Args:
            key: Cle complete de l'entree
        """
        self._entries.pop(key, None)

    async def clear(self) -> None:
        """Supprime toutes les entrees."""
        self._entries.clear()
