"""
Interfaces ports pour le cache.

ICacheTier est un niveau de stockage brut (memoire, disque).
ICacheStore est le cache complet vu par les clients : lecture avec
fraicheur, ecritures positives/negatives et regroupement des requetes
concurrentes (singleflight).
"""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional

from ratings_wrapper.core.value_objects import CacheEntry, CacheLookup, FetchOutcome

FetchFunction = Callable[[], Awaitable[FetchOutcome]]


class ICacheTier(ABC):
    """Niveau de stockage d'entrees de cache, sans notion de fraicheur."""

    @abstractmethod
    async def get_entry(self, key: str) -> Optional[CacheEntry]:
        """Retourne l'entree stockee ou None."""
        ...

    @abstractmethod
    async def set_entry(self, entry: CacheEntry) -> None:
        """Stocke ou remplace une entree."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Supprime une entree (sans effet si absente)."""
        ...

    @abstractmethod
    async def clear(self) -> None:
        """Vide le niveau."""
        ...

    def close(self) -> None:
        """Libere les ressources du niveau."""


class ICacheStore(ABC):
    """Cache a deux niveaux avec TTL, cache negatif et singleflight."""

    version: int = 1

    def make_key(self, namespace: str, key: str) -> str:
        """Cle versionnee : "v{version}:{namespace}:{key}"."""
        return f"v{self.version}:{namespace}:{key}"

    @abstractmethod
    async def get(self, key: str) -> CacheLookup:
        """Lit une cle sans jamais declencher de rafraichissement."""
        ...

    @abstractmethod
    async def put(self, key: str, payload: Any, ttl: float) -> None:
        """Ecrit une entree positive."""
        ...

    @abstractmethod
    async def put_negative(self, key: str, ttl: float) -> None:
        """Ecrit une entree "absence confirmee"."""
        ...

    @abstractmethod
    async def delete(self, key: str) -> None:
        ...

    @abstractmethod
    async def clear(self) -> None:
        ...

    @abstractmethod
    async def get_or_fetch(
        self,
        key: str,
        fetch: FetchFunction,
        ttl: float,
        negative_ttl: float,
    ) -> CacheLookup:
        """
        Lit la cle, ou appelle fetch en cas d'absence.

        Les appels concurrents sur une meme cle absente partagent un seul
        appel a fetch. Une erreur transitoire n'est jamais mise en cache.
        """
        ...
