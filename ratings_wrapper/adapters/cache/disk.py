"""
Niveau persistant du cache, sur disque via diskcache.

diskcache conserve les donnees entre les redemarrages. Les operations
bloquantes sont executees dans le pool de threads (run_in_executor).

L'expiration physique de diskcache (TTL + fenetre de tolerance) ne sert
qu'au nettoyage : la fraicheur logique est toujours decidee a partir de
expires_at, stocke dans l'entree.
"""

import asyncio
from functools import partial
from pathlib import Path
from typing import Optional

from diskcache import Cache

from ratings_wrapper.core.ports.cache import ICacheTier
from ratings_wrapper.core.value_objects import CacheEntry


class DiskCacheTier(ICacheTier):
    """
    Cache asynchrone persistant.

    Example:
        tier = DiskCacheTier(cache_dir=".cache/ratings", stale_grace=3600)
        await tier.set_entry(entry)
        entry = await tier.get_entry("v1:omdb:tt0111161")
    """

    def __init__(
        self, cache_dir: str | Path = ".cache/ratings", stale_grace: float = 0.0
    ) -> None:
        """
        Initialise le cache avec un repertoire de stockage.

        Args:
            cache_dir: Chemin vers le repertoire du cache (cree si inexistant)
            stale_grace: Duree supplementaire de conservation physique (secondes)
        """
        self._cache = Cache(str(cache_dir))
        self._stale_grace = stale_grace

    async def get_entry(self, key: str) -> Optional[CacheEntry]:
        """
        Recupere une entree du disque.

        Args:
            key: Cle complete de l'entree

        Returns:
            L'entree stockee, expiree ou non, ou None si absente ou purgee
        """
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._cache.get, key)

    async def set_entry(self, entry: CacheEntry) -> None:
        """
        Stocke une entree sur disque.

        Args:
            entry: Entree a stocker, conservee physiquement jusqu'a
                   expires_at + stale_grace
        """
        expire = (entry.expires_at - entry.fetched_at) + self._stale_grace
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(
            None, partial(self._cache.set, entry.key, entry, expire=expire)
        )

    async def delete(self, key: str) -> None:
        """
        Supprime une entree (sans erreur si absente).

        Args:
            key: Cle complete de l'entree
        """
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._cache.delete, key)

    async def clear(self) -> None:
        """Supprime toutes les entrees du cache."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._cache.clear)

    def close(self) -> None:
        """Ferme la connexion au cache (a appeler a la fin)."""
        self._cache.close()
