"""
Cache a deux niveaux avec TTL, cache negatif et singleflight.

Lecture : niveau memoire, puis niveau disque (un succes sur disque
repeuple la memoire). Ecriture : les deux niveaux. La fraicheur est
decidee uniquement a partir de l'entree, quel que soit le niveau.

Tolerance (stale-while-revalidate) : si stale_serve_seconds > 0, une
entree expiree depuis moins de stale_serve_seconds est servie marquee
"stale" et un rafraichissement est lance en arriere-plan par get_or_fetch.
"""

import time
from typing import Any, Callable, Optional

from loguru import logger

from ratings_wrapper.adapters.cache.singleflight import SingleFlight
from ratings_wrapper.core.ports.cache import FetchFunction, ICacheStore, ICacheTier
from ratings_wrapper.core.ports.metrics import IMetricsSink
from ratings_wrapper.core.value_objects import (
    CacheEntry,
    CacheLookup,
    FetchOutcome,
    FetchStatus,
)


class TieredCache(ICacheStore):
    """
    Implementation de ICacheStore sur un niveau rapide et un niveau durable.

    Example:
        cache = TieredCache(MemoryCacheTier(), DiskCacheTier(".cache/ratings"))
        lookup = await cache.get_or_fetch(key, fetch, ttl=604800, negative_ttl=604800)
    """

    def __init__(
        self,
        fast: ICacheTier,
        durable: Optional[ICacheTier] = None,
        clock: Callable[[], float] = time.time,
        stale_serve_seconds: float = 0.0,
        metrics: Optional[IMetricsSink] = None,
        version: int = 1,
    ) -> None:
        self._fast = fast
        self._durable = durable
        self._clock = clock
        self._stale_serve_seconds = stale_serve_seconds
        self._metrics = metrics
        self._flight = SingleFlight()
        self.version = version

    @property
    def inflight(self) -> SingleFlight:
        return self._flight

    def _count(self, name: str) -> None:
        if self._metrics is not None:
            self._metrics.increment(name)

    async def _read_entry(self, key: str) -> Optional[CacheEntry]:
        entry = await self._fast.get_entry(key)
        if entry is not None or self._durable is None:
            return entry
        entry = await self._durable.get_entry(key)
        if entry is not None:
            await self._fast.set_entry(entry)
        return entry

    def _classify(self, entry: Optional[CacheEntry], now: float) -> CacheLookup:
        if entry is None:
            return CacheLookup.miss()
        if not entry.is_expired(now):
            return CacheLookup.hit(entry)
        if (
            self._stale_serve_seconds > 0
            and now <= entry.expires_at + self._stale_serve_seconds
        ):
            return CacheLookup.hit(entry, stale=True)
        return CacheLookup.miss()

    async def get(self, key: str) -> CacheLookup:
        entry = await self._read_entry(key)
        lookup = self._classify(entry, self._clock())
        if not lookup.found:
            logger.debug(f"Cache MISS: {key}")
            self._count("cache.miss")
        elif lookup.stale:
            logger.debug(f"Cache STALE: {key}")
            self._count("cache.stale")
        else:
            logger.debug(f"Cache HIT: {key}")
            self._count("cache.hit")
        if lookup.found and lookup.negative:
            self._count("cache.negative")
        return lookup

    async def _write(self, entry: CacheEntry) -> None:
        await self._fast.set_entry(entry)
        if self._durable is not None:
            await self._durable.set_entry(entry)

    async def put(self, key: str, payload: Any, ttl: float) -> None:
        now = self._clock()
        await self._write(CacheEntry(key, payload, now, now + ttl))

    async def put_negative(self, key: str, ttl: float) -> None:
        now = self._clock()
        await self._write(CacheEntry(key, None, now, now + ttl, is_negative=True))

    async def delete(self, key: str) -> None:
        await self._fast.delete(key)
        if self._durable is not None:
            await self._durable.delete(key)

    async def clear(self) -> None:
        await self._fast.clear()
        if self._durable is not None:
            await self._durable.clear()

    async def get_or_fetch(
        self,
        key: str,
        fetch: FetchFunction,
        ttl: float,
        negative_ttl: float,
    ) -> CacheLookup:
        lookup = await self.get(key)
        if lookup.found and not lookup.stale:
            return lookup

        async def _refresh() -> CacheLookup:
            return await self._fetch_and_store(key, fetch, ttl, negative_ttl)

        if lookup.found:
            self._flight.schedule(key, _refresh)
            return lookup

        result, shared = await self._flight.do(key, _refresh)
        if shared:
            self._count("cache.singleflight.shared")
        return result

    async def _fetch_and_store(
        self,
        key: str,
        fetch: FetchFunction,
        ttl: float,
        negative_ttl: float,
    ) -> CacheLookup:
        outcome: FetchOutcome = await fetch()
        now = self._clock()
        if outcome.status is FetchStatus.FOUND:
            entry = CacheEntry(key, outcome.payload, now, now + ttl)
            await self._write(entry)
            return CacheLookup.hit(entry)
        if outcome.status is FetchStatus.NOT_FOUND:
            entry = CacheEntry(key, None, now, now + negative_ttl, is_negative=True)
            await self._write(entry)
            return CacheLookup.hit(entry)
        logger.debug(f"Echec transitoire non mis en cache: {key} ({outcome.reason})")
        return CacheLookup.miss()

    def close(self) -> None:
        self._fast.close()
        if self._durable is not None:
            self._durable.close()
