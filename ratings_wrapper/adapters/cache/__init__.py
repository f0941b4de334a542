"""
Cache a deux niveaux (memoire + disque) avec TTL, cache negatif,
tolerance aux entrees expirees et singleflight.
"""

from ratings_wrapper.adapters.cache.disk import DiskCacheTier
from ratings_wrapper.adapters.cache.eviction import (
    EvictionStrategy,
    FIFOEviction,
    LRUEviction,
    eviction_strategy,
)
from ratings_wrapper.adapters.cache.memory import MemoryCacheTier
from ratings_wrapper.adapters.cache.singleflight import SingleFlight
from ratings_wrapper.adapters.cache.tiered import TieredCache

__all__ = [
    "DiskCacheTier",
    "EvictionStrategy",
    "FIFOEviction",
    "LRUEviction",
    "MemoryCacheTier",
    "SingleFlight",
    "TieredCache",
    "eviction_strategy",
]
