"""
Objets valeur immutables du domaine.

Exports :
- MediaType, MediaItem, MediaRef : description des medias
- FetchStatus, FetchOutcome : etats terminaux d'une recuperation
- CacheEntry, CacheLookup : entrees et lectures de cache
"""

from ratings_wrapper.core.value_objects.cache import CacheEntry, CacheLookup
from ratings_wrapper.core.value_objects.media import MediaItem, MediaRef, MediaType
from ratings_wrapper.core.value_objects.outcome import FetchOutcome, FetchStatus

__all__ = [
    "CacheEntry",
    "CacheLookup",
    "FetchOutcome",
    "FetchStatus",
    "MediaItem",
    "MediaRef",
    "MediaType",
]
