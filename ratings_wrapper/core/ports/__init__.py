"""
Ports (interfaces abstraites) du domaine.
"""

from ratings_wrapper.core.ports.cache import FetchFunction, ICacheStore, ICacheTier
from ratings_wrapper.core.ports.id_mapping import IIdMapper
from ratings_wrapper.core.ports.metrics import IMetricsSink
from ratings_wrapper.core.ports.rating_sources import IRatingSource, SourceLookup
from ratings_wrapper.core.ports.repositories import IScrapeRecordRepository

__all__ = [
    "FetchFunction",
    "ICacheStore",
    "ICacheTier",
    "IIdMapper",
    "IMetricsSink",
    "IRatingSource",
    "IScrapeRecordRepository",
    "SourceLookup",
]
