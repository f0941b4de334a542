"""
Scrapers de secours pour les notes des series.
"""

from ratings_wrapper.adapters.scrapers.base import (
    ScrapeParseError,
    ScrapeResult,
    SeriesScraper,
    slugify,
)
from ratings_wrapper.adapters.scrapers.metacritic import MetacriticScraper
from ratings_wrapper.adapters.scrapers.rotten_tomatoes import RottenTomatoesScraper

__all__ = [
    "MetacriticScraper",
    "RottenTomatoesScraper",
    "ScrapeParseError",
    "ScrapeResult",
    "SeriesScraper",
    "slugify",
]
