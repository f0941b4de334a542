"""
Entites du domaine.

Exports :
- RatingSource, RatingScale, SourceValue : observation d'une source
- ColorIndicator, ConsolidatedRating, color_for : note consolidee
- RateLimitState : compteurs du limiteur de scraping
- ScrapeRecord : historique de scraping d'une serie
"""

from ratings_wrapper.core.entities.rate_limit import RateLimitState
from ratings_wrapper.core.entities.rating import (
    ColorIndicator,
    ConsolidatedRating,
    RatingScale,
    RatingSource,
    SourceValue,
    color_for,
)
from ratings_wrapper.core.entities.scrape_record import ScrapeRecord

__all__ = [
    "ColorIndicator",
    "ConsolidatedRating",
    "RateLimitState",
    "RatingScale",
    "RatingSource",
    "ScrapeRecord",
    "SourceValue",
    "color_for",
]
