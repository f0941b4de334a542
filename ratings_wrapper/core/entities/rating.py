"""
Entites de notation : valeur par source et note consolidee.

Toutes les valeurs sortant d'un adaptateur sont normalisees sur 0-10.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from ratings_wrapper.utils.constants import COLOR_THRESHOLDS


class RatingSource(Enum):
    """Sources de notes connues."""

    LOCAL_MIRROR = "imdb"
    TMDB = "tmdb"
    OMDB_RT = "rottenTomatoes"
    OMDB_MC = "metacritic"
    MAL = "mal"


class RatingScale(Enum):
    """Echelle native d'une source."""

    TEN = 10
    HUNDRED = 100


class ColorIndicator(Enum):
    """Categorie de couleur derivee de la note consolidee."""

    EXCELLENT = "excellent"
    GREAT = "great"
    GOOD = "good"
    OKAY = "okay"
    MEDIOCRE = "mediocre"
    POOR = "poor"


def color_for(rating: float) -> ColorIndicator:
    """
    Retourne la categorie de couleur d'une note sur 10.

    Les bornes sont inclusives vers le haut : 9.0 -> EXCELLENT, 8.99 -> GREAT.
    """
    for threshold, name in COLOR_THRESHOLDS:
        if rating >= threshold:
            return ColorIndicator(name)
    return ColorIndicator.POOR


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class SourceValue:
    """
    Observation d'une source pour un media.

    Attributs :
        source : Source d'origine
        value : Note normalisee sur 0-10
        scale : Echelle native de la source
        vote_count : Nombre de votes si fourni
        fetched_at : Date de recuperation
        origin : Provenance ("mirror", "api", "omdb", "scraper")
    """

    source: RatingSource
    value: float
    scale: RatingScale = RatingScale.TEN
    vote_count: Optional[int] = None
    fetched_at: datetime = field(default_factory=_utcnow)
    origin: str = "api"

    def __post_init__(self) -> None:
        if not 0.0 <= self.value <= 10.0:
            raise ValueError(
                f"Note hors bornes pour {self.source.value}: {self.value}"
            )

    @classmethod
    def from_raw(
        cls,
        source: RatingSource,
        raw: float,
        scale: RatingScale,
        vote_count: Optional[int] = None,
        origin: str = "api",
    ) -> "SourceValue":
        """
        Construit une valeur a partir de la note native.

        Les echelles 0-100 sont divisees par 10.

        Raises:
            ValueError: Si la valeur normalisee sort de 0-10
        """
        value = float(raw) / 10.0 if scale is RatingScale.HUNDRED else float(raw)
        return cls(
            source=source,
            value=value,
            scale=scale,
            vote_count=vote_count,
            origin=origin,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "source": self.source.value,
            "value": self.value,
            "scale": self.scale.value,
            "vote_count": self.vote_count,
            "fetched_at": self.fetched_at.isoformat(),
            "origin": self.origin,
        }


@dataclass(frozen=True)
class ConsolidatedRating:
    """
    Note consolidee d'un media.

    N'existe que si au moins une source a contribue ; l'absence totale
    de donnees est representee par None, jamais par une note de 0.

    Attributs :
        item_id : Identifiant du media tel que demande
        sources : Valeurs ayant contribue
        consolidated_rating : Moyenne arrondie a une decimale
        source_count : Nombre de valeurs ayant contribue
        color_indicator : Categorie de couleur
        computed_at : Date du calcul
        ttl : Duree de vie en cache (secondes)
    """

    item_id: str
    sources: tuple[SourceValue, ...]
    consolidated_rating: float
    source_count: int
    color_indicator: ColorIndicator
    computed_at: datetime = field(default_factory=_utcnow)
    ttl: int = 0

    def __post_init__(self) -> None:
        if self.source_count < 1:
            raise ValueError("Une note consolidee exige au moins une source")

    def value_for(self, source: RatingSource) -> Optional[SourceValue]:
        """Retourne la valeur d'une source donnee, ou None."""
        for value in self.sources:
            if value.source is source:
                return value
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "item_id": self.item_id,
            "consolidated_rating": self.consolidated_rating,
            "source_count": self.source_count,
            "color_indicator": self.color_indicator.value,
            "computed_at": self.computed_at.isoformat(),
            "ttl": self.ttl,
            "sources": [value.to_dict() for value in self.sources],
        }
