"""
Moteur de consolidation des notes.

Pour un media :
1. Resolution de l'identifiant en reference canonique
2. Lecture du cache consolide (24h, absence confirmee 24h)
3. Sinon, interrogation concurrente de toutes les sources configurees,
   chacune avec son propre delai maximum
4. Pour une serie sans note RT/MC, recours aux scrapers
5. Moyenne des notes normalisees, arrondie a une decimale, et categorie de couleur

Sans aucune note, le resultat est None. L'absence n'est mise en cache
que si aucune source n'a echoue de facon transitoire.
"""

import asyncio
import math
from collections.abc import Callable
from typing import Optional

from loguru import logger

from ratings_wrapper.core.entities import (
    ConsolidatedRating,
    RatingSource,
    SourceValue,
    color_for,
)
from ratings_wrapper.core.ports.cache import ICacheStore
from ratings_wrapper.core.ports.metrics import IMetricsSink
from ratings_wrapper.core.ports.rating_sources import IRatingSource, SourceLookup
from ratings_wrapper.core.value_objects import FetchOutcome, MediaItem, MediaRef, MediaType
from ratings_wrapper.services.id_resolver import IdResolver
from ratings_wrapper.services.series_ratings import SeriesRatingsService
from ratings_wrapper.utils.constants import (
    CONSOLIDATED_NAMESPACE,
    CONSOLIDATED_NEGATIVE_TTL,
    CONSOLIDATED_TTL,
)

Weighting = Callable[[SourceValue], float]


def round_half_up(value: float, digits: int = 1) -> float:
    """Arrondi commercial (8.25 -> 8.3), independant de l'arrondi bancaire de round()."""
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def consolidate_values(
    item_id: str,
    values: list[SourceValue],
    ttl: int = CONSOLIDATED_TTL,
    weighting: Optional[Weighting] = None,
) -> Optional[ConsolidatedRating]:
    """
    Calcule la note consolidee d'une liste de valeurs normalisees.

    Sans ponderation, chaque source compte pour 1 (moyenne simple).

    Returns:
        ConsolidatedRating, ou None si la liste est vide
    """
    if not values:
        return None
    weights = [weighting(value) if weighting else 1.0 for value in values]
    total_weight = sum(weights)
    if total_weight <= 0:
        return None
    mean = sum(w * v.value for w, v in zip(weights, values)) / total_weight
    rating = round_half_up(mean)
    return ConsolidatedRating(
        item_id=item_id,
        sources=tuple(values),
        consolidated_rating=rating,
        source_count=len(values),
        color_indicator=color_for(rating),
        ttl=ttl,
    )


class ConsolidationEngine:
    """
    Point d'entree unique pour la note consolidee d'un media.

    Example:
        engine = ConsolidationEngine(cache, IdResolver(mapper), [mirror, tmdb, omdb, mal])
        rating = await engine.consolidate(MediaItem("tt0111161", MediaType.MOVIE))
    """

    def __init__(
        self,
        cache: ICacheStore,
        resolver: IdResolver,
        sources: list[IRatingSource],
        series_ratings: Optional[SeriesRatingsService] = None,
        ttl: int = CONSOLIDATED_TTL,
        negative_ttl: int = CONSOLIDATED_NEGATIVE_TTL,
        source_deadline: float = 15.0,
        weighting: Optional[Weighting] = None,
        metrics: Optional[IMetricsSink] = None,
    ) -> None:
        self._cache = cache
        self._resolver = resolver
        self._sources = [source for source in sources if source.enabled]
        self._series_ratings = series_ratings
        self._ttl = ttl
        self._negative_ttl = negative_ttl
        self._source_deadline = source_deadline
        self._weighting = weighting
        self._metrics = metrics

    @property
    def sources(self) -> list[IRatingSource]:
        return list(self._sources)

    def cache_key(self, ref: MediaRef) -> str:
        return self._cache.make_key(CONSOLIDATED_NAMESPACE, ref.cache_key)

    async def consolidate(
        self, item: MediaItem, force_refresh: bool = False
    ) -> Optional[ConsolidatedRating]:
        """
        Retourne la note consolidee d'un media, ou None sans aucune donnee.

        Args:
            item: Media a noter
            force_refresh: Ignorer le resultat consolide en cache

        Returns:
            ConsolidatedRating ou None
        """
        ref = self._resolver.resolve(item)
        if ref is None:
            return None

        key = self.cache_key(ref)
        if force_refresh:
            await self._cache.delete(key)

        lookup = await self._cache.get_or_fetch(
            key,
            lambda: self._compute(item, ref),
            ttl=self._ttl,
            negative_ttl=self._negative_ttl,
        )
        return lookup.payload if lookup.has_value else None

    async def is_known_absent(self, item: MediaItem) -> bool:
        """True si le media est inexploitable ou enregistre comme sans note."""
        ref = self._resolver.resolve(item)
        if ref is None:
            return True
        lookup = await self._cache.get(self.cache_key(ref))
        return lookup.found and lookup.negative

    async def _query(self, source: IRatingSource, ref: MediaRef) -> SourceLookup:
        try:
            return await asyncio.wait_for(
                source.fetch_by_canonical_id(ref), timeout=self._source_deadline
            )
        except asyncio.TimeoutError:
            logger.warning(f"{source.name}: delai depasse pour {ref.cache_key}")
            if self._metrics is not None:
                self._metrics.increment("source.deadline_exceeded", source=source.name)
            return SourceLookup.transient()

    async def _compute(self, item: MediaItem, ref: MediaRef) -> FetchOutcome:
        active = [source for source in self._sources if source.supports(ref)]
        lookups = await asyncio.gather(*(self._query(source, ref) for source in active))

        values: list[SourceValue] = []
        transient = False
        title, year = item.title, item.year
        for lookup in lookups:
            transient = transient or lookup.is_transient
            values.extend(lookup.values)
            title = title or lookup.title
            year = year or lookup.year

        if (
            ref.media_type is MediaType.SERIES
            and ref.has_imdb_id
            and self._series_ratings is not None
        ):
            present = {value.source for value in values}
            want_rt = RatingSource.OMDB_RT not in present
            want_mc = RatingSource.OMDB_MC not in present
            if want_rt or want_mc:
                series = await self._series_ratings.get_series_ratings(
                    ref, title, year, want_rt=want_rt, want_mc=want_mc
                )
                values.extend(series.values)
                transient = transient or series.transient

        rating = consolidate_values(ref.cache_key, values, self._ttl, self._weighting)
        if rating is None:
            if transient:
                logger.info(f"Aucune note pour {item.id} (sources indisponibles, non mis en cache)")
                return FetchOutcome.transient("sources_unavailable")
            logger.info(f"Aucune note pour {item.id}")
            return FetchOutcome.not_found("no_source")

        logger.debug(
            f"{item.id}: {rating.consolidated_rating} "
            f"({rating.source_count} sources, {rating.color_indicator.value})"
        )
        return FetchOutcome.found(rating)
