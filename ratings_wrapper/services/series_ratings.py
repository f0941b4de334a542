"""
Service de notes de series par scraping (Rotten Tomatoes, Metacritic).

Utilise uniquement pour les series dont OMDB ne fournit pas la note.
Chaque site est mis en cache separement :
- trouve : 7 jours
- absence confirmee : 24 heures (et compteur d'echecs +1)
- erreur transitoire : rien n'est ecrit, ni en cache ni dans l'historique
"""

import asyncio
from dataclasses import dataclass
from functools import partial
from typing import Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from ratings_wrapper.adapters.scrapers.base import ScrapeResult, SeriesScraper
from ratings_wrapper.core.entities import RatingScale, RatingSource, SourceValue
from ratings_wrapper.core.ports.cache import ICacheStore
from ratings_wrapper.core.ports.metrics import IMetricsSink
from ratings_wrapper.core.ports.repositories import IScrapeRecordRepository
from ratings_wrapper.core.value_objects import FetchOutcome, FetchStatus, MediaRef
from ratings_wrapper.utils.constants import SCRAPE_FOUND_TTL, SCRAPE_NOT_FOUND_TTL


@dataclass(frozen=True)
class SeriesRatings:
    """
    Notes obtenues par scraping.

    Attributs :
        values : Valeurs normalisees (RT et/ou MC)
        transient : Au moins un site a echoue de facon transitoire
    """

    values: tuple[SourceValue, ...] = ()
    transient: bool = False


class SeriesRatingsService:
    """Orchestration des scrapers, du cache et de l'historique de scraping."""

    def __init__(
        self,
        cache: ICacheStore,
        scrapers: list[SeriesScraper],
        record_repository: IScrapeRecordRepository,
        found_ttl: float = SCRAPE_FOUND_TTL,
        not_found_ttl: float = SCRAPE_NOT_FOUND_TTL,
        metrics: Optional[IMetricsSink] = None,
    ) -> None:
        self._cache = cache
        self._scrapers = {scraper.site: scraper for scraper in scrapers}
        self._records = record_repository
        self._found_ttl = found_ttl
        self._not_found_ttl = not_found_ttl
        self._metrics = metrics

    def cache_key(self, site: str, ref: MediaRef) -> str:
        return self._cache.make_key(f"scrape:{site}", ref.canonical_id)

    async def get_series_ratings(
        self,
        ref: MediaRef,
        title: Optional[str],
        year: Optional[int] = None,
        want_rt: bool = True,
        want_mc: bool = True,
    ) -> SeriesRatings:
        """
        Recupere les notes RT et/ou MC d'une serie.

        Args:
            ref: Reference canonique de la serie
            title: Titre utilise pour construire les URL
            year: Annee de premiere diffusion
            want_rt: Chercher la note Rotten Tomatoes
            want_mc: Chercher le Metascore

        Returns:
            SeriesRatings (vide si aucun titre)
        """
        if not title:
            logger.debug(f"Pas de titre pour {ref.canonical_id}, scraping ignore")
            return SeriesRatings()

        wanted = []
        if want_rt:
            wanted.append(RatingSource.OMDB_RT)
        if want_mc:
            wanted.append(RatingSource.OMDB_MC)

        values: list[SourceValue] = []
        transient = False
        for source in wanted:
            scraper = self._scrapers.get(source.value)
            if scraper is None:
                continue
            lookup = await self._cache.get_or_fetch(
                self.cache_key(scraper.site, ref),
                partial(self._scrape, scraper, ref, title, year),
                ttl=self._found_ttl,
                negative_ttl=self._not_found_ttl,
            )
            if not lookup.found:
                transient = True
                continue
            if lookup.negative:
                continue
            result: ScrapeResult = lookup.payload
            if result.critics_score is not None:
                values.append(
                    SourceValue.from_raw(
                        source, result.critics_score, RatingScale.HUNDRED, origin="scraper"
                    )
                )
        return SeriesRatings(tuple(values), transient)

    async def _scrape(
        self,
        scraper: SeriesScraper,
        ref: MediaRef,
        title: str,
        year: Optional[int],
    ) -> FetchOutcome:
        result = await scraper.scrape(title, year)
        if self._metrics is not None:
            self._metrics.increment(
                "scraper.result", site=scraper.site, status=result.status.value
            )

        if result.status is FetchStatus.FOUND:
            score = result.critics_score
            if score is None:
                score = result.audience_score
            await self._update_record(
                partial(self._records.record_success, ref.canonical_id, scraper.site, result.url, score)
            )
            return FetchOutcome.found(result)
        if result.status is FetchStatus.NOT_FOUND:
            await self._update_record(
                partial(self._records.record_failure, ref.canonical_id, scraper.site)
            )
            return FetchOutcome.not_found(f"{scraper.site}_not_found")
        return FetchOutcome.transient(f"{scraper.site}_unavailable")

    async def _update_record(self, operation) -> None:
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, operation)
        except SQLAlchemyError as e:
            logger.warning(f"Historique de scraping non mis a jour: {e}")
