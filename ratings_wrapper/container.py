"""
Container d'injection de dependances via dependency-injector.

Centralise la construction des composants : cache a deux niveaux, limiteur
de scraping, clients de notes, scrapers, services. Le limiteur et le cache
sont des singletons du container (une instance par processus).
"""

from typing import Optional

from dependency_injector import containers, providers

from .adapters.api.mal_client import MALClient
from .adapters.api.omdb_client import OMDBClient
from .adapters.api.rate_limiter import ScrapingRateLimiter
from .adapters.api.tmdb_client import TMDBClient
from .adapters.cache import DiskCacheTier, MemoryCacheTier, TieredCache, eviction_strategy
from .adapters.imdb.local_mirror import LocalMirrorClient
from .adapters.mapping.anime_lists import AnimeListsIdMapper
from .adapters.metrics import InMemoryMetrics
from .adapters.scrapers import MetacriticScraper, RottenTomatoesScraper
from .config import Settings
from .infrastructure.persistence.database import create_db_engine, init_db, make_session_factory
from .infrastructure.persistence.repositories import SQLModelScrapeRecordRepository
from .services.batch_fetcher import BatchFetcher
from .services.consolidation import ConsolidationEngine
from .services.id_resolver import IdResolver
from .services.series_ratings import SeriesRatingsService


def build_rate_limiter(settings: Settings, metrics: InMemoryMetrics) -> ScrapingRateLimiter:
    """Cree le limiteur et enregistre les sites scrapes."""
    limiter = ScrapingRateLimiter(
        max_queue=settings.rate_limiter_max_queue,
        poll_interval=settings.rate_limiter_poll_interval,
        metrics=metrics,
    )
    for site in (RottenTomatoesScraper.site, MetacriticScraper.site):
        limiter.register(
            site,
            max_concurrent=settings.scrape_max_concurrent,
            min_delay=settings.scrape_min_delay,
            max_delay=settings.scrape_max_delay,
        )
    return limiter


def enabled_or_none(
    enabled: bool, service: SeriesRatingsService
) -> Optional[SeriesRatingsService]:
    return service if enabled else None


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        container.database.init()  # Cree les tables une fois
        fetcher = container.batch_fetcher()
        ratings = await fetcher.fetch_batch(items)
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    metrics = providers.Singleton(InMemoryMetrics)

    # Database
    db_engine = providers.Singleton(
        create_db_engine,
        database_url=config.provided.database_url,
    )
    database = providers.Resource(init_db, engine=db_engine)
    session_factory = providers.Singleton(make_session_factory, engine=db_engine)

    # Cache a deux niveaux - Singleton partage entre tous les clients
    memory_tier = providers.Singleton(
        MemoryCacheTier,
        max_entries=config.provided.memory_cache_max_entries,
        eviction=providers.Factory(
            eviction_strategy, name=config.provided.memory_cache_eviction
        ),
    )
    disk_tier = providers.Singleton(
        DiskCacheTier,
        cache_dir=config.provided.cache_dir,
        stale_grace=config.provided.stale_serve_seconds,
    )
    cache = providers.Singleton(
        TieredCache,
        fast=memory_tier,
        durable=disk_tier,
        stale_serve_seconds=config.provided.stale_serve_seconds,
        metrics=metrics,
        version=config.provided.cache_version,
    )

    rate_limiter = providers.Singleton(build_rate_limiter, settings=config, metrics=metrics)

    id_mapper = providers.Singleton(
        AnimeListsIdMapper.from_file,
        config.provided.anime_mapping_file,
    )
    id_resolver = providers.Singleton(IdResolver, id_mapper=id_mapper)

    # Clients de notes - Singleton, desactives si la cle API est absente
    local_mirror = providers.Singleton(
        LocalMirrorClient,
        session_factory=session_factory,
        cache=cache,
        ttl=config.provided.source_ttl_seconds,
        negative_ttl=config.provided.source_negative_ttl_seconds,
        metrics=metrics,
    )
    tmdb_client = providers.Singleton(
        TMDBClient,
        api_key=config.provided.tmdb_api_key,
        timeout=config.provided.tmdb_timeout,
        cache=cache,
        ttl=config.provided.source_ttl_seconds,
        negative_ttl=config.provided.source_negative_ttl_seconds,
        metrics=metrics,
        max_attempts=config.provided.api_max_attempts,
        retry_max_wait=config.provided.api_retry_max_wait,
    )
    omdb_client = providers.Singleton(
        OMDBClient,
        api_key=config.provided.omdb_api_key,
        timeout=config.provided.omdb_timeout,
        cache=cache,
        ttl=config.provided.source_ttl_seconds,
        negative_ttl=config.provided.source_negative_ttl_seconds,
        metrics=metrics,
        max_attempts=config.provided.api_max_attempts,
        retry_max_wait=config.provided.api_retry_max_wait,
    )
    mal_client = providers.Singleton(
        MALClient,
        client_id=config.provided.mal_client_id,
        timeout=config.provided.mal_timeout,
        cache=cache,
        ttl=config.provided.source_ttl_seconds,
        negative_ttl=config.provided.source_negative_ttl_seconds,
        metrics=metrics,
        max_attempts=config.provided.api_max_attempts,
        retry_max_wait=config.provided.api_retry_max_wait,
    )

    # Scrapers de secours pour les series
    rotten_tomatoes_scraper = providers.Singleton(
        RottenTomatoesScraper,
        limiter=rate_limiter,
        timeout=config.provided.scraper_timeout,
    )
    metacritic_scraper = providers.Singleton(
        MetacriticScraper,
        limiter=rate_limiter,
        timeout=config.provided.scraper_timeout,
    )

    # Repositories - Factory
    scrape_record_repository = providers.Factory(
        SQLModelScrapeRecordRepository,
        session_factory=session_factory,
    )

    # Services
    series_ratings_service = providers.Singleton(
        SeriesRatingsService,
        cache=cache,
        scrapers=providers.List(rotten_tomatoes_scraper, metacritic_scraper),
        record_repository=scrape_record_repository,
        found_ttl=config.provided.scrape_ttl_seconds,
        not_found_ttl=config.provided.scrape_not_found_ttl_seconds,
        metrics=metrics,
    )
    consolidation_engine = providers.Singleton(
        ConsolidationEngine,
        cache=cache,
        resolver=id_resolver,
        sources=providers.List(local_mirror, tmdb_client, omdb_client, mal_client),
        series_ratings=providers.Callable(
            enabled_or_none,
            enabled=config.provided.enable_scrapers,
            service=series_ratings_service,
        ),
        ttl=config.provided.consolidated_ttl_seconds,
        negative_ttl=config.provided.consolidated_negative_ttl_seconds,
        source_deadline=config.provided.source_deadline,
        metrics=metrics,
    )

    # Point d'entree de la couche HTTP - Factory pour surcharger la concurrence
    batch_fetcher = providers.Factory(
        BatchFetcher,
        fetch_one=consolidation_engine.provided.consolidate,
        is_known_absent=consolidation_engine.provided.is_known_absent,
        concurrency=config.provided.batch_concurrency,
        first_window_delay=config.provided.batch_first_window_delay,
        window_delay=config.provided.batch_window_delay,
        item_timeout=config.provided.batch_item_timeout,
        metrics=metrics,
    )
