"""
Base commune des clients de notes : cache d'abord, puis appel en direct.

Flux d'un appel fetch_by_canonical_id :
1. Reference non prise en charge ou client non configure -> NOT_FOUND, sans cache ni reseau
2. Lecture du cache (cle "v{version}:{source}:{cle canonique}")
3. Absence -> appel en direct (via le limiteur si configure), un seul par cle
4. FOUND -> entree positive ; NOT_FOUND -> entree negative ; erreur transitoire -> rien

Les erreurs reseau et HTTP sont converties en etats terminaux ici :
- 404 -> NOT_FOUND
- 429, 5xx, 401/403, timeouts, erreurs de transport, file pleine -> TRANSIENT_ERROR
"""

from abc import abstractmethod
from dataclasses import replace
from typing import Optional

import httpx
from loguru import logger

from ratings_wrapper.adapters.api.rate_limiter import QueueFullError, ScrapingRateLimiter
from ratings_wrapper.adapters.api.retry import RateLimitError, request_with_retry
from ratings_wrapper.core.ports.cache import ICacheStore
from ratings_wrapper.core.ports.metrics import IMetricsSink
from ratings_wrapper.core.ports.rating_sources import IRatingSource, SourceLookup
from ratings_wrapper.core.value_objects import CacheLookup, FetchOutcome, FetchStatus, MediaRef
from ratings_wrapper.utils.constants import (
    CONSOLIDATED_NAMESPACE,
    SOURCE_NEGATIVE_TTL,
    SOURCE_TTL,
)


class SourceUnavailableError(Exception):
    """La source refuse temporairement de repondre (cle invalide, quota epuise)."""


class CachedRatingClient(IRatingSource):
    """
    Client de notes avec cache-first et classification des erreurs.

    Les sous-classes implementent _fetch_live(), qui retourne un
    FetchOutcome dont le payload est un SourceLookup FOUND, et peuvent
    laisser remonter les exceptions httpx et RateLimitError. Une structure
    de reponse inattendue (KeyError, TypeError, AttributeError) est traitee
    comme une reponse illisible.
    """

    def __init__(
        self,
        cache: ICacheStore,
        ttl: float = SOURCE_TTL,
        negative_ttl: float = SOURCE_NEGATIVE_TTL,
        metrics: Optional[IMetricsSink] = None,
        limiter: Optional[ScrapingRateLimiter] = None,
        max_attempts: int = 1,
        retry_max_wait: int = 30,
    ) -> None:
        self._cache = cache
        self._ttl = ttl
        self._negative_ttl = negative_ttl
        self._metrics = metrics
        self._limiter = limiter
        self._max_attempts = max_attempts
        self._retry_max_wait = retry_max_wait
        self._timeout = 10.0
        self._client: Optional[httpx.AsyncClient] = None

    @abstractmethod
    async def _fetch_live(self, ref: MediaRef) -> FetchOutcome:
        """Interroge la source en direct, sans cache."""
        ...

    def _get_client(self) -> httpx.AsyncClient:
        """Client HTTP par defaut (lazy init), surcharge par les clients d'API."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """
        Execute une requete sur le client de la source.

        Les 429 sont relances avec backoff exponentiel jusqu'a max_attempts
        tentatives avant de remonter en RateLimitError.
        """
        return await request_with_retry(
            self._get_client(),
            method,
            url,
            max_attempts=self._max_attempts,
            max_wait=self._retry_max_wait,
            **kwargs,
        )

    def cache_key(self, ref: MediaRef) -> str:
        return self._cache.make_key(self.name, ref.cache_key)

    async def fetch_by_canonical_id(self, ref: MediaRef) -> SourceLookup:
        if not self.enabled or not self.supports(ref):
            return SourceLookup.not_found()

        lookup = await self._cache.get_or_fetch(
            self.cache_key(ref),
            lambda: self._guarded_fetch(ref),
            ttl=self._ttl,
            negative_ttl=self._negative_ttl,
        )
        return self._to_source_lookup(lookup)

    def _to_source_lookup(self, lookup: CacheLookup) -> SourceLookup:
        if not lookup.found:
            return SourceLookup.transient()
        if lookup.negative:
            return SourceLookup(FetchStatus.NOT_FOUND, stale=lookup.stale)
        return replace(lookup.payload, stale=lookup.stale)

    def _increment(self, name: str) -> None:
        if self._metrics is not None:
            self._metrics.increment(name, source=self.name)

    async def _guarded_fetch(self, ref: MediaRef) -> FetchOutcome:
        try:
            if self._limiter is not None:
                outcome = await self._limiter.execute(
                    self.name, lambda: self._fetch_live(ref)
                )
            else:
                outcome = await self._fetch_live(ref)
        except RateLimitError as e:
            logger.warning(f"{self.name}: rate limit atteint pour {ref.cache_key} ({e})")
            self._increment("source.rate_limited")
            return FetchOutcome.transient("rate_limited")
        except QueueFullError as e:
            logger.warning(f"{self.name}: {e}")
            return FetchOutcome.transient("queue_full")
        except SourceUnavailableError as e:
            logger.warning(f"{self.name}: source indisponible: {e}")
            self._increment("source.error")
            return FetchOutcome.transient("unavailable")
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            if status == 404:
                logger.debug(f"{self.name}: {ref.cache_key} introuvable (404)")
                outcome = FetchOutcome.not_found("http_404")
            else:
                if status in (401, 403):
                    logger.warning(f"{self.name}: authentification refusee (HTTP {status})")
                else:
                    logger.warning(f"{self.name}: erreur HTTP {status} pour {ref.cache_key}")
                self._increment("source.error")
                return FetchOutcome.transient(f"http_{status}")
        except httpx.TimeoutException:
            logger.warning(f"{self.name}: timeout pour {ref.cache_key}")
            self._increment("source.timeout")
            return FetchOutcome.transient("timeout")
        except httpx.TransportError as e:
            logger.warning(f"{self.name}: erreur reseau pour {ref.cache_key}: {e}")
            self._increment("source.error")
            return FetchOutcome.transient("transport")
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            # Reponse illisible, structure inattendue ou note hors bornes
            logger.warning(f"{self.name}: reponse inexploitable pour {ref.cache_key}: {e}")
            outcome = FetchOutcome.not_found("parse_error")

        if not outcome.is_transient:
            self._increment("source.fetched")
            await self._invalidate_consolidated(ref)
        return outcome

    async def _invalidate_consolidated(self, ref: MediaRef) -> None:
        await self._cache.delete(self._cache.make_key(CONSOLIDATED_NAMESPACE, ref.cache_key))

    async def close(self) -> None:
        """Ferme le client HTTP."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
