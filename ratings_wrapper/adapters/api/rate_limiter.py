"""
Limiteur de debit pour les sites scrapes.

Pour chaque source enregistree :
- au plus max_concurrent requetes en cours
- un espacement tire au hasard dans [min_delay, max_delay] entre deux envois,
  mesure depuis le dernier envoi de la source
- une file d'attente bornee : au-dela de max_queue appelants en attente,
  QueueFullError est levee immediatement

L'attente d'un creneau se fait par sondage (poll_interval), sans boucle active.
L'horloge, la fonction de sommeil et le generateur aleatoire sont injectables.

Usage:
    limiter = ScrapingRateLimiter()
    limiter.register("rottenTomatoes", max_concurrent=3, min_delay=1.0, max_delay=3.0)
    response = await limiter.execute("rottenTomatoes", lambda: client.get(url))
"""

import asyncio
import random
import time
from typing import Any, Awaitable, Callable, Optional, TypeVar

from loguru import logger

from ratings_wrapper.core.entities import RateLimitState
from ratings_wrapper.core.ports.metrics import IMetricsSink

T = TypeVar("T")


class QueueFullError(Exception):
    """
    Exception levee quand la file d'attente d'une source est pleine.

    Attributes:
        source: Source saturee
        depth: Nombre d'appelants deja en attente
    """

    def __init__(self, source: str, depth: int) -> None:
        self.source = source
        self.depth = depth
        super().__init__(f"File d'attente pleine pour {source} ({depth} en attente)")


class ScrapingRateLimiter:
    """Limiteur de concurrence et d'espacement par source."""

    def __init__(
        self,
        max_queue: int = 50,
        poll_interval: float = 0.5,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        rng: Optional[random.Random] = None,
        metrics: Optional[IMetricsSink] = None,
    ) -> None:
        self._max_queue = max_queue
        self._poll_interval = poll_interval
        self._clock = clock
        self._sleep = sleep
        self._rng = rng or random.Random()
        self._metrics = metrics
        self._states: dict[str, RateLimitState] = {}
        self._dispatch_locks: dict[str, asyncio.Lock] = {}

    def register(
        self,
        source: str,
        max_concurrent: int = 3,
        min_delay: float = 1.0,
        max_delay: float = 3.0,
    ) -> None:
        """Enregistre (ou reconfigure) une source."""
        self._states[source] = RateLimitState(
            max_concurrent=max_concurrent,
            min_delay=min_delay,
            max_delay=max_delay,
        )
        self._dispatch_locks[source] = asyncio.Lock()

    def state(self, source: str) -> RateLimitState:
        """
        Retourne l'etat d'une source.

        Raises:
            ValueError: Si la source n'est pas enregistree
        """
        try:
            return self._states[source]
        except KeyError:
            raise ValueError(f"Source inconnue du limiteur: {source}") from None

    def stats(self) -> dict[str, dict[str, Any]]:
        """Instantane des compteurs de chaque source."""
        return {
            source: {
                "active": state.active_count,
                "waiting": state.waiting,
                "max_concurrent": state.max_concurrent,
                "last_request_at": state.last_request_at,
            }
            for source, state in self._states.items()
        }

    def _report_depth(self, source: str, state: RateLimitState) -> None:
        if self._metrics is not None:
            self._metrics.gauge("rate_limiter.queue_depth", state.waiting, source=source)

    async def execute(self, source: str, fn: Callable[[], Awaitable[T]]) -> T:
        """
        Execute fn des qu'un creneau est disponible pour la source.

        Raises:
            ValueError: Si la source n'est pas enregistree
            QueueFullError: Si la file d'attente est pleine
        """
        state = self.state(source)
        if state.waiting >= self._max_queue:
            logger.warning(f"File d'attente pleine pour {source}, requete abandonnee")
            if self._metrics is not None:
                self._metrics.increment("rate_limiter.rejected", source=source)
            raise QueueFullError(source, state.waiting)

        state.waiting += 1
        self._report_depth(source, state)
        try:
            while not state.has_capacity:
                await self._sleep(self._poll_interval)
        finally:
            state.waiting -= 1
            self._report_depth(source, state)

        state.active_count += 1
        try:
            await self._wait_for_spacing(source, state)
            return await fn()
        finally:
            state.active_count -= 1

    async def _wait_for_spacing(self, source: str, state: RateLimitState) -> None:
        # Les envois d'une meme source sont serialises pour garantir l'espacement
        async with self._dispatch_locks[source]:
            delay = self._rng.uniform(state.min_delay, state.max_delay)
            if state.last_request_at is not None:
                elapsed = self._clock() - state.last_request_at
                if elapsed < delay:
                    await self._sleep(delay - elapsed)
            state.last_request_at = self._clock()
