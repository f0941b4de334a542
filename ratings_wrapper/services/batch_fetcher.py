"""
Recuperation par lots bornee.

Les elements connus comme sans note sont ecartes avant tout envoi.
Les autres sont traites par fenetres de taille fixe : chaque fenetre
s'execute en parallele et se termine avant la suivante. Une courte pause
separe les fenetres (plus longue apres la premiere, aucune apres la derniere).

Chaque element a son propre delai maximum ; un echec ou un depassement
rend l'element absent du resultat, le lot ne leve jamais d'exception.
"""

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, Generic, Optional, TypeVar

from loguru import logger

from ratings_wrapper.core.ports.metrics import IMetricsSink
from ratings_wrapper.core.value_objects import MediaItem

T = TypeVar("T")


class BatchFetcher(Generic[T]):
    """
    Execution par fenetres d'une fonction de recuperation unitaire.

    Example:
        fetcher = BatchFetcher(engine.consolidate, engine.is_known_absent, concurrency=10)
        ratings = await fetcher.fetch_batch(items)  # {item_id: ConsolidatedRating}
    """

    def __init__(
        self,
        fetch_one: Callable[[MediaItem], Awaitable[Optional[T]]],
        is_known_absent: Optional[Callable[[MediaItem], Awaitable[bool]]] = None,
        concurrency: int = 10,
        first_window_delay: float = 0.3,
        window_delay: float = 0.05,
        item_timeout: float = 25.0,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        metrics: Optional[IMetricsSink] = None,
    ) -> None:
        self._fetch_one = fetch_one
        self._is_known_absent = is_known_absent
        self._concurrency = concurrency
        self._first_window_delay = first_window_delay
        self._window_delay = window_delay
        self._item_timeout = item_timeout
        self._sleep = sleep
        self._metrics = metrics

    async def _known_absent(self, item: MediaItem) -> bool:
        if self._is_known_absent is None:
            return False
        try:
            return await self._is_known_absent(item)
        except Exception as e:
            logger.warning(f"Filtre d'absence en erreur pour {item.id}: {e!r}")
            return False

    async def _fetch_item(self, item: MediaItem) -> Optional[T]:
        try:
            return await asyncio.wait_for(self._fetch_one(item), timeout=self._item_timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Delai depasse pour {item.id} ({self._item_timeout}s)")
            return None
        except Exception:
            logger.exception(f"Echec de la recuperation de {item.id}")
            return None

    async def fetch_batch(
        self, items: Iterable[MediaItem], concurrency: Optional[int] = None
    ) -> dict[str, T]:
        """
        Recupere un lot d'elements.

        Args:
            items: Elements a traiter (les doublons d'identifiant sont ignores)
            concurrency: Taille de fenetre, remplace la valeur par defaut

        Returns:
            Dictionnaire {id: valeur} ne contenant que les elements trouves
        """
        size = concurrency or self._concurrency
        if size < 1:
            raise ValueError("concurrency doit etre >= 1")

        unique: dict[str, MediaItem] = {}
        for item in items:
            unique.setdefault(item.id, item)

        pending: list[MediaItem] = []
        skipped = 0
        for item in unique.values():
            if await self._known_absent(item):
                skipped += 1
            else:
                pending.append(item)

        windows = [pending[i:i + size] for i in range(0, len(pending), size)]
        results: dict[str, T] = {}
        for index, window in enumerate(windows):
            values = await asyncio.gather(*(self._fetch_item(item) for item in window))
            for item, value in zip(window, values):
                if value is not None:
                    results[item.id] = value
            if index < len(windows) - 1:
                await self._sleep(self._first_window_delay if index == 0 else self._window_delay)

        if self._metrics is not None:
            self._metrics.increment("batch.items", len(unique))
            self._metrics.increment("batch.skipped", skipped)
            self._metrics.increment("batch.found", len(results))
        logger.info(
            f"Lot traite: {len(results)}/{len(unique)} avec note, "
            f"{skipped} ecartes, {len(windows)} fenetres"
        )
        return results
