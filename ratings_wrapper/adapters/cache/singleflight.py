"""
Regroupement des appels concurrents sur une meme cle.

Le premier appelant lance la tache ; les suivants attendent la meme tache.
La cle est retiree des taches en cours a la fin de la tache, qu'elle
reussisse ou echoue.
"""

import asyncio
from typing import Any, Awaitable, Callable

from loguru import logger


class SingleFlight:
    """Table des taches en cours par cle."""

    def __init__(self) -> None:
        self._inflight: dict[str, asyncio.Task] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._inflight

    def __len__(self) -> int:
        return len(self._inflight)

    def _start(self, key: str, fn: Callable[[], Awaitable[Any]]) -> asyncio.Task:
        task = asyncio.ensure_future(fn())
        self._inflight[key] = task
        task.add_done_callback(_forget_on_done(self._inflight, key))
        return task

    async def do(self, key: str, fn: Callable[[], Awaitable[Any]]) -> tuple[Any, bool]:
        """
        Execute fn une seule fois pour tous les appelants concurrents de key.

        L'annulation d'un appelant n'annule pas la tache partagee.

        Returns:
            Tuple (resultat, partage) ou partage vaut True si l'appelant
            a rejoint une tache deja en cours
        """
        task = self._inflight.get(key)
        shared = task is not None
        if task is None:
            task = self._start(key, fn)
        return await asyncio.shield(task), shared

    def schedule(self, key: str, fn: Callable[[], Awaitable[Any]]) -> None:
        """Lance fn en arriere-plan, sauf si une tache est deja en cours pour key."""
        if key in self._inflight:
            return
        task = self._start(key, fn)
        task.add_done_callback(_log_background_failure)


def _forget_on_done(inflight: dict[str, asyncio.Task], key: str):
    def _forget(task: asyncio.Task) -> None:
        if inflight.get(key) is task:
            del inflight[key]
    return _forget


def _log_background_failure(task: asyncio.Task) -> None:
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.warning(f"Rafraichissement en arriere-plan echoue: {error!r}")
