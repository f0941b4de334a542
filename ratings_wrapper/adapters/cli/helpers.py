"""
Utilitaires partages pour les commandes CLI.

Ce module fournit :
- async_command : decorateur transformant une fonction async en commande sync
- close_container : fermeture des clients HTTP et du cache
- console : instance Rich Console partagee
"""

import asyncio
import inspect
from functools import wraps

from rich.console import Console

from ratings_wrapper.container import Container

console = Console()


async def close_container(container: Container) -> None:
    """Ferme les clients HTTP, les scrapers et le cache du container."""
    for client in (
        container.local_mirror(),
        container.tmdb_client(),
        container.omdb_client(),
        container.mal_client(),
        container.rotten_tomatoes_scraper(),
        container.metacritic_scraper(),
    ):
        await client.close()
    container.cache().close()
    container.shutdown_resources()


def async_command(func):
    """
    Transforme une fonction async en commande sync via asyncio.run().

    Preserve les annotations Typer pour que les options/arguments soient
    correctement interpretes.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        return asyncio.run(func(*args, **kwargs))
    wrapper.__signature__ = inspect.signature(func)
    wrapper.__annotations__ = func.__annotations__
    return wrapper
