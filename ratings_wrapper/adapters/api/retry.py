"""
Requetes HTTP avec gestion du rate limiting et retry optionnel.

Les reponses 429 sont converties en RateLimitError et relancees avec un
backoff exponentiel. Les clients de notes sont sensibles a la latence :
le nombre de tentatives et l'attente maximale viennent de la configuration
(api_max_attempts, api_retry_max_wait) ; une fois les tentatives epuisees,
l'erreur remonte pour etre traitee comme echec transitoire.

Usage:
    response = await request_with_retry(client, "GET", url, max_attempts=3)
"""

from typing import Optional

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_random_exponential,
)


class RateLimitError(Exception):
    """
    Exception levee quand l'API retourne 429 Too Many Requests.

    Attributes:
        retry_after: Nombre de secondes a attendre (depuis le header Retry-After),
                     ou None si non specifie.
    """

    def __init__(self, retry_after: Optional[int] = None) -> None:
        self.retry_after = retry_after
        super().__init__(f"Rate limited. Retry after: {retry_after}s")


def _parse_retry_after(value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        # Format date HTTP : non exploite
        return None


def with_retry(max_attempts: int = 1, max_wait: int = 30):
    """
    Decorateur pour relancer sur RateLimitError avec backoff exponentiel.

    Args:
        max_attempts: Nombre maximum de tentatives (defaut: 1, pas de relance)
        max_wait: Delai maximum entre les tentatives en secondes

    Returns:
        Decorateur a appliquer sur une fonction async
    """
    return retry(
        retry=retry_if_exception_type(RateLimitError),
        wait=wait_random_exponential(multiplier=1, min=1, max=max_wait),
        stop=stop_after_attempt(max_attempts),
        reraise=True,
    )


async def request_with_retry(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    max_attempts: int = 1,
    max_wait: int = 30,
    raise_for_status: bool = True,
    **kwargs,
) -> httpx.Response:
    """
    Execute une requete HTTP, en convertissant 429 en RateLimitError.

    Args:
        client: Client httpx async a utiliser
        method: Methode HTTP (GET, POST, etc.)
        url: URL a appeler
        max_attempts: Nombre maximum de tentatives sur 429
        max_wait: Delai maximum entre deux tentatives en secondes
        raise_for_status: Lever httpx.HTTPStatusError pour les autres 4xx/5xx
        **kwargs: Arguments supplementaires passes a client.request()

    Returns:
        httpx.Response en cas de succes

    Raises:
        RateLimitError: Si 429 apres epuisement des tentatives
        httpx.HTTPStatusError: Pour les autres erreurs HTTP
        httpx.TimeoutException, httpx.TransportError: Erreurs reseau
    """

    @with_retry(max_attempts=max_attempts, max_wait=max_wait)
    async def _do_request() -> httpx.Response:
        response = await client.request(method, url, **kwargs)
        if response.status_code == 429:
            raise RateLimitError(_parse_retry_after(response.headers.get("Retry-After")))
        if raise_for_status:
            response.raise_for_status()
        return response

    return await _do_request()
