"""
Base commune des scrapers de notes de series (Rotten Tomatoes, Metacritic).

Algorithme :
1. Construction d'un slug a partir du titre, puis d'une liste ordonnee d'URL candidates
2. Chaque candidate passe par le limiteur de debit
3. 404 -> candidate suivante ; 200 avec note -> FOUND ; 200 sans note -> erreur
   de parsing journalisee, candidate suivante
4. Erreurs reseau (timeout, connexion) : 2 relances sur la meme URL, 2 s d'attente
5. Resultat terminal : FOUND, NOT_FOUND (au moins une reponse definitive) ou
   TRANSIENT_ERROR (file du limiteur pleine, ou uniquement des erreurs reseau)

Le parsing essaie d'abord les donnees structurees JSON-LD, puis le DOM.
"""

import json
import random
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Iterator, Optional

import httpx
from bs4 import BeautifulSoup
from loguru import logger
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from ratings_wrapper.adapters.api.rate_limiter import QueueFullError, ScrapingRateLimiter
from ratings_wrapper.core.value_objects import FetchStatus
from ratings_wrapper.utils.constants import BROWSER_HEADERS, USER_AGENTS

_NETWORK_ERRORS = (httpx.TimeoutException, httpx.TransportError)


class ScrapeParseError(Exception):
    """Page recue (HTTP 200) sans note exploitable."""


@dataclass(frozen=True)
class ScrapeResult:
    """
    Resultat terminal d'un scraping.

    Attributs :
        status : FOUND, NOT_FOUND ou TRANSIENT_ERROR
        critics_score : Note critique (echelle native du site)
        audience_score : Note du public (echelle native du site)
        url : Page ou la note a ete trouvee
    """

    status: FetchStatus
    critics_score: Optional[float] = None
    audience_score: Optional[float] = None
    url: Optional[str] = None


def slugify(title: str, delimiter: str) -> str:
    """
    Construit un slug d'URL.

    Minuscules, ":" et "_" remplaces par un separateur, apostrophes supprimees,
    espaces remplaces par le delimiteur, autres caracteres supprimes,
    delimiteurs multiples fusionnes et retires aux extremites.
    """
    slug = title.lower()
    slug = re.sub(r"[:_]", " ", slug)
    slug = re.sub(r"['’]", "", slug)
    slug = re.sub(r"\s+", delimiter, slug)
    slug = re.sub(rf"[^a-z0-9{re.escape(delimiter)}]", "", slug)
    slug = re.sub(rf"{re.escape(delimiter)}+", delimiter, slug)
    return slug.strip(delimiter)


def iter_json_ld(soup: BeautifulSoup) -> Iterator[dict[str, Any]]:
    """Parcourt les objets JSON-LD de la page (les blocs invalides sont ignores)."""
    for script in soup.find_all("script", type="application/ld+json"):
        try:
            data = json.loads(script.string or "")
        except json.JSONDecodeError:
            continue
        items = data if isinstance(data, list) else [data]
        for item in items:
            if isinstance(item, dict):
                yield item


def first_object(value: Any) -> dict[str, Any]:
    """
    Premier objet d'une valeur JSON-LD.

    Une propriete comme aggregateRating ou review peut etre un objet ou une
    liste d'objets ; toute autre forme donne un objet vide.
    """
    if isinstance(value, dict):
        return value
    if isinstance(value, list):
        return next((item for item in value if isinstance(item, dict)), {})
    return {}


def parse_number(value: Any, maximum: float) -> Optional[float]:
    """Convertit "83", "83%" ou 8.1 en nombre si compris entre 0 et maximum."""
    if value is None:
        return None
    match = re.match(r"^\s*(\d+(?:\.\d+)?)\s*%?\s*$", str(value))
    if not match:
        return None
    number = float(match.group(1))
    return number if 0 <= number <= maximum else None


class SeriesScraper(ABC):
    """
    Scraper de notes d'une serie sur un site.

    Les sous-classes definissent le site, l'URL de base, les URL candidates
    et le parsing d'une page.
    """

    site: str = ""
    base_url: str = ""

    def __init__(
        self,
        limiter: ScrapingRateLimiter,
        timeout: float = 15.0,
        max_retries: int = 2,
        retry_wait: float = 2.0,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._limiter = limiter
        self._timeout = timeout
        self._max_retries = max_retries
        self._retry_wait = retry_wait
        self._rng = rng or random.Random()
        self._client: Optional[httpx.AsyncClient] = None

    @abstractmethod
    def candidate_urls(self, title: str, year: Optional[int]) -> list[str]:
        ...

    @abstractmethod
    def parse(self, html: str) -> tuple[Optional[float], Optional[float]]:
        """
        Extrait (note critique, note public) d'une page.

        Raises:
            ScrapeParseError: Si aucune note n'est trouvee
        """
        ...

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                follow_redirects=True,
            )
        return self._client

    def _headers(self) -> dict[str, str]:
        return {
            **BROWSER_HEADERS,
            "User-Agent": self._rng.choice(USER_AGENTS),
            "Referer": self.base_url,
        }

    async def _get_with_retry(self, url: str) -> httpx.Response:
        async for attempt in AsyncRetrying(
            retry=retry_if_exception_type(_NETWORK_ERRORS),
            wait=wait_fixed(self._retry_wait),
            stop=stop_after_attempt(self._max_retries + 1),
            before_sleep=lambda state: logger.warning(
                f"[{self.site}] Erreur reseau, relance "
                f"({state.attempt_number}/{self._max_retries}): {url}"
            ),
            reraise=True,
        ):
            with attempt:
                return await self._get_client().get(url, headers=self._headers())

    async def scrape(self, title: Optional[str], year: Optional[int] = None) -> ScrapeResult:
        """
        Cherche la note d'une serie en essayant chaque URL candidate.

        Args:
            title: Titre de la serie
            year: Annee de premiere diffusion (optionnelle)

        Returns:
            ScrapeResult terminal
        """
        if not title:
            logger.warning(f"[{self.site}] Aucun titre fourni")
            return ScrapeResult(FetchStatus.NOT_FOUND)

        definitive = False
        for url in self.candidate_urls(title, year):
            try:
                response = await self._limiter.execute(
                    self.site, lambda url=url: self._get_with_retry(url)
                )
            except QueueFullError as e:
                logger.warning(f"[{self.site}] {e}")
                return ScrapeResult(FetchStatus.TRANSIENT_ERROR)
            except _NETWORK_ERRORS as e:
                logger.warning(f"[{self.site}] Echec reseau pour {url}: {e!r}")
                continue

            if response.status_code == 404:
                logger.debug(f"[{self.site}] 404: {url}")
                definitive = True
                continue
            if response.status_code != 200:
                logger.debug(f"[{self.site}] HTTP {response.status_code}: {url}")
                continue

            definitive = True
            try:
                critics, audience = self.parse(response.text)
            except ScrapeParseError as e:
                logger.warning(f"[{self.site}] Page sans note exploitable {url}: {e}")
                continue
            except Exception:
                logger.exception(f"[{self.site}] Structure de page inattendue: {url}")
                continue

            logger.info(
                f"[{self.site}] Note trouvee pour '{title}': "
                f"critiques={critics}, public={audience}"
            )
            return ScrapeResult(FetchStatus.FOUND, critics, audience, url)

        if definitive:
            logger.info(f"[{self.site}] Aucune note pour '{title}' ({year or 'sans annee'})")
            return ScrapeResult(FetchStatus.NOT_FOUND)
        return ScrapeResult(FetchStatus.TRANSIENT_ERROR)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
