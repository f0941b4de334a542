"""
Scraper Metacritic pour les series.

Metascore sur 0-100, note des utilisateurs sur 0-10.
"""

from typing import Optional

from bs4 import BeautifulSoup

from ratings_wrapper.adapters.scrapers.base import (
    ScrapeParseError,
    SeriesScraper,
    first_object,
    iter_json_ld,
    parse_number,
    slugify,
)

METASCORE_SELECTORS = (
    ".c-siteReviewScore_background-critic_medium span",
    ".c-productScoreInfo_scoreNumber span",
    'div[class*="metascore"] span',
    'a[class*="c-productScoreInfo"] span',
)

USER_SCORE_SELECTORS = (
    ".c-siteReviewScore_background-user span",
    'div[class*="userscore"] span',
)


def _first_match(soup: BeautifulSoup, selectors: tuple[str, ...], maximum: float) -> Optional[float]:
    for selector in selectors:
        node = soup.select_one(selector)
        if node is None:
            continue
        value = parse_number(node.get_text(strip=True), maximum)
        if value is not None:
            return value
    return None


class MetacriticScraper(SeriesScraper):
    """Scraper des pages /tv/ de Metacritic."""

    site = "metacritic"
    base_url = "https://www.metacritic.com"

    def candidate_urls(self, title: str, year: Optional[int]) -> list[str]:
        """
        URL candidates, dans l'ordre : sans annee, avec annee, sans "the-".
        """
        slug = slugify(title, "-")
        urls = [f"{self.base_url}/tv/{slug}"]
        if year:
            urls.append(f"{self.base_url}/tv/{slug}-{year}")
        if slug.startswith("the-"):
            urls.append(f"{self.base_url}/tv/{slug[4:]}")
        return urls

    def parse(self, html: str) -> tuple[Optional[float], Optional[float]]:
        soup = BeautifulSoup(html, "html.parser")

        metascore = user_score = None
        for data in iter_json_ld(soup):
            rating = first_object(data.get("aggregateRating"))
            if metascore is None:
                metascore = parse_number(rating.get("ratingValue"), 100)
            review_rating = first_object(first_object(data.get("review")).get("reviewRating"))
            if user_score is None:
                user_score = parse_number(review_rating.get("ratingValue"), 10)

        if metascore is None:
            metascore = _first_match(soup, METASCORE_SELECTORS, 100)
        if user_score is None:
            user_score = _first_match(soup, USER_SCORE_SELECTORS, 10)

        if metascore is None and user_score is None:
            raise ScrapeParseError("ni Metascore ni note utilisateurs")
        return metascore, user_score
