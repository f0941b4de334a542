"""
Scraper Rotten Tomatoes pour les series (les films passent par OMDB).

Notes sur 0-100 : Tomatometer (critiques) et Popcornmeter (public).
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


class RottenTomatoesScraper(SeriesScraper):
    """Scraper des pages /tv/ de Rotten Tomatoes."""

    site = "rottenTomatoes"
    base_url = "https://www.rottentomatoes.com"

    def candidate_urls(self, title: str, year: Optional[int]) -> list[str]:
        """
        URL candidates, dans l'ordre : avec annee, sans annee, avec annee et "_2".
        """
        slug = slugify(title, "_")
        urls = []
        if year:
            urls.append(f"{self.base_url}/tv/{slug}_{year}")
        urls.append(f"{self.base_url}/tv/{slug}")
        if year:
            urls.append(f"{self.base_url}/tv/{slug}_{year}_2")
        return urls

    def parse(self, html: str) -> tuple[Optional[float], Optional[float]]:
        soup = BeautifulSoup(html, "html.parser")

        critics = audience = None
        for data in iter_json_ld(soup):
            rating = first_object(data.get("aggregateRating"))
            if critics is None:
                critics = parse_number(rating.get("ratingValue"), 100)
            audience_data = first_object(data.get("audience"))
            if audience is None:
                audience = parse_number(audience_data.get("audienceScore"), 100)

        # Repli sur les elements du DOM
        if critics is None:
            node = soup.select_one('rt-text[slot="criticsScore"]')
            critics = parse_number(node.get_text(strip=True), 100) if node else None
        if audience is None:
            node = soup.select_one('rt-text[slot="audienceScore"]')
            audience = parse_number(node.get_text(strip=True), 100) if node else None

        if critics is None and audience is None:
            raise ScrapeParseError("ni Tomatometer ni score public")
        return critics, audience
