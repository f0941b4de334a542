"""
Constantes partagees : durees de vie du cache, seuils de couleur, en-tetes HTTP.
"""

# Durees de vie (secondes)
HOUR = 60 * 60
DAY = 24 * HOUR

SOURCE_TTL = 7 * DAY
SOURCE_NEGATIVE_TTL = 7 * DAY
CONSOLIDATED_TTL = DAY
CONSOLIDATED_NEGATIVE_TTL = DAY
SCRAPE_FOUND_TTL = 7 * DAY
SCRAPE_NOT_FOUND_TTL = DAY

# Seuils de l'indicateur couleur (borne incluse vers le haut)
COLOR_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (9.0, "excellent"),
    (8.0, "great"),
    (7.0, "good"),
    (6.0, "okay"),
    (5.0, "mediocre"),
)

# Navigateurs de bureau recents pour le scraping
USER_AGENTS: tuple[str, ...] = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/17.2 Safari/605.1.15",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
)

BROWSER_HEADERS: dict[str, str] = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.9",
    "Cache-Control": "no-cache",
    "Pragma": "no-cache",
    "Upgrade-Insecure-Requests": "1",
}

# Namespace de cache des notes consolidees
CONSOLIDATED_NAMESPACE = "consolidated"
