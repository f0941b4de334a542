"""
Fixtures communes aux tests des scrapers.
"""

import pytest

from ratings_wrapper.adapters.api.rate_limiter import ScrapingRateLimiter
from ratings_wrapper.adapters.scrapers import MetacriticScraper, RottenTomatoesScraper


@pytest.fixture
def limiter() -> ScrapingRateLimiter:
    """Limiteur sans espacement pour ne pas ralentir les tests."""
    limiter = ScrapingRateLimiter(poll_interval=0.01)
    for site in (RottenTomatoesScraper.site, MetacriticScraper.site):
        limiter.register(site, max_concurrent=3, min_delay=0.0, max_delay=0.0)
    return limiter
