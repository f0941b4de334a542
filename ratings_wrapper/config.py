"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe RATINGS_,
et peut optionnellement être fournie via un fichier .env.

Les clés API (TMDB, OMDB, MAL) sont optionnelles - la source correspondante est désactivée
si la clé n'est pas fournie.
"""

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ratings_wrapper.utils.constants import (
    CONSOLIDATED_NEGATIVE_TTL,
    CONSOLIDATED_TTL,
    SCRAPE_FOUND_TTL,
    SCRAPE_NOT_FOUND_TTL,
    SOURCE_NEGATIVE_TTL,
    SOURCE_TTL,
)

# Fichier .env à la racine du projet (parent de ratings_wrapper/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe RATINGS_.
    Exemple : RATINGS_BATCH_CONCURRENCY=20

    Les chemins sont automatiquement étendus (~ -> répertoire home).
    """

    model_config = SettingsConfigDict(
        env_prefix="RATINGS_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Base de données (miroir IMDb + historique de scraping)
    database_url: str = Field(default="sqlite:///ratings.db")

    # Clés API (OPTIONNELLES - source désactivée si non définie)
    tmdb_api_key: Optional[str] = Field(default=None)
    omdb_api_key: Optional[str] = Field(default=None)
    mal_client_id: Optional[str] = Field(default=None)

    # Cache
    cache_dir: Path = Field(default=Path(".cache/ratings"))
    cache_version: int = Field(default=1, ge=1)
    memory_cache_max_entries: int = Field(default=10_000, ge=1)
    memory_cache_eviction: Literal["lru", "fifo"] = Field(default="lru")
    stale_serve_seconds: int = Field(default=0, ge=0)

    # Durées de vie (secondes)
    source_ttl_seconds: int = Field(default=SOURCE_TTL, ge=1)
    source_negative_ttl_seconds: int = Field(default=SOURCE_NEGATIVE_TTL, ge=1)
    consolidated_ttl_seconds: int = Field(default=CONSOLIDATED_TTL, ge=1)
    consolidated_negative_ttl_seconds: int = Field(default=CONSOLIDATED_NEGATIVE_TTL, ge=1)
    scrape_ttl_seconds: int = Field(default=SCRAPE_FOUND_TTL, ge=1)
    scrape_not_found_ttl_seconds: int = Field(default=SCRAPE_NOT_FOUND_TTL, ge=1)

    # Timeouts (secondes)
    tmdb_timeout: float = Field(default=10.0, gt=0)
    omdb_timeout: float = Field(default=10.0, gt=0)
    mal_timeout: float = Field(default=10.0, gt=0)
    scraper_timeout: float = Field(default=15.0, gt=0)
    source_deadline: float = Field(default=15.0, gt=0)

    # Relances des API sur 429 (backoff exponentiel)
    api_max_attempts: int = Field(default=2, ge=1)
    api_retry_max_wait: int = Field(default=5, ge=1)

    # Traitement par lots
    batch_concurrency: int = Field(default=10, ge=1, le=100)
    batch_first_window_delay: float = Field(default=0.3, ge=0)
    batch_window_delay: float = Field(default=0.05, ge=0)
    batch_item_timeout: float = Field(default=25.0, gt=0)

    # Limiteur de scraping
    enable_scrapers: bool = Field(default=True)
    scrape_max_concurrent: int = Field(default=3, ge=1)
    scrape_min_delay: float = Field(default=1.0, ge=0)
    scrape_max_delay: float = Field(default=3.0, ge=0)
    rate_limiter_max_queue: int = Field(default=50, ge=1)
    rate_limiter_poll_interval: float = Field(default=0.5, gt=0)

    # Table de correspondance kitsu/mal -> IMDb (format anime-lists)
    anime_mapping_file: Optional[Path] = Field(default=None)

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/ratings.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator("cache_dir", "log_file", "anime_mapping_file", mode="before")
    @classmethod
    def expand_path(cls, v: str | Path | None) -> Path | None:
        """Étend ~ vers le répertoire home dans les chemins."""
        if v is None:
            return None
        return Path(v).expanduser()

    @field_validator("scrape_max_delay")
    @classmethod
    def check_delay_range(cls, v: float, info) -> float:
        """Le délai maximum ne peut pas être inférieur au délai minimum."""
        minimum = info.data.get("scrape_min_delay", 0.0)
        if v < minimum:
            raise ValueError("scrape_max_delay doit être >= scrape_min_delay")
        return v

    @property
    def tmdb_enabled(self) -> bool:
        """Vérifie si l'API TMDB est configurée."""
        return bool(self.tmdb_api_key)

    @property
    def omdb_enabled(self) -> bool:
        """Vérifie si l'API OMDB est configurée."""
        return bool(self.omdb_api_key)

    @property
    def mal_enabled(self) -> bool:
        """Vérifie si l'API MyAnimeList est configurée."""
        return bool(self.mal_client_id)
