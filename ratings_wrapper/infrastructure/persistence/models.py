"""
Modeles SQLModel pour la base de donnees SQLite.

Tables:
- imdb_ratings: Notes IMDb du miroir local (alimentees par l'ETL externe)
- imdb_episodes: Correspondance serie/saison/episode -> tconst de l'episode
- scrape_records: Historique des scrapings Rotten Tomatoes / Metacritic
"""

from datetime import date, datetime
from typing import Optional

from sqlmodel import Field, Index, SQLModel


class IMDbRatingModel(SQLModel, table=True):
    """
    Modele representant une note IMDb dans le miroir local.

    Stocke les notes importees depuis les datasets publics (title.ratings.tsv).
    """

    __tablename__ = "imdb_ratings"

    tconst: str = Field(primary_key=True)  # ID IMDb ex: "tt0499549"
    average_rating: float
    num_votes: int
    last_updated: date | None = Field(default_factory=date.today)


class IMDbEpisodeModel(SQLModel, table=True):
    """
    Modele representant un episode du dataset title.episode.tsv.
    """

    __tablename__ = "imdb_episodes"
    __table_args__ = (
        Index("ix_imdb_episodes_lookup", "parent_tconst", "season_number", "episode_number"),
    )

    tconst: str = Field(primary_key=True)  # ID IMDb de l'episode
    parent_tconst: str = Field(index=True)  # ID IMDb de la serie
    season_number: Optional[int] = None
    episode_number: Optional[int] = None


class ScrapeRecordModel(SQLModel, table=True):
    """
    Historique de scraping d'une serie sur un site.
    """

    __tablename__ = "scrape_records"

    id: int | None = Field(default=None, primary_key=True)
    imdb_id: str = Field(index=True)
    source: str = Field(index=True)  # "rottenTomatoes" ou "metacritic"
    failed_count: int = Field(default=0)
    last_attempt_at: datetime | None = None
    last_success_at: datetime | None = None
    last_url: str | None = None
    last_score: float | None = None
