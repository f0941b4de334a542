"""
Configuration de la base de donnees SQLite.

Ce module fournit :
- Engine SQLite avec configuration pour l'acces multi-thread
- Fabrique de sessions
- Fonction d'initialisation des tables

La base est configuree via RATINGS_DATABASE_URL (defaut: sqlite:///ratings.db).
Elle contient le miroir IMDb (tables remplies par l'ETL externe) et
l'historique des scrapings.
"""

from collections.abc import Callable
from pathlib import Path

from sqlalchemy import Engine
from sqlmodel import Session, SQLModel, create_engine


def create_db_engine(database_url: str = "sqlite:///ratings.db") -> Engine:
    """
    Cree l'engine SQLAlchemy.

    Cree le repertoire parent si l'URL designe un fichier SQLite.
    """
    if database_url.startswith("sqlite:///") and not database_url.startswith(
        "sqlite:///:memory:"
    ):
        db_path = Path(database_url.replace("sqlite:///", ""))
        db_path.parent.mkdir(exist_ok=True, parents=True)

    return create_engine(
        database_url,
        echo=False,
        connect_args={"check_same_thread": False},
    )


def make_session_factory(engine: Engine) -> Callable[[], Session]:
    """
    Retourne une fabrique de sessions liees a l'engine.

    Utilisation :
        factory = make_session_factory(engine)
        with factory() as session:
            # operations
    """

    def _factory() -> Session:
        return Session(engine)

    return _factory


def init_db(engine: Engine) -> None:
    """
    Cree les tables si elles n'existent pas deja.

    Doit etre appelee une fois au demarrage de l'application.
    """
    # Import des modeles pour enregistrer leurs metadonnees
    from ratings_wrapper.infrastructure.persistence import models  # noqa: F401

    SQLModel.metadata.create_all(engine)
