"""
Tests des commandes CLI via le CliRunner de typer.
"""

from pathlib import Path

import pytest
from loguru import logger
from typer.testing import CliRunner

from ratings_wrapper.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Chemins temporaires et aucune cle API ; les handlers loguru sont retires ensuite."""
    monkeypatch.setenv("RATINGS_DATABASE_URL", f"sqlite:///{tmp_path / 'ratings.db'}")
    monkeypatch.setenv("RATINGS_CACHE_DIR", str(tmp_path / "cache"))
    monkeypatch.setenv("RATINGS_LOG_FILE", str(tmp_path / "logs" / "ratings.log"))
    for name in ("TMDB_API_KEY", "OMDB_API_KEY", "MAL_CLIENT_ID"):
        monkeypatch.setenv(f"RATINGS_{name}", "")
    yield
    logger.remove()


class TestInfoCommand:
    """Tests de la commande info."""

    def test_info_shows_configuration(self) -> None:
        result = runner.invoke(app, ["info"])

        assert result.exit_code == 0
        assert "API TMDB : désactivée" in result.output
        assert "Concurrence des lots : 10" in result.output


class TestInitDbCommand:
    """Tests de la commande init-db."""

    def test_init_db_creates_database(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["init-db"])

        assert result.exit_code == 0
        assert (tmp_path / "ratings.db").exists()


class TestRateCommand:
    """Tests de la commande rate."""

    def test_title_with_several_ids_is_rejected(self) -> None:
        result = runner.invoke(app, ["rate", "tt1", "tt2", "--title", "X"])
        assert result.exit_code != 0

    def test_rate_without_data_outputs_empty_json(self) -> None:
        """Miroir vide et aucune cle API : aucun resultat, sans erreur."""
        result = runner.invoke(app, ["-q", "rate", "tt0111161", "--json"])

        assert result.exit_code == 0
        assert result.output.strip().endswith("{}")
