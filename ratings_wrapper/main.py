"""
Point d'entrée CLI de ratings-wrapper.

Initialise le container DI, configure le logging et fournit les commandes CLI.
"""

import json
from typing import Annotated, Optional

import typer
from loguru import logger
from rich.table import Table

from .adapters.cli.helpers import async_command, close_container, console
from .config import Settings
from .container import Container
from .core.entities import ConsolidatedRating
from .core.value_objects import MediaItem, MediaType
from .logging_config import configure_logging, level_for_verbosity

app = typer.Typer(
    name="ratings-wrapper",
    help="Note consolidée des films, séries et épisodes",
)

# Etat global pour les options de verbosite
state = {"verbose": 0, "quiet": False}

COLOR_STYLES = {
    "excellent": "bold green",
    "great": "green",
    "good": "cyan",
    "okay": "yellow",
    "mediocre": "dark_orange",
    "poor": "red",
}


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Augmenter la verbosite (-v, -vv)"
        ),
    ] = 0,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Mode silencieux (erreurs uniquement)"),
    ] = False,
) -> None:
    """ratings-wrapper - Consolidation de notes multi-sources."""
    state["verbose"] = verbose
    state["quiet"] = quiet
    settings = Settings()
    configure_logging(
        log_level=level_for_verbosity(verbose, quiet, settings.log_level),
        log_file=settings.log_file,
        rotation_size=settings.log_rotation_size,
        retention_count=settings.log_retention_count,
    )


def _render_ratings(items: list[MediaItem], ratings: dict[str, ConsolidatedRating]) -> Table:
    table = Table(title="Notes consolidées", show_header=True)
    table.add_column("ID")
    table.add_column("Note", justify="right")
    table.add_column("Catégorie")
    table.add_column("Sources", justify="right")
    table.add_column("Détail")

    for item in items:
        rating = ratings.get(item.id)
        if rating is None:
            table.add_row(item.id, "-", "[dim]aucune donnée[/dim]", "0", "")
            continue
        color = rating.color_indicator.value
        detail = ", ".join(
            f"{value.source.value}={value.value:.1f}" for value in rating.sources
        )
        table.add_row(
            item.id,
            f"{rating.consolidated_rating:.1f}",
            f"[{COLOR_STYLES[color]}]{color}[/]",
            str(rating.source_count),
            detail,
        )
    return table


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = Settings()
    logger.info("Configuration ratings-wrapper")
    typer.echo(f"Base de données : {config.database_url}")
    typer.echo(f"Cache : {config.cache_dir} (version {config.cache_version})")
    typer.echo(f"API TMDB : {'activée' if config.tmdb_enabled else 'désactivée'}")
    typer.echo(f"API OMDB : {'activée' if config.omdb_enabled else 'désactivée'}")
    typer.echo(f"API MyAnimeList : {'activée' if config.mal_enabled else 'désactivée'}")
    typer.echo(f"Scrapers : {'activés' if config.enable_scrapers else 'désactivés'}")
    typer.echo(f"Concurrence des lots : {config.batch_concurrency}")
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
@async_command
async def rate(
    ids: Annotated[list[str], typer.Argument(help="Identifiants (tt..., tt...:S:E, kitsu:.., mal:..)")],
    media_type: Annotated[
        MediaType, typer.Option("--type", "-t", help="Type de media")
    ] = MediaType.MOVIE,
    title: Annotated[
        Optional[str], typer.Option("--title", help="Titre (un seul identifiant)")
    ] = None,
    year: Annotated[
        Optional[int], typer.Option("--year", help="Année (un seul identifiant)")
    ] = None,
    concurrency: Annotated[
        Optional[int], typer.Option("--concurrency", "-c", min=1, help="Taille des fenêtres")
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Sortie JSON")] = False,
    show_stats: Annotated[
        bool, typer.Option("--stats", help="Afficher les métriques en fin de traitement")
    ] = False,
) -> None:
    """Calcule la note consolidée d'un ou plusieurs medias."""
    if (title or year) and len(ids) > 1:
        raise typer.BadParameter("--title/--year ne s'appliquent qu'à un seul identifiant")

    items = [MediaItem(item_id, media_type, title, year) for item_id in ids]
    container = Container()
    container.database.init()
    try:
        fetcher = container.batch_fetcher()
        ratings = await fetcher.fetch_batch(items, concurrency=concurrency)

        if as_json:
            typer.echo(json.dumps({k: v.to_dict() for k, v in ratings.items()}, indent=2))
        else:
            console.print(_render_ratings(items, ratings))

        if show_stats:
            snapshot = {
                **container.metrics().snapshot(),
                "rate_limiter": container.rate_limiter().stats(),
            }
            console.print_json(json.dumps(snapshot, default=str))
    finally:
        await close_container(container)


@app.command(name="cache-clear")
@async_command
async def cache_clear() -> None:
    """Vide le cache (mémoire et disque)."""
    container = Container()
    try:
        await container.cache().clear()
        logger.info("Cache vidé")
        typer.echo("Cache vidé.")
    finally:
        await close_container(container)


@app.command(name="init-db")
def init_db() -> None:
    """Crée les tables (miroir IMDb et historique de scraping)."""
    container = Container()
    container.database.init()
    container.shutdown_resources()
    typer.echo(f"Base initialisée : {container.config().database_url}")


if __name__ == "__main__":
    app()
