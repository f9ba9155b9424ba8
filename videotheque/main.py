"""
Point d'entrée CLI de Videotheque.

Initialise le container DI, configure le logging et fournit les commandes CLI.
La CLI est une couche de présentation mince : elle n'appelle que LibraryService.
"""

from pathlib import Path
from typing import Annotated, Optional

import typer
from loguru import logger
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from . import __version__
from .config import Settings
from .container import Container
from .core.entities.video import VideoEntry
from .core.errors import LaunchError, ScanInProgressError, ScanRootError, StorageError
from .logging_config import configure_logging
from .services.library import LibraryService, VideoFilter
from .user_settings import UserSettings

app = typer.Typer(
    name="videotheque",
    help="Gestionnaire de vidéothèque locale",
)
settings_app = typer.Typer(help="Préférences utilisateur (lecteur, sous-titres, TMDB)")
app.add_typer(settings_app, name="settings")

container = Container()
console = Console()


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option("--verbose", "-v", count=True, help="Augmenter la verbosité (-v, -vv)"),
    ] = 0,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Mode silencieux (erreurs uniquement)"),
    ] = False,
) -> None:
    """Videotheque - scan, catalogue et lecture de vos vidéos."""
    config = get_config()
    configure_logging(
        log_level=config.log_level,
        log_file=config.log_file,
        rotation_size=config.log_rotation_size,
        retention_count=config.log_retention_count,
        verbose=verbose,
        quiet=quiet,
    )
    try:
        container.init_resources()
    except StorageError as exc:
        console.print(f"[red]Catalogue inaccessible :[/red] {exc}")
        raise typer.Exit(code=1)
    ctx.call_on_close(shutdown)
    logger.debug("Démarrage de Videotheque", version=__version__)


def shutdown() -> None:
    """Ferme le catalogue et le cache, puis oublie les singletons qui les utilisaient."""
    container.shutdown_resources()
    container.reset_singletons()


def get_config() -> Settings:
    """Récupère les paramètres de l'application depuis le container DI."""
    return container.config()


def get_library() -> LibraryService:
    return container.library_service()


def _resolve_video(library: LibraryService, video_id: str) -> Optional[VideoEntry]:
    """Retrouve une vidéo par id complet ou par préfixe non ambigu."""
    entry = library.get_video(video_id)
    if entry is not None:
        return entry
    matches = [v for v in library.get_cached_videos() if v.id.startswith(video_id)]
    if len(matches) > 1:
        console.print(f"[yellow]Préfixe ambigu :[/yellow] {video_id} ({len(matches)} vidéos)")
        raise typer.Exit(code=1)
    return matches[0] if matches else None


def _videos_table(title: str, videos: list[VideoEntry]) -> Table:
    table = Table(title=title, show_header=True)
    table.add_column("ID", style="dim", no_wrap=True)
    table.add_column("Titre")
    table.add_column("Durée", justify="right")
    table.add_column("Lectures", justify="right")
    table.add_column("Favori", justify="center")
    for video in videos:
        table.add_row(
            video.id[:8],
            video.display_title,
            video.duration or "-",
            str(video.play_count),
            "★" if video.favorite else "",
        )
    return table


@app.command()
def scan(
    paths: Annotated[list[Path], typer.Argument(help="Dossiers à scanner")],
) -> None:
    """Scanne des dossiers et ajoute les nouvelles vidéos au catalogue."""
    library = get_library()
    try:
        with console.status("Scan en cours..."):
            report = library.scan(paths)
    except ScanRootError as exc:
        console.print(f"[red]Échec du scan :[/red] {exc}")
        raise typer.Exit(code=1)
    except ScanInProgressError as exc:
        console.print(f"[red]Échec du scan :[/red] {exc}")
        raise typer.Exit(code=1)
    except StorageError as exc:
        console.print(f"[red]Échec du scan, catalogue indisponible :[/red] {exc}")
        raise typer.Exit(code=1)

    if report.added_count == 0:
        console.print("Scan terminé : 0 nouvelle vidéo")
    else:
        console.print(_videos_table(f"{report.added_count} nouvelle(s) vidéo(s)", report.delta))

    if report.skipped:
        console.print(f"[yellow]{report.skipped_count} élément(s) ignoré(s)[/yellow]")
        for skipped in report.skipped:
            console.print(f"  {skipped.path} : {skipped.reason}")
    if report.cancelled:
        console.print("[yellow]Scan interrompu[/yellow]")


@app.command(name="list")
def list_videos(
    filter_: Annotated[
        VideoFilter,
        typer.Option("--filter", "-f", help="Vue : all, movies, series, played, favorites"),
    ] = VideoFilter.ALL,
) -> None:
    """Liste les vidéos du catalogue."""
    try:
        videos = get_library().list_videos(filter_)
    except StorageError as exc:
        console.print(f"[red]Catalogue indisponible :[/red] {exc}")
        raise typer.Exit(code=1)

    if not videos:
        console.print("Aucune vidéo")
        return
    console.print(_videos_table(f"Vidéos ({filter_.value})", videos))


@app.command()
def remove(
    video_id: Annotated[str, typer.Argument(help="ID (ou préfixe) de la vidéo")],
    delete_files: Annotated[
        bool, typer.Option("--delete-files", help="Supprimer aussi le fichier du disque")
    ] = False,
) -> None:
    """Retire une vidéo du catalogue."""
    library = get_library()
    entry = _resolve_video(library, video_id)
    if entry is None:
        console.print("Vidéo absente du catalogue")
        return
    if delete_files:
        library.delete_folder_if_exists(entry.path)
    library.remove_video(entry.id)
    console.print(f"Retirée : {entry.display_title}")


@app.command()
def play(video_id: Annotated[str, typer.Argument(help="ID (ou préfixe) de la vidéo")]) -> None:
    """Lance la lecture d'une vidéo."""
    library = get_library()
    entry = _resolve_video(library, video_id)
    if entry is None:
        console.print(f"[red]Vidéo inconnue :[/red] {video_id}")
        raise typer.Exit(code=1)
    try:
        updated = library.play_video(entry)
    except LaunchError as exc:
        console.print(f"[red]Lecture impossible :[/red] {exc}")
        raise typer.Exit(code=1)
    console.print(f"Lecture : {updated.display_title} ({updated.play_count} lecture(s))")


@app.command()
def favorite(video_id: Annotated[str, typer.Argument(help="ID (ou préfixe) de la vidéo")]) -> None:
    """Ajoute ou retire une vidéo des favoris."""
    library = get_library()
    entry = _resolve_video(library, video_id)
    if entry is None:
        console.print(f"[red]Vidéo inconnue :[/red] {video_id}")
        raise typer.Exit(code=1)
    updated = library.toggle_favorite(entry.id)
    state = "ajoutée aux" if updated and updated.favorite else "retirée des"
    console.print(f"{entry.display_title} {state} favoris")


@settings_app.command("show")
def settings_show() -> None:
    """Affiche les préférences utilisateur."""
    settings = get_library().load_settings()
    table = Table(title="Préférences", show_header=True)
    table.add_column("Clé")
    table.add_column("Valeur")
    for key, value in settings.model_dump().items():
        if key == "tmdb_api_key" and value:
            value = value[:4] + "…"
        table.add_row(key, str(value))
    console.print(table)


@settings_app.command("set")
def settings_set(
    key: Annotated[str, typer.Argument(help="Nom de la préférence")],
    value: Annotated[str, typer.Argument(help="Nouvelle valeur")],
) -> None:
    """Modifie une préférence (l'enregistrement complet est réécrit)."""
    library = get_library()
    current = library.load_settings()
    if key not in UserSettings.model_fields:
        console.print(f"[red]Préférence inconnue :[/red] {key}")
        raise typer.Exit(code=1)
    try:
        updated = UserSettings.model_validate({**current.model_dump(), key: value})
    except ValidationError as exc:
        console.print(f"[red]Valeur invalide pour {key} :[/red] {exc.errors()[0]['msg']}")
        raise typer.Exit(code=1)
    library.save_settings(updated)
    console.print(f"{key} mis à jour")


@app.command()
def info() -> None:
    """Affiche la configuration actuelle."""
    config = get_config()
    library = get_library()
    user = library.load_settings()
    typer.echo(f"Données : {config.data_dir}")
    typer.echo(f"Base de données : {config.database_url}")
    typer.echo(f"Préférences : {config.settings_file}")
    typer.echo(f"Miniatures : {config.thumbnail_dir}")
    typer.echo(f"Workers de scan : {config.scan_workers}")
    typer.echo(f"Lecteur : {user.player_type} {user.player_path}".rstrip())
    typer.echo(f"API TMDB : {'activée' if user.tmdb_enabled(config.tmdb_api_key) else 'désactivée'}")
    typer.echo(f"Vidéos au catalogue : {len(library.get_cached_videos())}")
    typer.echo(f"Niveau de log : {config.log_level}")


@app.command()
def version() -> None:
    """Affiche les informations de version."""
    typer.echo(f"Videotheque v{__version__}")


def main() -> None:
    """Point d'entrée de l'application."""
    app()


if __name__ == "__main__":
    main()
