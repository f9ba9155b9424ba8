"""
Interface de commandes de la bibliotheque.

Point d'entree unique de la couche de presentation (CLI) : scan, liste,
suppression, lecture, favoris et preferences. Les commandes sont
synchrones ; le scan utilise asyncio en interne.
"""

from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Optional

from loguru import logger

from videotheque.core.entities.video import VideoEntry
from videotheque.core.errors import ScanInProgressError
from videotheque.core.ports.file_system import IFileSystem
from videotheque.core.ports.metadata import IMetadataProvider
from videotheque.core.ports.repositories import ICatalogRepository
from videotheque.services.playback import PlaybackDispatcher
from videotheque.services.scanner import (
    CancellationToken,
    ScannerService,
    ScanOptions,
    ScanReport,
)
from videotheque.user_settings import UserSettings, UserSettingsStore
from videotheque.utils.helpers import title_sort_key


class VideoFilter(str, Enum):
    """Vues de la liste des videos."""

    ALL = "all"
    MOVIES = "movies"
    SERIES = "series"
    PLAYED = "played"
    FAVORITES = "favorites"


def filter_videos(videos: Iterable[VideoEntry], view: VideoFilter) -> list[VideoEntry]:
    """
    Filtre et trie les videos pour l'affichage.

    - played : videos deja lues, la plus recente en premier
    - series : par serie, saison, episode
    - autres : par titre
    """
    videos = list(videos)
    if view == VideoFilter.PLAYED:
        played = [v for v in videos if v.play_count > 0]
        return sorted(played, key=lambda v: v.last_play_time or v.create_time, reverse=True)
    if view == VideoFilter.SERIES:
        series = [v for v in videos if v.is_series]
        return sorted(
            series, key=lambda v: (title_sort_key(v.series_title or v.title), v.season, v.episode)
        )
    if view == VideoFilter.MOVIES:
        videos = [v for v in videos if not v.is_series]
    elif view == VideoFilter.FAVORITES:
        videos = [v for v in videos if v.favorite]
    return sorted(videos, key=lambda v: title_sort_key(v.display_title))


class LibraryService:
    """
    Facade de la bibliotheque.

    Args:
        catalog: Repository du catalogue
        scanner: Orchestrateur du scan
        playback: Lanceur de lecture
        settings_store: Stockage des preferences utilisateur
        file_system: Acces disque pour la suppression de fichiers
        provider_factory: Construit le fournisseur TMDB a partir d'une cle API
        fallback_tmdb_key: Cle TMDB de l'environnement (VIDEOTHEQUE_TMDB_API_KEY)
    """

    def __init__(
        self,
        catalog: ICatalogRepository,
        scanner: ScannerService,
        playback: PlaybackDispatcher,
        settings_store: UserSettingsStore,
        file_system: IFileSystem,
        provider_factory: Callable[..., IMetadataProvider],
        fallback_tmdb_key: Optional[str] = None,
    ) -> None:
        self._catalog = catalog
        self._scanner = scanner
        self._playback = playback
        self._settings_store = settings_store
        self._file_system = file_system
        self._provider_factory = provider_factory
        self._fallback_tmdb_key = fallback_tmdb_key
        self._active_tokens: set[CancellationToken] = set()

    # Scan

    def scan(
        self,
        roots: Iterable[Path | str],
        cancel_token: Optional[CancellationToken] = None,
    ) -> ScanReport:
        """
        Scanne les racines et retourne le rapport complet.

        Un scan refuse ne construit pas de client TMDB et ne touche pas au
        jeton du scan en cours.

        Raises:
            ScanRootError, StorageError, ScanInProgressError
        """
        if self._scanner.is_scanning():
            raise ScanInProgressError()
        token = cancel_token or CancellationToken()
        self._active_tokens.add(token)
        try:
            return self._scanner.scan(roots, token, self._scan_options(self.load_settings()))
        finally:
            self._active_tokens.discard(token)

    def scan_folder(self, root_path: Path | str) -> list[VideoEntry]:
        """Scanne un dossier et retourne uniquement les videos ajoutees."""
        return self.scan([root_path]).delta

    def cancel_scan(self) -> None:
        """Demande l'arret du scan en cours (sans effet si aucun scan)."""
        for token in list(self._active_tokens):
            token.cancel()

    def _scan_options(self, settings: UserSettings) -> ScanOptions:
        if not settings.tmdb_enabled(self._fallback_tmdb_key):
            return ScanOptions()
        api_key = settings.resolve_tmdb_key(self._fallback_tmdb_key)
        return ScanOptions(
            metadata_provider=self._provider_factory(api_key=api_key),
            download_posters=settings.poster_download_enabled(self._fallback_tmdb_key),
        )

    # Catalogue

    def get_cached_videos(self) -> list[VideoEntry]:
        """Toutes les videos du catalogue. Leve StorageError si indisponible."""
        return self._catalog.get_all()

    def list_videos(self, view: VideoFilter = VideoFilter.ALL) -> list[VideoEntry]:
        return filter_videos(self._catalog.get_all(), view)

    def get_video(self, video_id: str) -> Optional[VideoEntry]:
        return self._catalog.get(video_id)

    def remove_video(self, video_id: str) -> None:
        """Retire la video du catalogue. Idempotent."""
        self._catalog.delete(video_id)
        logger.info("Video retiree du catalogue", video_id=video_id)

    def delete_folder_if_exists(self, path: Path | str) -> None:
        """
        Supprime un fichier ou un dossier du disque, au mieux.

        Un chemin absent n'est pas une erreur ; un echec est journalise.
        """
        target = Path(path)
        try:
            if self._file_system.delete_path(target):
                logger.info("Supprime du disque", path=str(target))
        except OSError as exc:
            logger.warning("Suppression impossible", path=str(target), error=str(exc))

    def toggle_favorite(self, video_id: str) -> Optional[VideoEntry]:
        """Inverse le flag favori. Retourne None si l'id est inconnu."""
        entry = self._catalog.get(video_id)
        if entry is None:
            return None
        return self._catalog.set_favorite(video_id, not entry.favorite)

    # Lecture

    def play_video(self, entry: VideoEntry) -> VideoEntry:
        """
        Lance la lecture avec les preferences courantes.

        Raises:
            LaunchError: Lancement impossible (statistiques inchangees)
        """
        return self._playback.dispatch(entry, self.load_settings())

    # Preferences

    def load_settings(self) -> UserSettings:
        return self._settings_store.load()

    def save_settings(self, settings: UserSettings) -> None:
        self._settings_store.save(settings)
