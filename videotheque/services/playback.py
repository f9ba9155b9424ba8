"""
Service de lecture : construit la commande du lecteur et la lance.

Les statistiques (play_count, last_play_time) ne sont mises a jour qu'apres
un lancement reussi. Un echec leve LaunchError sans toucher au catalogue.
"""

import sys
from pathlib import Path
from typing import Optional

from loguru import logger

from videotheque.core.entities.video import VideoEntry
from videotheque.core.errors import LaunchError
from videotheque.core.ports.file_system import IProcessLauncher
from videotheque.core.ports.repositories import ICatalogRepository
from videotheque.services.subtitles import SubtitleFinder
from videotheque.user_settings import UserSettings
from videotheque.utils.helpers import utc_now


def system_open_command(path: str, platform: str) -> list[str]:
    """Commande d'ouverture avec l'application par defaut de l'OS."""
    if platform.startswith("win"):
        return ["cmd", "/c", "start", "", path]
    if platform == "darwin":
        return ["open", path]
    return ["xdg-open", path]


class PlaybackDispatcher:
    """
    Lance une video dans le lecteur configure.

    Args:
        catalog: Repository du catalogue (statistiques de lecture)
        launcher: Lanceur de processus
        subtitle_finder: Recherche de sous-titres
        platform: Valeur de sys.platform (injectable pour les tests)
    """

    def __init__(
        self,
        catalog: ICatalogRepository,
        launcher: IProcessLauncher,
        subtitle_finder: SubtitleFinder,
        platform: Optional[str] = None,
    ) -> None:
        self._catalog = catalog
        self._launcher = launcher
        self._subtitle_finder = subtitle_finder
        self._platform = platform or sys.platform

    def build_command(self, entry: VideoEntry, settings: UserSettings) -> list[str]:
        """
        Construit la commande de lancement.

        - player_type "system" ou player_path vide : ouverture par l'OS
        - sinon [player_path, chemin], plus le sous-titre si auto_subtitle
        """
        player_path = settings.player_path.strip()
        if settings.player_type == "system" or not player_path:
            return system_open_command(entry.path, self._platform)

        command = [player_path]
        if settings.auto_subtitle:
            subtitle = self._subtitle_finder.find(Path(entry.path), settings.subtitle_language)
            if subtitle is not None:
                if settings.player_type == "vlc":
                    command += ["--sub-file", str(subtitle)]
                else:
                    command.append(f"--sub-file={subtitle}")
        command.append(entry.path)
        return command

    def dispatch(self, entry: VideoEntry, settings: UserSettings) -> VideoEntry:
        """
        Lance la lecture puis enregistre les statistiques.

        Returns:
            L'entree mise a jour (play_count + 1)

        Raises:
            LaunchError: Fichier inaccessible ou lecteur introuvable
            StorageError: Mise a jour des statistiques impossible
        """
        if not Path(entry.path).exists():
            raise LaunchError(f"Fichier inaccessible : {entry.path}")

        command = self.build_command(entry, settings)
        try:
            pid = self._launcher.launch(command)
        except OSError as exc:
            raise LaunchError(f"Lancement impossible ({command[0]}) : {exc}") from exc

        logger.info("Lecture lancee", video_id=entry.id, pid=pid, player=command[0])
        return self._catalog.record_play(entry.id, utc_now())
