"""
Variantes de classification produites par le PathClassifier.

Une entrée du système de fichiers est classée en exactement une variante :
- NotVideo : ni vidéo ni dossier reconnu (le scan continue la descente)
- SingleVideo : une vidéo autonome (éventuellement un dossier film d'un seul fichier)
- SeriesFolder : un dossier d'épisodes, ordonnés par (saison, épisode)

ScanItem est l'unité de travail transmise à l'extracteur : un fichier vidéo
et, s'il appartient à un dossier de série, sa référence d'épisode.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union


@dataclass(frozen=True)
class EpisodeRef:
    """Épisode identifié dans un dossier de série."""

    path: Path
    season: int
    episode: int
    episode_title: str = ""


@dataclass(frozen=True)
class NotVideo:
    """Entrée qui n'est pas une unité vidéo."""

    path: Path


@dataclass(frozen=True)
class SingleVideo:
    """
    Vidéo autonome.

    Attributs :
        path : Chemin du fichier vidéo
        folder : Dossier consommé par ce film (None pour un fichier isolé)
    """

    path: Path
    folder: Optional[Path] = None


@dataclass(frozen=True)
class SeriesFolder:
    """Dossier de série avec ses épisodes ordonnés."""

    path: Path
    episodes: tuple[EpisodeRef, ...] = ()


Classification = Union[NotVideo, SingleVideo, SeriesFolder]


@dataclass(frozen=True)
class ScanItem:
    """
    Unité de travail d'un scan.

    Attributs :
        path : Fichier vidéo à extraire
        episode : Référence d'épisode si le fichier vient d'un SeriesFolder
        series_folder : Dossier de série d'origine
    """

    path: Path
    episode: Optional[EpisodeRef] = None
    series_folder: Optional[Path] = None

    @property
    def is_episode(self) -> bool:
        return self.episode is not None
