"""
Objets valeur pour les informations de parsing de noms de fichiers.

Objets valeur immutables representant les informations extraites du parsing
de noms de fichiers video (guessit).
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MediaType(Enum):
    """Type de media detecte depuis le nom de fichier.

    Valeurs:
        MOVIE: Film (long-metrage)
        SERIES: Serie TV (avec saison/episode)
        UNKNOWN: Type non determine
    """

    MOVIE = "movie"
    SERIES = "series"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ParsedFilename:
    """
    Informations extraites du parsing d'un nom de fichier video.

    Attributs:
        title: Titre nettoye (sans groupe de release, resolution, codec...)
        year: Annee de sortie
        media_type: Type de media detecte
        season: Numero de saison pour les series
        episode: Numero d'episode pour les series
        episode_title: Titre de l'episode
        resolution: Resolution (ex: "1080p")
        source: Source (ex: "Blu-ray", "Web")
        release_group: Groupe de release
    """

    title: str
    year: Optional[int] = None
    media_type: MediaType = MediaType.UNKNOWN
    season: Optional[int] = None
    episode: Optional[int] = None
    episode_title: Optional[str] = None
    resolution: Optional[str] = None
    source: Optional[str] = None
    release_group: Optional[str] = None
