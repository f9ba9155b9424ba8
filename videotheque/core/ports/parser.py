"""
Interfaces ports pour le parsing de noms de fichiers et la sonde media.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from videotheque.core.value_objects.media_info import MediaInfo
from videotheque.core.value_objects.parsed_info import MediaType, ParsedFilename


class IFilenameParser(ABC):
    """
    Interface pour le parsing de noms de fichiers video.

    Extrait titre nettoye, annee, saison, episode depuis un nom de fichier.
    L'implementation utilise la bibliotheque guessit.
    """

    @abstractmethod
    def parse(
        self, filename: str, type_hint: Optional[MediaType] = None
    ) -> ParsedFilename:
        """
        Parse un nom de fichier video.

        Args:
            filename: Nom du fichier a parser (sans le chemin)
            type_hint: Type de media attendu, aide quand le nom est ambigu

        Retourne:
            ParsedFilename ; le champ title peut etre vide si rien n'est exploitable.
        """
        ...


class IMediaProbe(ABC):
    """Sonde legere d'un fichier video (duree, format)."""

    @abstractmethod
    def probe(self, file_path: Path) -> Optional[MediaInfo]:
        """
        Sonde le fichier sans decoder le flux.

        Retourne:
            MediaInfo, ou None si la sonde echoue ou ne trouve rien
        """
        ...
