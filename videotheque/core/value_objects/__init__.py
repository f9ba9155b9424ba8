"""
Objets valeur immutables representant des concepts du domaine sans identite.

Exports :
- Classification et ses variantes (NotVideo, SingleVideo, SeriesFolder)
- EpisodeRef, ScanItem : unites de travail du scan
- MediaInfo : resultat de la sonde media
- MediaType, ParsedFilename : resultat du parsing de nom de fichier
"""

from videotheque.core.value_objects.classification import (
    Classification,
    EpisodeRef,
    NotVideo,
    ScanItem,
    SeriesFolder,
    SingleVideo,
)
from videotheque.core.value_objects.media_info import MediaInfo
from videotheque.core.value_objects.parsed_info import MediaType, ParsedFilename

__all__ = [
    "Classification",
    "EpisodeRef",
    "NotVideo",
    "ScanItem",
    "SeriesFolder",
    "SingleVideo",
    "MediaInfo",
    "MediaType",
    "ParsedFilename",
]
