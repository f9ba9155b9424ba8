"""
Objets valeur pour les informations média.

Résultat d'une sonde légère (pymediainfo) : durée et quelques informations
techniques, sans décodage du flux.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class MediaInfo:
    """
    Informations techniques d'un fichier vidéo.

    Attributs :
        duration_seconds : Durée totale en secondes
        width : Largeur en pixels
        height : Hauteur en pixels
        video_codec : Format du flux vidéo (ex: "HEVC")
    """

    duration_seconds: Optional[int] = None
    width: Optional[int] = None
    height: Optional[int] = None
    video_codec: Optional[str] = None
