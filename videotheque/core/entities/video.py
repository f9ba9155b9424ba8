"""
Entité VideoEntry : une vidéo connue du catalogue.

L'identifiant est dérivé du chemin canonique (voir hash_service.compute_video_id).
Les champs de série (season, episode, episode_title, episode_overview,
series_title) ne sont significatifs que si is_series est vrai.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from videotheque.utils.helpers import utc_now


@dataclass
class VideoEntry:
    """
    Une vidéo du catalogue.

    Attributs:
        id: Identifiant stable dérivé du chemin canonique
        path: Chemin absolu du fichier vidéo
        original_title: Nom brut (nom de fichier sans extension)
        title: Titre d'affichage (TMDB, nettoyé ou brut)
        duration: Durée "HH:MM:SS", vide tant que non sondée
        thumbnail: Chemin ou URI du poster (éventuellement le placeholder)
        category: Genres séparés par des virgules
        tags: Étiquettes libres
        description: Synopsis
        create_time: Date d'ajout au catalogue
        last_play_time: Dernière lecture (None si jamais lue)
        play_count: Nombre de lectures réussies
        favorite: Favori utilisateur
        is_series: Episode de série
        series_title: Nom de la série
        season: Numéro de saison
        episode: Numéro d'épisode
        episode_title: Titre de l'épisode
        episode_overview: Résumé de l'épisode
    """

    id: str
    path: str
    original_title: str
    title: str
    duration: str = ""
    thumbnail: str = ""
    category: str = ""
    tags: str = ""
    description: str = ""
    create_time: datetime = field(default_factory=utc_now)
    last_play_time: Optional[datetime] = None
    play_count: int = 0
    favorite: bool = False
    is_series: bool = False
    series_title: str = ""
    season: int = 0
    episode: int = 0
    episode_title: str = ""
    episode_overview: str = ""

    @property
    def episode_label(self) -> str:
        """Libellé SxxEyy, vide pour un film."""
        if not self.is_series:
            return ""
        return f"S{self.season:02d}E{self.episode:02d}"

    @property
    def display_title(self) -> str:
        """Titre présenté dans les listes (série + épisode si applicable)."""
        if not self.is_series:
            return self.title
        name = self.series_title or self.title
        label = f"{name} {self.episode_label}"
        if self.episode_title:
            label += f" - {self.episode_title}"
        return label
