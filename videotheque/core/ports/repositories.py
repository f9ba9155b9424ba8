"""
Interface du repository du catalogue.

Le catalogue est l'unique propriétaire de la table des vidéos. Toute écriture
passe par ce port ; les implémentations lèvent StorageError si le stockage
est indisponible ou corrompu.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from videotheque.core.entities.video import VideoEntry


class ICatalogRepository(ABC):
    """Contrat de persistance des VideoEntry, indexées par id."""

    @abstractmethod
    def upsert(self, entry: VideoEntry) -> VideoEntry:
        """
        Insère l'entrée, ou remplace une entrée existante de même id.

        Les champs d'usage (play_count, last_play_time, favorite) et la date
        d'ajout d'une entrée existante sont conservés.

        Retourne :
            L'entrée telle que stockée
        """
        ...

    @abstractmethod
    def get(self, video_id: str) -> Optional[VideoEntry]:
        """Retourne l'entrée d'id donné, ou None."""
        ...

    @abstractmethod
    def get_all(self) -> list[VideoEntry]:
        """Retourne toutes les entrées (ordre non significatif)."""
        ...

    @abstractmethod
    def delete(self, video_id: str) -> None:
        """Supprime l'entrée. Idempotent : un id absent n'est pas une erreur."""
        ...

    @abstractmethod
    def exists(self, video_id: str) -> bool:
        """Indique si une entrée d'id donné est présente."""
        ...

    @abstractmethod
    def count(self) -> int:
        """Nombre d'entrées du catalogue."""
        ...

    @abstractmethod
    def record_play(self, video_id: str, played_at: datetime) -> VideoEntry:
        """
        Enregistre une lecture réussie.

        Incrémente play_count de 1 et met last_play_time à
        max(played_at, valeur précédente).

        Raises :
            StorageError : Entrée absente ou stockage indisponible
        """
        ...

    @abstractmethod
    def set_favorite(self, video_id: str, favorite: bool) -> Optional[VideoEntry]:
        """Positionne le flag favori. Retourne None si l'id est inconnu."""
        ...
