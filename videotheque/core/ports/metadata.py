"""
Interfaces ports pour les fournisseurs de métadonnées externes.

Forme de l'échange : {titre, saison, épisode} -> {titre, synopsis, poster}.
Les implémentations lèvent ExternalLookupError pour toute indisponibilité
ou réponse malformée ; l'appelant dégrade vers le repli local.
"""

from abc import ABC, abstractmethod
from concurrent.futures import Executor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class MetadataQuery:
    """
    Requête de métadonnées.

    Attributs :
        title : Titre nettoyé (film ou série)
        year : Année si connue
        season : Saison (séries uniquement)
        episode : Épisode (séries uniquement)
    """

    title: str
    year: Optional[int] = None
    season: Optional[int] = None
    episode: Optional[int] = None

    @property
    def is_episode(self) -> bool:
        return self.season is not None and self.episode is not None


@dataclass(frozen=True)
class MetadataResult:
    """
    Métadonnées retournées par le fournisseur.

    Pour un épisode, title/overview décrivent la série et
    episode_title/episode_overview l'épisode.
    """

    title: str
    original_title: str = ""
    overview: str = ""
    poster_url: Optional[str] = None
    genres: tuple[str, ...] = field(default_factory=tuple)
    year: Optional[int] = None
    episode_title: str = ""
    episode_overview: str = ""


class IMetadataProvider(ABC):
    """Fournisseur de métadonnées (TMDB)."""

    @property
    @abstractmethod
    def source(self) -> str:
        """Identifiant de la source (ex: "tmdb")."""
        ...

    @abstractmethod
    async def lookup(self, query: MetadataQuery) -> Optional[MetadataResult]:
        """
        Recherche les métadonnées d'un film ou d'un épisode.

        Retourne :
            MetadataResult, ou None si aucun résultat

        Raises :
            ExternalLookupError : Fournisseur injoignable ou réponse invalide
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Libère les connexions HTTP."""
        ...


class IPosterDownloader(ABC):
    """Téléchargement d'un poster vers le disque local."""

    @abstractmethod
    async def download(
        self, url: str, destination: Path, executor: Optional[Executor] = None
    ) -> Path:
        """
        Télécharge l'image et l'écrit de façon atomique à destination.

        L'écriture disque passe par executor (pool par défaut si None).

        Raises :
            ExternalLookupError : Téléchargement impossible
        """
        ...
