"""
Interfaces ports pour le système de fichiers et le lancement de processus.

Le système de fichiers et la couche processus de l'OS sont des collaborateurs
externes : le scan et la lecture n'y accèdent qu'à travers ces contrats.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class DirectoryListing:
    """Contenu d'un répertoire, trié par nom."""

    files: tuple[Path, ...] = ()
    subdirs: tuple[Path, ...] = ()


class IFileSystem(ABC):
    """Opérations fichiers utilisées par le scan et la bibliothèque."""

    @abstractmethod
    def exists(self, path: Path) -> bool:
        """Vérifie si un chemin existe."""
        ...

    @abstractmethod
    def is_dir(self, path: Path) -> bool:
        """Vérifie si un chemin est un répertoire (liens suivis)."""
        ...

    @abstractmethod
    def list_directory(self, path: Path) -> DirectoryListing:
        """
        Liste un répertoire (fichiers et sous-répertoires, liens suivis).

        Raises :
            OSError : Répertoire illisible ou disparu
        """
        ...

    @abstractmethod
    def directory_identity(self, path: Path) -> tuple[int, int]:
        """
        Identité canonique d'un répertoire : (st_dev, st_ino) de la cible.

        Raises :
            OSError : Chemin inaccessible
        """
        ...

    @abstractmethod
    def delete_path(self, path: Path) -> bool:
        """
        Supprime un fichier ou un répertoire (récursivement).

        Retourne :
            True si quelque chose a été supprimé, False si le chemin n'existait pas

        Raises :
            OSError : Suppression impossible
        """
        ...


class IProcessLauncher(ABC):
    """Lancement détaché d'un processus externe (lecteur vidéo)."""

    @abstractmethod
    def launch(self, command: list[str]) -> int:
        """
        Lance la commande sans attendre sa fin.

        Retourne :
            PID du processus lancé

        Raises :
            OSError : Exécutable introuvable ou lancement refusé
        """
        ...
