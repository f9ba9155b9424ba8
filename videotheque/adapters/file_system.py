"""
Adaptateur pour les operations sur le systeme de fichiers.

Implementation concrete de IFileSystem utilisee par le scan (listing,
identite des repertoires) et par la bibliotheque (suppression best-effort).
"""

import os
import shutil
from pathlib import Path

from videotheque.core.ports.file_system import DirectoryListing, IFileSystem


class FileSystemAdapter(IFileSystem):
    """
    Implementation de IFileSystem pour le systeme de fichiers reel.

    Les liens symboliques sont suivis ; un lien casse n'apparait ni dans
    les fichiers ni dans les sous-repertoires.
    """

    def exists(self, path: Path) -> bool:
        """Verifie si un chemin existe."""
        return path.exists()

    def is_dir(self, path: Path) -> bool:
        return path.is_dir()

    def list_directory(self, path: Path) -> DirectoryListing:
        """
        Liste un repertoire, fichiers et sous-repertoires tries par nom.

        Le tri rend l'ordre de decouverte independant de la plateforme.
        """
        files: list[Path] = []
        subdirs: list[Path] = []
        with os.scandir(path) as entries:
            for entry in entries:
                try:
                    if entry.is_dir():
                        subdirs.append(Path(entry.path))
                    elif entry.is_file():
                        files.append(Path(entry.path))
                except OSError:
                    # Entree disparue entre le listing et le stat
                    continue
        files.sort(key=lambda p: p.name)
        subdirs.sort(key=lambda p: p.name)
        return DirectoryListing(files=tuple(files), subdirs=tuple(subdirs))

    def directory_identity(self, path: Path) -> tuple[int, int]:
        """Retourne (st_dev, st_ino) de la cible, liens suivis."""
        stat = os.stat(path)
        return (stat.st_dev, stat.st_ino)

    def delete_path(self, path: Path) -> bool:
        """
        Supprime un fichier ou un repertoire.

        Un lien symbolique est supprime sans toucher a sa cible.
        """
        if path.is_symlink() or path.is_file():
            path.unlink()
            return True
        if path.is_dir():
            shutil.rmtree(path)
            return True
        return False
