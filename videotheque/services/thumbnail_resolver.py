"""
Resolution de la miniature d'une video.

Ordre :
1. image voisine suivant les conventions de nommage des posters
2. poster TMDB telecharge, mis en cache sous <thumbnail_dir>/<id>.jpg (si active)
3. placeholder fixe

Le telechargement est borne par un timeout : en cas d'echec ou d'expiration,
la video recoit le placeholder et le scan continue.
"""

import asyncio
from concurrent.futures import Executor
from pathlib import Path
from typing import Optional

from loguru import logger

from videotheque.core.entities.video import VideoEntry
from videotheque.core.errors import ExternalLookupError
from videotheque.core.ports.metadata import IPosterDownloader
from videotheque.services.classifier import season_from_folder
from videotheque.utils.constants import IMAGE_EXTENSIONS, SIBLING_POSTER_NAMES

THUMBNAIL_EXTENSION = ".jpg"


class ThumbnailResolver:
    """
    Resolveur de miniatures.

    Args:
        thumbnail_dir: Repertoire du cache de posters
        placeholder: Reference de repli
        poster_downloader: Telechargeur de posters
        timeout: Delai maximum d'un telechargement, en secondes
    """

    def __init__(
        self,
        thumbnail_dir: Path,
        placeholder: str,
        poster_downloader: IPosterDownloader,
        timeout: float = 10.0,
    ) -> None:
        self._thumbnail_dir = Path(thumbnail_dir)
        self._placeholder = placeholder
        self._poster_downloader = poster_downloader
        self._timeout = timeout

    @property
    def placeholder(self) -> str:
        return self._placeholder

    def cached_poster_path(self, video_id: str) -> Path:
        """Chemin deterministe du poster en cache pour un id."""
        return self._thumbnail_dir / f"{video_id}{THUMBNAIL_EXTENSION}"

    async def resolve(
        self,
        entry: VideoEntry,
        poster_url: Optional[str] = None,
        download_enabled: bool = False,
        executor: Optional[Executor] = None,
    ) -> str:
        """
        Retourne la reference de miniature pour l'entree.

        Args:
            entry: Entree candidate
            poster_url: URL du poster fournie par les metadonnees externes
            download_enabled: Telechargement des posters autorise
            executor: Pool pour les acces disque
        """
        loop = asyncio.get_running_loop()
        sibling = await loop.run_in_executor(
            executor, self.find_sibling, Path(entry.path), entry.is_series
        )
        if sibling is not None:
            return str(sibling)

        if not download_enabled:
            return self._placeholder

        cached = self.cached_poster_path(entry.id)
        if await loop.run_in_executor(executor, cached.is_file):
            return str(cached)
        if not poster_url:
            return self._placeholder

        try:
            await asyncio.wait_for(
                self._poster_downloader.download(poster_url, cached, executor=executor),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Telechargement du poster expire", path=entry.path, timeout=self._timeout)
            return self._placeholder
        except ExternalLookupError as exc:
            logger.warning("Telechargement du poster impossible", path=entry.path, error=str(exc))
            return self._placeholder
        return str(cached)

    def find_sibling(self, video_path: Path, is_series: bool = False) -> Optional[Path]:
        """
        Cherche un poster a cote de la video (noms insensibles a la casse).

        Pour un episode range dans un dossier de saison, le dossier de la
        serie est aussi examine pour les noms generiques (poster, folder...).
        """
        stem = video_path.stem
        candidates = [name.format(stem=stem) for name in SIBLING_POSTER_NAMES]
        found = self._search_folder(video_path.parent, candidates)
        if found is not None or not is_series:
            return found

        if season_from_folder(video_path.parent.name) is None:
            return None
        generic = [name for name in SIBLING_POSTER_NAMES if "{stem}" not in name]
        return self._search_folder(video_path.parent.parent, generic)

    @staticmethod
    def _search_folder(folder: Path, names: list[str]) -> Optional[Path]:
        try:
            images = {
                p.name.lower(): p
                for p in folder.iterdir()
                if p.suffix.lower() in IMAGE_EXTENSIONS and p.is_file()
            }
        except OSError:
            return None
        for name in names:
            for ext in IMAGE_EXTENSIONS:
                match = images.get(f"{name}{ext}".lower())
                if match is not None:
                    return match
        return None
