"""
Service d'extraction des metadonnees d'une video.

Construit une VideoEntry (non sauvegardee) a partir d'un ScanItem :
- partie locale, bloquante, executee dans le pool du scan : stat, parsing
  du nom (guessit, repli regex), sonde media (pymediainfo)
- partie reseau, optionnelle : recherche TMDB bornee par un timeout

Ordre de derivation du titre : titre TMDB (si active et trouve), puis nom
nettoye, puis nom brut. L'extraction ne modifie ni le disque ni le catalogue.
"""

import asyncio
from concurrent.futures import Executor
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from loguru import logger

from videotheque.core.entities.video import VideoEntry
from videotheque.core.errors import ExternalLookupError, ExtractionError
from videotheque.core.ports.metadata import IMetadataProvider, MetadataQuery, MetadataResult
from videotheque.core.ports.parser import IFilenameParser, IMediaProbe
from videotheque.core.value_objects.classification import ScanItem
from videotheque.core.value_objects.parsed_info import MediaType
from videotheque.infrastructure.persistence.hash_service import canonical_path, compute_video_id
from videotheque.services.classifier import match_episode, season_from_folder
from videotheque.utils.helpers import clean_title, clean_video_name, format_duration, utc_now


@dataclass
class ExtractedVideo:
    """
    Resultat d'extraction.

    Attributs:
        entry: Entree candidate (thumbnail encore vide)
        poster_url: URL du poster TMDB, pour le resolveur de miniatures
    """

    entry: VideoEntry
    poster_url: Optional[str] = None


class MetadataExtractor:
    """
    Extracteur de metadonnees.

    Args:
        filename_parser: Parser de noms (guessit)
        media_probe: Sonde media (pymediainfo)
        lookup_timeout: Delai maximum d'une recherche externe, en secondes
    """

    def __init__(
        self,
        filename_parser: IFilenameParser,
        media_probe: IMediaProbe,
        lookup_timeout: float = 10.0,
    ) -> None:
        self._filename_parser = filename_parser
        self._media_probe = media_probe
        self._lookup_timeout = lookup_timeout

    async def extract(
        self,
        item: ScanItem,
        metadata_provider: Optional[IMetadataProvider] = None,
        executor: Optional[Executor] = None,
    ) -> ExtractedVideo:
        """
        Extrait les metadonnees d'un element du scan.

        Args:
            item: Element a extraire
            metadata_provider: Fournisseur externe, None si l'integration est desactivee
            executor: Pool pour la partie bloquante (executor par defaut si None)

        Raises:
            ExtractionError: Fichier disparu ou illisible
        """
        loop = asyncio.get_running_loop()
        entry, query = await loop.run_in_executor(executor, self.extract_local, item)

        if metadata_provider is None:
            return ExtractedVideo(entry=entry)

        result = await self._lookup(metadata_provider, query, entry.path)
        if result is None:
            return ExtractedVideo(entry=entry)
        self.apply_metadata(entry, result)
        return ExtractedVideo(entry=entry, poster_url=result.poster_url)

    def extract_local(self, item: ScanItem) -> tuple[VideoEntry, MetadataQuery]:
        """
        Partie locale de l'extraction (bloquante).

        Returns:
            L'entree candidate et la requete a soumettre au fournisseur externe
        """
        path = item.path
        try:
            if not path.is_file():
                raise ExtractionError(str(path), "fichier introuvable")
        except OSError as exc:
            raise ExtractionError(str(path), str(exc)) from exc

        stem = path.stem
        parsed = self._parse(path.name)

        if item.episode is not None:
            is_series = True
            season = item.episode.season
            episode = item.episode.episode
            episode_title = item.episode.episode_title
        else:
            match = match_episode(path.name, season_from_folder(path.parent.name))
            is_series = match is not None
            season = match.season if match else 0
            episode = match.episode if match else 0
            episode_title = match.episode_title if match else ""

        guessed = clean_title(parsed.title)
        if is_series:
            series_title = guessed or self._series_name_from_folder(item, path)
            title = series_title or stem
        else:
            series_title = ""
            title = guessed or clean_video_name(stem) or stem

        entry = VideoEntry(
            id=compute_video_id(path),
            path=str(canonical_path(path)),
            original_title=stem,
            title=title,
            duration=self._probe_duration(path),
            create_time=utc_now(),
            is_series=is_series,
            series_title=series_title,
            season=season,
            episode=episode,
            episode_title=episode_title,
        )
        query = MetadataQuery(
            title=series_title if is_series else title,
            year=parsed.year,
            season=season if is_series else None,
            episode=episode if is_series else None,
        )
        return entry, query

    def apply_metadata(self, entry: VideoEntry, result: MetadataResult) -> None:
        """Reporte le resultat externe sur l'entree."""
        if result.title:
            entry.title = result.title
            if entry.is_series:
                entry.series_title = result.title
        if result.overview:
            entry.description = result.overview
        if result.genres:
            entry.category = ", ".join(result.genres)
        if entry.is_series:
            if result.episode_title:
                entry.episode_title = result.episode_title
            if result.episode_overview:
                entry.episode_overview = result.episode_overview

    async def _lookup(
        self, provider: IMetadataProvider, query: MetadataQuery, path: str
    ) -> Optional[MetadataResult]:
        """Recherche externe bornee ; tout echec retombe sur le repli local."""
        if not query.title:
            return None
        try:
            return await asyncio.wait_for(provider.lookup(query), timeout=self._lookup_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Recherche de metadonnees expiree",
                path=path,
                source=provider.source,
                timeout=self._lookup_timeout,
            )
        except ExternalLookupError as exc:
            logger.warning(
                "Recherche de metadonnees impossible",
                path=path,
                source=provider.source,
                error=str(exc),
            )
        return None

    def _parse(self, filename: str):
        parsed = self._filename_parser.parse(filename, MediaType.UNKNOWN)
        logger.debug("Nom de fichier analyse", filename=filename, title=parsed.title)
        return parsed

    def _probe_duration(self, path: Path) -> str:
        info = self._media_probe.probe(path)
        if info is None or info.duration_seconds is None:
            return ""
        return format_duration(info.duration_seconds)

    @staticmethod
    def _series_name_from_folder(item: ScanItem, path: Path) -> str:
        """Nom de serie deduit du dossier (parent du dossier de saison le cas echeant)."""
        folder = item.series_folder or path.parent
        if season_from_folder(folder.name) is not None and folder.parent != folder:
            folder = folder.parent
        return clean_video_name(folder.name)
