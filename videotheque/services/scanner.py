"""
Service de scan : parcours des racines, extraction et reconciliation avec
le catalogue.

Modele d'execution :
- un seul scan a la fois dans le processus (ScanInProgressError sinon)
- les operations bloquantes (listing, guessit, pymediainfo, ecriture des
  posters) tournent dans un ThreadPoolExecutor borne a scan_workers
- un semaphore du meme nombre limite les elements en cours d'extraction
- la boucle principale est le seul ecrivain : elle consulte exists() et fait
  les upsert dans l'ordre de decouverte (parcours trie par nom)
- l'annulation est cooperative ; les entrees deja enregistrees le restent
"""

import asyncio
import threading
from collections import deque
from contextlib import aclosing
from collections.abc import AsyncIterator, Iterable
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from loguru import logger

from videotheque.core.entities.video import VideoEntry
from videotheque.core.errors import (
    ExtractionError,
    ScanInProgressError,
    ScanRootError,
)
from videotheque.core.ports.file_system import IFileSystem
from videotheque.core.ports.metadata import IMetadataProvider
from videotheque.core.ports.repositories import ICatalogRepository
from videotheque.core.value_objects.classification import (
    ScanItem,
    SeriesFolder,
    SingleVideo,
)
from videotheque.infrastructure.persistence.hash_service import compute_video_id, is_storable_path
from videotheque.services.classifier import PathClassifier
from videotheque.services.metadata_extractor import MetadataExtractor
from videotheque.services.thumbnail_resolver import ThumbnailResolver
from videotheque.utils.constants import ANCILLARY_DIR_NAMES
from videotheque.utils.helpers import printable_path


class CancellationToken:
    """Demande d'arret cooperative, utilisable depuis n'importe quel thread."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()


@dataclass(frozen=True)
class SkippedItem:
    """Element ignore pendant un scan, avec la raison."""

    path: str
    reason: str


@dataclass
class ScanReport:
    """
    Resultat d'un scan.

    Attributs:
        delta: Entrees nouvellement ajoutees, dans l'ordre de decouverte
        skipped: Elements ignores (dossier illisible, extraction en echec)
        cancelled: Le scan a ete interrompu avant la fin
    """

    delta: list[VideoEntry] = field(default_factory=list)
    skipped: list[SkippedItem] = field(default_factory=list)
    cancelled: bool = False

    @property
    def added_count(self) -> int:
        return len(self.delta)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)


@dataclass
class ScanOptions:
    """
    Options d'un scan, derivees des preferences utilisateur.

    Attributs:
        metadata_provider: Fournisseur externe (None si TMDB desactive) ;
                           il est ferme a la fin du scan, ou des le refus
                           du scan
        download_posters: Telechargement des posters autorise
    """

    metadata_provider: Optional[IMetadataProvider] = None
    download_posters: bool = False


@dataclass
class _DirectoryScan:
    """Resultat de l'inspection d'un repertoire (calcule dans le pool)."""

    items: list[tuple[str, ScanItem]] = field(default_factory=list)
    subdirs: list[tuple[Path, tuple[int, int]]] = field(default_factory=list)
    problems: list[SkippedItem] = field(default_factory=list)


class ScannerService:
    """
    Orchestrateur du scan.

    Args:
        file_system: Acces au systeme de fichiers
        classifier: Classification fichiers/dossiers
        metadata_extractor: Extraction des metadonnees
        thumbnail_resolver: Resolution des miniatures
        catalog: Repository du catalogue
        workers: Taille du pool d'extraction
    """

    # Un seul scan a la fois dans tout le processus
    _scan_lock = threading.Lock()

    def __init__(
        self,
        file_system: IFileSystem,
        classifier: PathClassifier,
        metadata_extractor: MetadataExtractor,
        thumbnail_resolver: ThumbnailResolver,
        catalog: ICatalogRepository,
        workers: int = 4,
    ) -> None:
        self._file_system = file_system
        self._classifier = classifier
        self._metadata_extractor = metadata_extractor
        self._thumbnail_resolver = thumbnail_resolver
        self._catalog = catalog
        self._workers = max(1, workers)

    @classmethod
    def is_scanning(cls) -> bool:
        return cls._scan_lock.locked()

    def scan(
        self,
        roots: Iterable[Path | str],
        cancel_token: Optional[CancellationToken] = None,
        options: Optional[ScanOptions] = None,
    ) -> ScanReport:
        """Version synchrone de scan_async (nouvelle boucle asyncio)."""
        return asyncio.run(self.scan_async(roots, cancel_token, options))

    async def scan_async(
        self,
        roots: Iterable[Path | str],
        cancel_token: Optional[CancellationToken] = None,
        options: Optional[ScanOptions] = None,
    ) -> ScanReport:
        """
        Scanne une ou plusieurs racines et retourne le delta.

        Un scan sans nouvelle video retourne un delta vide. Les echecs par
        element sont comptes dans report.skipped.

        Raises:
            ScanInProgressError: Un scan est deja en cours
            ScanRootError: Une racine est absente ou illisible
            StorageError: Le catalogue est indisponible
        """
        token = cancel_token or CancellationToken()
        options = options or ScanOptions()

        if not self._scan_lock.acquire(blocking=False):
            if options.metadata_provider is not None:
                await options.metadata_provider.close()
            raise ScanInProgressError()

        executor = ThreadPoolExecutor(
            max_workers=self._workers, thread_name_prefix="videotheque-scan"
        )
        try:
            root_paths = [Path(r).expanduser() for r in roots]
            logger.info("Debut du scan", roots=[str(r) for r in root_paths], workers=self._workers)
            report = await self._run(root_paths, token, options, executor)
            logger.info(
                "Fin du scan",
                added=report.added_count,
                skipped=report.skipped_count,
                cancelled=report.cancelled,
            )
            return report
        finally:
            try:
                executor.shutdown(wait=True, cancel_futures=True)
                if options.metadata_provider is not None:
                    await options.metadata_provider.close()
            finally:
                self._scan_lock.release()

    async def _run(
        self,
        roots: list[Path],
        token: CancellationToken,
        options: ScanOptions,
        executor: Executor,
    ) -> ScanReport:
        report = ScanReport()
        semaphore = asyncio.Semaphore(self._workers)
        pending: deque[tuple[ScanItem, asyncio.Task]] = deque()
        seen_ids: set[str] = set()
        max_pending = self._workers * 2

        try:
            async with aclosing(self._discover(roots, token, report, executor)) as discovered:
                async for video_id, item in discovered:
                    if token.is_cancelled:
                        break
                    if video_id in seen_ids:
                        continue
                    seen_ids.add(video_id)
                    if self._catalog.exists(video_id):
                        continue

                    task = asyncio.create_task(
                        self._process(item, options, semaphore, executor)
                    )
                    pending.append((item, task))
                    await self._collect(pending, report, max_pending)

            if not token.is_cancelled:
                await self._collect(pending, report, 0)
        except BaseException:
            await self._cancel_pending(pending)
            raise

        if token.is_cancelled:
            report.cancelled = True
            await self._cancel_pending(pending)
            logger.warning("Scan annule", added=report.added_count)
        return report

    async def _collect(
        self,
        pending: deque[tuple[ScanItem, asyncio.Task]],
        report: ScanReport,
        max_pending: int,
    ) -> None:
        """
        Enregistre les resultats termines, dans l'ordre de decouverte.

        Attend la tete de file tant que plus de max_pending elements sont en
        cours (0 : tout vider).
        """
        while pending:
            item, task = pending[0]
            if not task.done() and len(pending) <= max_pending:
                return
            pending.popleft()
            try:
                entry = await task
            except Exception as exc:
                # Echec limite a cet element : le scan continue
                if isinstance(exc, ExtractionError):
                    reason = exc.reason
                else:
                    reason = str(exc) or repr(exc)
                report.skipped.append(SkippedItem(str(item.path), reason))
                logger.warning("Element ignore", path=str(item.path), reason=reason)
                continue
            stored = self._catalog.upsert(entry)
            report.delta.append(stored)
            logger.debug("Video ajoutee", video_id=stored.id, title=stored.title)

    @staticmethod
    async def _cancel_pending(pending: deque[tuple[ScanItem, asyncio.Task]]) -> None:
        tasks = [task for _, task in pending]
        pending.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    async def _process(
        self,
        item: ScanItem,
        options: ScanOptions,
        semaphore: asyncio.Semaphore,
        executor: Executor,
    ) -> VideoEntry:
        """Extraction puis miniature d'un element (hors catalogue)."""
        async with semaphore:
            extracted = await self._metadata_extractor.extract(
                item, options.metadata_provider, executor
            )
            entry = extracted.entry
            entry.thumbnail = await self._thumbnail_resolver.resolve(
                entry, extracted.poster_url, options.download_posters, executor
            )
            return entry

    async def _discover(
        self,
        roots: list[Path],
        token: CancellationToken,
        report: ScanReport,
        executor: Executor,
    ) -> AsyncIterator[tuple[str, ScanItem]]:
        """
        Parcours en profondeur, trie par nom, des racines.

        Les repertoires deja visites (meme (st_dev, st_ino)) sont ignores :
        un lien symbolique vers un ancetre ne provoque pas de boucle.
        """
        loop = asyncio.get_running_loop()
        visited: set[tuple[int, int]] = set()

        for root in roots:
            identity = await loop.run_in_executor(executor, self._check_root, root)
            if identity in visited:
                continue
            visited.add(identity)

            stack: list[Path] = [root]
            while stack:
                if token.is_cancelled:
                    return
                directory = stack.pop()
                try:
                    result = await loop.run_in_executor(
                        executor, self._inspect_directory, directory
                    )
                except OSError as exc:
                    if directory == root:
                        raise ScanRootError(str(root), str(exc)) from exc
                    self._skip_directory(report, directory, str(exc))
                    continue
                except Exception as exc:
                    self._skip_directory(report, directory, repr(exc))
                    continue

                for problem in result.problems:
                    report.skipped.append(problem)
                    logger.warning("Entree ignoree", path=problem.path, reason=problem.reason)

                for video_id, item in result.items:
                    yield video_id, item

                children = []
                for subdir, sub_identity in result.subdirs:
                    if sub_identity in visited:
                        logger.debug("Dossier deja visite ignore", path=printable_path(subdir))
                        continue
                    visited.add(sub_identity)
                    children.append(subdir)
                # Pile : on empile a l'envers pour depiler dans l'ordre des noms
                stack.extend(reversed(children))

    @staticmethod
    def _skip_directory(report: ScanReport, directory: Path, reason: str) -> None:
        path = printable_path(directory)
        report.skipped.append(SkippedItem(path, reason))
        logger.warning("Dossier ignore", path=path, reason=reason)

    def _check_root(self, root: Path) -> tuple[int, int]:
        """Valide une racine et retourne son identite canonique."""
        if not self._file_system.exists(root):
            raise ScanRootError(str(root), "introuvable")
        if not self._file_system.is_dir(root):
            raise ScanRootError(str(root), "n'est pas un repertoire")
        try:
            return self._file_system.directory_identity(root)
        except OSError as exc:
            raise ScanRootError(str(root), str(exc)) from exc

    def _inspect_directory(self, directory: Path) -> _DirectoryScan:
        """
        Liste et classe un repertoire (execute dans le pool).

        Un dossier consomme (serie ou film) garde ses sous-dossiers non
        annexes : ils sont encore parcourus.

        Raises:
            OSError: Repertoire illisible
        """
        listing = self._file_system.list_directory(directory)
        result = _DirectoryScan()
        classification = self._classifier.classify(directory, True, listing.files)

        if isinstance(classification, SeriesFolder):
            consumed = True
            items = [
                ScanItem(path=ep.path, episode=ep, series_folder=directory)
                for ep in classification.episodes
            ]
        elif isinstance(classification, SingleVideo):
            consumed = True
            items = [ScanItem(path=classification.path)]
        else:
            consumed = False
            items = [
                ScanItem(path=f)
                for f in listing.files
                if isinstance(self._classifier.classify(f, False), SingleVideo)
            ]

        for item in items:
            if not is_storable_path(item.path):
                result.problems.append(
                    SkippedItem(printable_path(item.path), "nom de fichier non decodable")
                )
                continue
            result.items.append((compute_video_id(item.path), item))

        for subdir in listing.subdirs:
            if consumed and subdir.name.lower() in ANCILLARY_DIR_NAMES:
                continue
            try:
                identity = self._file_system.directory_identity(subdir)
            except OSError as exc:
                result.problems.append(SkippedItem(printable_path(subdir), str(exc)))
                continue
            result.subdirs.append((subdir, identity))
        return result
