"""
Container d'injection de dependances via dependency-injector.

Le catalogue (engine + session) est une ressource unique du processus :
initialisee au demarrage par init_resources(), liberee par
shutdown_resources().
"""

from dependency_injector import containers, providers

from .adapters.api.cache import open_api_cache
from .adapters.api.poster_downloader import HttpPosterDownloader
from .adapters.api.tmdb_client import TMDBClient
from .adapters.file_system import FileSystemAdapter
from .adapters.parsing.guessit_parser import GuessitFilenameParser
from .adapters.parsing.mediainfo_extractor import MediaInfoProbe
from .adapters.process_launcher import SubprocessLauncher
from .config import Settings
from .infrastructure.persistence.database import init_db, open_session
from .infrastructure.persistence.repositories import SQLModelCatalogRepository
from .services.classifier import PathClassifier
from .services.library import LibraryService
from .services.metadata_extractor import MetadataExtractor
from .services.playback import PlaybackDispatcher
from .services.scanner import ScannerService
from .services.subtitles import SubtitleFinder
from .services.thumbnail_resolver import ThumbnailResolver
from .user_settings import UserSettingsStore


class Container(containers.DeclarativeContainer):
    """Container DI de l'application.

    Utilisation :
        container = Container()
        container.init_resources()
        library = container.library_service()
        ...
        container.shutdown_resources()
    """

    # Configuration - singleton charge une seule fois
    config = providers.Singleton(Settings)

    # Catalogue - ressources uniques du processus
    database = providers.Resource(init_db, database_url=config.provided.database_url)
    session = providers.Resource(open_session, engine=database)
    catalog_repository = providers.Singleton(SQLModelCatalogRepository, session=session)

    # Adapters - implementations concretes des ports
    file_system = providers.Singleton(FileSystemAdapter)
    filename_parser = providers.Singleton(GuessitFilenameParser)
    media_probe = providers.Singleton(MediaInfoProbe)
    process_launcher = providers.Singleton(SubprocessLauncher)
    poster_downloader = providers.Singleton(
        HttpPosterDownloader,
        timeout=config.provided.thumbnail_timeout,
    )

    # Cache API - ressource partagee par les clients TMDB
    api_cache = providers.Resource(open_api_cache, cache_dir=config.provided.api_cache_dir)

    # Client TMDB - Factory : la cle vient des preferences au moment du scan
    # Utiliser: container.tmdb_client(api_key="...")
    tmdb_client = providers.Factory(
        TMDBClient,
        cache=api_cache,
        language=config.provided.tmdb_language,
        timeout=config.provided.lookup_timeout,
    )

    # Services
    classifier = providers.Singleton(
        PathClassifier,
        video_extensions=config.provided.video_extensions,
    )
    metadata_extractor = providers.Singleton(
        MetadataExtractor,
        filename_parser=filename_parser,
        media_probe=media_probe,
        lookup_timeout=config.provided.lookup_timeout,
    )
    thumbnail_resolver = providers.Singleton(
        ThumbnailResolver,
        thumbnail_dir=config.provided.thumbnail_dir,
        placeholder=config.provided.placeholder_thumbnail,
        poster_downloader=poster_downloader,
        timeout=config.provided.thumbnail_timeout,
    )
    scanner_service = providers.Singleton(
        ScannerService,
        file_system=file_system,
        classifier=classifier,
        metadata_extractor=metadata_extractor,
        thumbnail_resolver=thumbnail_resolver,
        catalog=catalog_repository,
        workers=config.provided.scan_workers,
    )
    subtitle_finder = providers.Singleton(SubtitleFinder)
    playback_dispatcher = providers.Singleton(
        PlaybackDispatcher,
        catalog=catalog_repository,
        launcher=process_launcher,
        subtitle_finder=subtitle_finder,
    )
    settings_store = providers.Singleton(
        UserSettingsStore,
        settings_file=config.provided.settings_file,
    )

    library_service = providers.Singleton(
        LibraryService,
        catalog=catalog_repository,
        scanner=scanner_service,
        playback=playback_dispatcher,
        settings_store=settings_store,
        file_system=file_system,
        provider_factory=tmdb_client.provider,
        fallback_tmdb_key=config.provided.tmdb_api_key,
    )
