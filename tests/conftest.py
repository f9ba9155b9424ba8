"""
Fixtures pytest partagees pour les tests Videotheque.

Ce module contient les fixtures communes utilisees dans les tests:
- Settings de test avec chemins temporaires
- Catalogue SQLite temporaire (engine, session, repository)
- Mocks des ports (parser, sonde media, systeme de fichiers)
- Fabrique de VideoEntry
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterator, Optional
from unittest.mock import MagicMock

import pytest
from sqlalchemy import Engine
from sqlmodel import Session

from videotheque.config import Settings
from videotheque.core.entities.video import VideoEntry
from videotheque.core.ports.parser import IFilenameParser, IMediaProbe
from videotheque.core.value_objects import MediaInfo, MediaType, ParsedFilename
from videotheque.infrastructure.persistence.database import init_db
from videotheque.infrastructure.persistence.hash_service import compute_video_id
from videotheque.infrastructure.persistence.repositories import SQLModelCatalogRepository
from videotheque.utils.helpers import clean_video_name


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """
    Settings de test avec chemins temporaires.

    _env_file=None ignore un eventuel .env local.
    """
    return Settings(
        _env_file=None,
        data_dir=tmp_path / "data",
        database_url=f"sqlite:///{tmp_path}/test.db",
        tmdb_api_key=None,
        scan_workers=2,
        lookup_timeout=1.0,
        thumbnail_timeout=1.0,
        log_file=tmp_path / "test.log",
    )


@pytest.fixture
def engine(tmp_path: Path) -> Iterator[Engine]:
    """Engine SQLite temporaire initialise via la ressource init_db."""
    resource = init_db(f"sqlite:///{tmp_path}/catalog.db")
    engine = next(resource)
    yield engine
    resource.close()


@pytest.fixture
def session(engine: Engine) -> Iterator[Session]:
    with Session(engine) as session:
        yield session


@pytest.fixture
def catalog(session: Session) -> SQLModelCatalogRepository:
    """Repository du catalogue sur la base temporaire."""
    return SQLModelCatalogRepository(session)


@pytest.fixture
def make_entry() -> Callable[..., VideoEntry]:
    """
    Fabrique de VideoEntry.

    L'id est derive du chemin, comme pendant un scan.
    """

    def _make(path: str = "/videos/Inception.mkv", **overrides) -> VideoEntry:
        stem = Path(path).stem
        values = dict(
            id=compute_video_id(Path(path)),
            path=path,
            original_title=stem,
            title=stem,
            create_time=datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc),
        )
        values.update(overrides)
        return VideoEntry(**values)

    return _make


@pytest.fixture
def mock_filename_parser() -> MagicMock:
    """
    Mock de IFilenameParser.

    Retourne le nom nettoye par la regex comme titre.
    """
    mock = MagicMock(spec=IFilenameParser)

    def default_parse(filename: str, type_hint: Optional[MediaType] = None) -> ParsedFilename:
        return ParsedFilename(title=clean_video_name(Path(filename).stem))

    mock.parse.side_effect = default_parse
    return mock


@pytest.fixture
def mock_media_probe() -> MagicMock:
    """Mock de IMediaProbe : 2h05m30s par defaut."""
    mock = MagicMock(spec=IMediaProbe)
    mock.probe.return_value = MediaInfo(duration_seconds=7530)
    return mock

