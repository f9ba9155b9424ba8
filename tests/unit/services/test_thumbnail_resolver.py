"""
Tests unitaires pour ThumbnailResolver.

Le telechargeur de posters est mocke ; les images voisines sont reelles.
"""

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

from tests.fixtures.files import touch
from videotheque.core.errors import ExternalLookupError
from videotheque.core.ports.metadata import IPosterDownloader
from videotheque.services.thumbnail_resolver import ThumbnailResolver

PLACEHOLDER = "/assets/no-poster.png"
POSTER_URL = "https://image.tmdb.org/t/p/w500/inception.jpg"


@pytest.fixture
def downloader() -> MagicMock:
    mock = MagicMock(spec=IPosterDownloader)

    async def fake_download(url: str, destination: Path, executor=None) -> Path:
        touch(destination, b"\xff\xd8\xff")
        return destination

    mock.download = AsyncMock(side_effect=fake_download)
    return mock


@pytest.fixture
def resolver(tmp_path: Path, downloader: MagicMock) -> ThumbnailResolver:
    return ThumbnailResolver(tmp_path / "thumbs", PLACEHOLDER, downloader, timeout=0.5)


class TestFindSibling:
    """Tests de la recherche d'images voisines."""

    def test_stem_poster_has_priority(self, resolver: ThumbnailResolver, tmp_path: Path) -> None:
        video = touch(tmp_path / "Inception.mkv")
        touch(tmp_path / "poster.jpg")
        specific = touch(tmp_path / "Inception-poster.png")

        assert resolver.find_sibling(video) == specific

    def test_generic_names_case_insensitive(self, resolver: ThumbnailResolver, tmp_path: Path) -> None:
        video = touch(tmp_path / "Heat.mkv")
        folder_image = touch(tmp_path / "Folder.JPG")

        assert resolver.find_sibling(video) == folder_image

    def test_no_image(self, resolver: ThumbnailResolver, tmp_path: Path) -> None:
        video = touch(tmp_path / "Heat.mkv")
        touch(tmp_path / "notes.txt")

        assert resolver.find_sibling(video) is None

    def test_series_poster_in_show_folder(self, resolver: ThumbnailResolver, tmp_path: Path) -> None:
        """Un episode de dossier de saison utilise le poster du dossier de la serie."""
        show_poster = touch(tmp_path / "Show" / "poster.jpg")
        video = touch(tmp_path / "Show" / "Season 1" / "Show.S01E01.mkv")

        assert resolver.find_sibling(video, is_series=True) == show_poster
        assert resolver.find_sibling(video, is_series=False) is None


class TestResolve:
    """Tests de l'ordre de resolution."""

    @pytest.mark.asyncio
    async def test_sibling_wins_over_download(
        self, resolver: ThumbnailResolver, downloader, tmp_path: Path, make_entry
    ) -> None:
        video = touch(tmp_path / "Inception.mkv")
        poster = touch(tmp_path / "poster.jpg")
        entry = make_entry(str(video))

        result = await resolver.resolve(entry, POSTER_URL, download_enabled=True)

        assert result == str(poster)
        downloader.download.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_placeholder_when_download_disabled(
        self, resolver: ThumbnailResolver, downloader, tmp_path: Path, make_entry
    ) -> None:
        entry = make_entry(str(touch(tmp_path / "Inception.mkv")))

        result = await resolver.resolve(entry, POSTER_URL, download_enabled=False)

        assert result == PLACEHOLDER
        downloader.download.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_download_into_cache(
        self, resolver: ThumbnailResolver, downloader, tmp_path: Path, make_entry
    ) -> None:
        """Le poster est telecharge sous <thumbnail_dir>/<id>.jpg."""
        entry = make_entry(str(touch(tmp_path / "videos" / "Inception.mkv")))

        result = await resolver.resolve(entry, POSTER_URL, download_enabled=True)

        expected = tmp_path / "thumbs" / f"{entry.id}.jpg"
        assert result == str(expected)
        assert expected.is_file()
        downloader.download.assert_awaited_once_with(POSTER_URL, expected, executor=None)

    @pytest.mark.asyncio
    async def test_cached_poster_is_reused(
        self, resolver: ThumbnailResolver, downloader, tmp_path: Path, make_entry
    ) -> None:
        entry = make_entry(str(touch(tmp_path / "videos" / "Inception.mkv")))
        cached = touch(resolver.cached_poster_path(entry.id))

        result = await resolver.resolve(entry, POSTER_URL, download_enabled=True)

        assert result == str(cached)
        downloader.download.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_url_gives_placeholder(
        self, resolver: ThumbnailResolver, tmp_path: Path, make_entry
    ) -> None:
        entry = make_entry(str(touch(tmp_path / "videos" / "Inception.mkv")))

        assert await resolver.resolve(entry, None, download_enabled=True) == PLACEHOLDER

    @pytest.mark.asyncio
    async def test_download_error_gives_placeholder(
        self, resolver: ThumbnailResolver, downloader, tmp_path: Path, make_entry
    ) -> None:
        downloader.download.side_effect = ExternalLookupError("HTTP 404")
        entry = make_entry(str(touch(tmp_path / "videos" / "Inception.mkv")))

        assert await resolver.resolve(entry, POSTER_URL, download_enabled=True) == PLACEHOLDER

    @pytest.mark.asyncio
    async def test_download_timeout_gives_placeholder(
        self, tmp_path: Path, make_entry
    ) -> None:
        """Un telechargement trop lent est abandonne."""
        downloader = MagicMock(spec=IPosterDownloader)

        async def slow_download(url: str, destination: Path, executor=None) -> Path:
            await asyncio.sleep(5)
            return destination

        downloader.download = AsyncMock(side_effect=slow_download)
        resolver = ThumbnailResolver(tmp_path / "thumbs", PLACEHOLDER, downloader, timeout=0.05)
        entry = make_entry(str(touch(tmp_path / "videos" / "Inception.mkv")))

        assert await resolver.resolve(entry, POSTER_URL, download_enabled=True) == PLACEHOLDER
