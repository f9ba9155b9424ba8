"""Tests unitaires pour Settings (pydantic-settings)."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from videotheque.config import DEFAULT_VIDEO_EXTENSIONS, Settings


class TestDefaults:
    def test_derived_paths(self, tmp_path: Path) -> None:
        """Base, preferences, miniatures et cache API sont sous data_dir."""
        settings = Settings(_env_file=None, data_dir=tmp_path)

        assert settings.settings_file == tmp_path / "settings.json"
        assert settings.thumbnail_dir == tmp_path / "thumbnails"
        assert settings.api_cache_dir == tmp_path / "cache" / "api"
        assert settings.database_url == f"sqlite:///{tmp_path / 'videotheque.db'}"

    def test_explicit_paths_are_kept(self, tmp_path: Path) -> None:
        settings = Settings(
            _env_file=None,
            data_dir=tmp_path,
            thumbnail_dir=tmp_path / "posters",
            database_url="sqlite:///:memory:",
        )
        assert settings.thumbnail_dir == tmp_path / "posters"
        assert settings.database_url == "sqlite:///:memory:"

    def test_scan_defaults(self, tmp_path: Path) -> None:
        settings = Settings(_env_file=None, data_dir=tmp_path)
        assert settings.scan_workers == 4
        assert settings.lookup_timeout == 10.0
        assert settings.video_extensions == DEFAULT_VIDEO_EXTENSIONS
        assert ".mkv" in settings.video_extension_set

    def test_home_is_expanded(self) -> None:
        settings = Settings(_env_file=None, data_dir="~/videos-data")
        assert "~" not in str(settings.data_dir)
        assert "~" not in settings.database_url


class TestValidation:
    def test_workers_must_be_positive(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, data_dir=tmp_path, scan_workers=0)

    def test_extensions_are_normalized(self, tmp_path: Path) -> None:
        settings = Settings(_env_file=None, data_dir=tmp_path, video_extensions=["MKV", ".Mp4"])
        assert settings.video_extensions == (".mkv", ".mp4")


class TestEnvironment:
    def test_prefixed_variables(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("VIDEOTHEQUE_DATA_DIR", str(tmp_path))
        monkeypatch.setenv("VIDEOTHEQUE_SCAN_WORKERS", "8")
        monkeypatch.setenv("VIDEOTHEQUE_TMDB_API_KEY", "env-key")

        settings = Settings(_env_file=None)

        assert settings.data_dir == tmp_path
        assert settings.scan_workers == 8
        assert settings.tmdb_api_key == "env-key"

    def test_extensions_from_comma_list(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("VIDEOTHEQUE_VIDEO_EXTENSIONS", "mkv, AVI")

        settings = Settings(_env_file=None, data_dir=tmp_path)

        assert settings.video_extensions == (".mkv", ".avi")
