"""
Tests unitaires pour PlaybackDispatcher.

Le lanceur de processus et le catalogue sont mockes.
"""

from datetime import datetime
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from tests.fixtures.files import touch
from videotheque.core.errors import LaunchError
from videotheque.core.ports.file_system import IProcessLauncher
from videotheque.core.ports.repositories import ICatalogRepository
from videotheque.services.playback import PlaybackDispatcher, system_open_command
from videotheque.services.subtitles import SubtitleFinder
from videotheque.user_settings import UserSettings


@pytest.fixture
def catalog() -> MagicMock:
    mock = MagicMock(spec=ICatalogRepository)
    mock.record_play.side_effect = lambda video_id, played_at: f"played:{video_id}"
    return mock


@pytest.fixture
def launcher() -> MagicMock:
    mock = MagicMock(spec=IProcessLauncher)
    mock.launch.return_value = 4242
    return mock


@pytest.fixture
def dispatcher(catalog, launcher) -> PlaybackDispatcher:
    return PlaybackDispatcher(catalog, launcher, SubtitleFinder(), platform="linux")


class TestSystemOpenCommand:
    @pytest.mark.parametrize(
        "platform,expected",
        [
            ("linux", ["xdg-open", "/v/a.mkv"]),
            ("darwin", ["open", "/v/a.mkv"]),
            ("win32", ["cmd", "/c", "start", "", "/v/a.mkv"]),
        ],
    )
    def test_platforms(self, platform: str, expected: list[str]) -> None:
        assert system_open_command("/v/a.mkv", platform) == expected


class TestBuildCommand:
    """Tests de construction de la commande du lecteur."""

    def test_system_player(self, dispatcher, make_entry) -> None:
        entry = make_entry("/v/Heat.mkv")
        command = dispatcher.build_command(entry, UserSettings())
        assert command == ["xdg-open", "/v/Heat.mkv"]

    def test_empty_player_path_uses_system(self, dispatcher, make_entry) -> None:
        settings = UserSettings(player_type="vlc", player_path="  ")
        assert dispatcher.build_command(make_entry("/v/Heat.mkv"), settings)[0] == "xdg-open"

    def test_vlc_with_subtitle(self, dispatcher, make_entry, tmp_path: Path) -> None:
        video = touch(tmp_path / "Heat.mkv")
        subtitle = touch(tmp_path / "Heat.srt")
        settings = UserSettings(player_type="vlc", player_path="/usr/bin/vlc")

        command = dispatcher.build_command(make_entry(str(video)), settings)

        assert command == ["/usr/bin/vlc", "--sub-file", str(subtitle), str(video)]

    def test_mpv_with_subtitle(self, dispatcher, make_entry, tmp_path: Path) -> None:
        video = touch(tmp_path / "Heat.mkv")
        subtitle = touch(tmp_path / "Heat.srt")
        settings = UserSettings(player_type="mpv", player_path="mpv")

        command = dispatcher.build_command(make_entry(str(video)), settings)

        assert command == ["mpv", f"--sub-file={subtitle}", str(video)]

    def test_subtitles_disabled(self, dispatcher, make_entry, tmp_path: Path) -> None:
        video = touch(tmp_path / "Heat.mkv")
        touch(tmp_path / "Heat.srt")
        settings = UserSettings(player_type="vlc", player_path="vlc", auto_subtitle=False)

        assert dispatcher.build_command(make_entry(str(video)), settings) == ["vlc", str(video)]

    def test_no_subtitle_found(self, dispatcher, make_entry, tmp_path: Path) -> None:
        video = touch(tmp_path / "Heat.mkv")
        settings = UserSettings(player_type="custom", player_path="/opt/player")

        assert dispatcher.build_command(make_entry(str(video)), settings) == ["/opt/player", str(video)]


class TestDispatch:
    """Tests du lancement et de la mise a jour des statistiques."""

    def test_successful_launch_records_play(
        self, dispatcher, catalog, launcher, make_entry, tmp_path: Path
    ) -> None:
        video = touch(tmp_path / "Heat.mkv")
        entry = make_entry(str(video))

        result = dispatcher.dispatch(entry, UserSettings())

        launcher.launch.assert_called_once_with(["xdg-open", str(video)])
        catalog.record_play.assert_called_once()
        video_id, played_at = catalog.record_play.call_args.args
        assert video_id == entry.id
        assert isinstance(played_at, datetime)
        assert played_at.tzinfo is not None
        assert result == f"played:{entry.id}"

    def test_missing_file(self, dispatcher, catalog, launcher, make_entry, tmp_path: Path) -> None:
        """Fichier absent : LaunchError, aucun lancement ni statistique."""
        entry = make_entry(str(tmp_path / "gone.mkv"))

        with pytest.raises(LaunchError):
            dispatcher.dispatch(entry, UserSettings())

        launcher.launch.assert_not_called()
        catalog.record_play.assert_not_called()

    def test_launcher_failure(self, dispatcher, catalog, launcher, make_entry, tmp_path: Path) -> None:
        """Lecteur introuvable : LaunchError, statistiques inchangees."""
        launcher.launch.side_effect = FileNotFoundError("vlc")
        entry = make_entry(str(touch(tmp_path / "Heat.mkv")))
        settings = UserSettings(player_type="vlc", player_path="vlc")

        with pytest.raises(LaunchError, match="vlc"):
            dispatcher.dispatch(entry, settings)

        catalog.record_play.assert_not_called()
