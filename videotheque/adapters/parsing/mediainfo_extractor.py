"""
Sonde media legere avec pymediainfo.

Ce module fournit MediaInfoProbe qui implemente IMediaProbe : duree et
format video sans decodage du flux.
"""

from pathlib import Path
from typing import Optional

from loguru import logger
from pymediainfo import MediaInfo as PyMediaInfo

from videotheque.core.ports.parser import IMediaProbe
from videotheque.core.value_objects.media_info import MediaInfo


class MediaInfoProbe(IMediaProbe):
    """
    Sonde utilisant pymediainfo (libmediainfo).

    Un echec de la sonde (bibliotheque absente, fichier corrompu) retourne
    None : la duree reste simplement inconnue.
    """

    def probe(self, file_path: Path) -> Optional[MediaInfo]:
        """
        Sonde un fichier video.

        Args:
            file_path: Chemin complet vers le fichier video

        Returns:
            MediaInfo, ou None si la sonde echoue ou ne trouve aucune piste utile
        """
        if not file_path.exists():
            return None

        try:
            media_info = PyMediaInfo.parse(str(file_path))
        except Exception as exc:
            logger.debug("Sonde mediainfo impossible", path=str(file_path), error=str(exc))
            return None

        general_tracks = [t for t in media_info.tracks if t.track_type == "General"]
        video_tracks = [t for t in media_info.tracks if t.track_type == "Video"]

        duration_seconds = self._extract_duration(general_tracks, video_tracks)
        width = height = None
        video_codec = None
        if video_tracks:
            track = video_tracks[0]
            width = self._to_int(track.width)
            height = self._to_int(track.height)
            video_codec = track.format

        if duration_seconds is None and width is None and video_codec is None:
            return None

        return MediaInfo(
            duration_seconds=duration_seconds,
            width=width,
            height=height,
            video_codec=video_codec,
        )

    def _extract_duration(self, general_tracks: list, video_tracks: list) -> Optional[int]:
        """
        Extrait la duree en SECONDES.

        pymediainfo retourne la duree en millisecondes. La piste generale est
        prioritaire, la premiere piste video sert de repli.
        """
        for track in general_tracks[:1] + video_tracks[:1]:
            duration_ms = track.duration
            if duration_ms is None:
                continue
            try:
                return int(float(duration_ms) / 1000)
            except (TypeError, ValueError):
                continue
        return None

    @staticmethod
    def _to_int(value) -> Optional[int]:
        if value is None:
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            return None
