"""
Implementation du parser de noms de fichiers avec guessit.

Ce module fournit GuessitFilenameParser qui implemente IFilenameParser
pour obtenir un titre nettoye (sans groupe de release, resolution, codec,
source ni annee) et les numeros de saison/episode.
"""

from typing import Any, Optional

from guessit import guessit
from guessit.api import GuessitException
from loguru import logger

from videotheque.core.ports.parser import IFilenameParser
from videotheque.core.value_objects.parsed_info import MediaType, ParsedFilename


class GuessitFilenameParser(IFilenameParser):
    """
    Parser de noms de fichiers utilisant la bibliotheque guessit.
    """

    def parse(
        self, filename: str, type_hint: Optional[MediaType] = None
    ) -> ParsedFilename:
        """
        Parse un nom de fichier video et extrait les informations structurees.

        Args:
            filename: Nom du fichier a parser (sans le chemin)
            type_hint: Indication du type de media attendu.
                       Si fourni, force guessit a utiliser ce type.

        Returns:
            ParsedFilename ; title vaut "" si guessit ne trouve pas de titre.
        """
        try:
            result = guessit(filename, self._build_options(type_hint))
        except GuessitException as exc:
            logger.warning("guessit n'a pas pu analyser le nom", filename=filename, error=str(exc))
            return ParsedFilename(title="", media_type=type_hint or MediaType.UNKNOWN)
        return self._map_to_parsed_filename(result, type_hint)

    def _build_options(self, type_hint: Optional[MediaType]) -> dict[str, Any]:
        """Construit le dictionnaire d'options pour guessit."""
        options: dict[str, Any] = {}
        if type_hint == MediaType.MOVIE:
            options["type"] = "movie"
        elif type_hint == MediaType.SERIES:
            options["type"] = "episode"
        return options

    def _map_to_parsed_filename(
        self, result: dict[str, Any], type_hint: Optional[MediaType]
    ) -> ParsedFilename:
        """
        Mappe le resultat guessit vers un ParsedFilename.

        Args:
            result: Dictionnaire retourne par guessit
            type_hint: Type de media attendu (prioritaire si fourni)

        Returns:
            ParsedFilename avec les informations mappees
        """
        if type_hint is not None and type_hint != MediaType.UNKNOWN:
            media_type = type_hint
        else:
            media_type = self._map_type(result.get("type"))

        return ParsedFilename(
            title=self._as_text(result.get("title")),
            year=self._first_int(result.get("year")),
            media_type=media_type,
            season=self._first_int(result.get("season")),
            episode=self._first_int(result.get("episode")),
            episode_title=self._as_text(result.get("episode_title")) or None,
            resolution=self._as_text(result.get("screen_size")) or None,
            source=self._as_text(result.get("source")) or None,
            release_group=self._as_text(result.get("release_group")) or None,
        )

    def _map_type(self, guessit_type: Optional[str]) -> MediaType:
        if guessit_type == "movie":
            return MediaType.MOVIE
        if guessit_type == "episode":
            return MediaType.SERIES
        return MediaType.UNKNOWN

    @staticmethod
    def _as_text(value: Any) -> str:
        """guessit peut retourner une liste quand plusieurs valeurs sont trouvees."""
        if value is None:
            return ""
        if isinstance(value, list):
            value = value[0] if value else ""
        return str(value).strip()

    @staticmethod
    def _first_int(value: Any) -> Optional[int]:
        """Premier entier d'une valeur guessit (les doubles episodes sont des listes)."""
        if isinstance(value, list):
            value = value[0] if value else None
        if value is None:
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            return None
