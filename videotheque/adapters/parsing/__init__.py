"""Adaptateurs de parsing : guessit (noms de fichiers) et pymediainfo (sonde)."""

from videotheque.adapters.parsing.guessit_parser import GuessitFilenameParser
from videotheque.adapters.parsing.mediainfo_extractor import MediaInfoProbe

__all__ = ["GuessitFilenameParser", "MediaInfoProbe"]
