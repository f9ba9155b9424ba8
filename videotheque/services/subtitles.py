"""
Recherche du sous-titre a charger avec une video.

Candidats : fichiers .srt/.ass/.ssa/.vtt du dossier de la video et de ses
sous-dossiers Subs, Subtitles ou 字幕. Score :
- 3 : meme nom que la video (eventuellement suivi d'un suffixe de langue)
- 2 : episode SxxEyy identique et langue preferee (serie), ou langue preferee (film)
- 1 : autre candidat
Les sous-titres d'un autre episode sont ecartes.
"""

import re
from pathlib import Path
from typing import Optional

from videotheque.utils.constants import (
    SUBTITLE_DIR_NAMES,
    SUBTITLE_EXTENSIONS,
    SUBTITLE_LANGUAGE_KEYWORDS,
)

_EPISODE_CODE = re.compile(r"(?i)S(\d{1,2})[\s._-]*E(\d{1,3})(?!\d)")
_TOKEN_SPLIT = re.compile(r"[\s._\-\[\]()]+")


def language_keywords(language: str) -> tuple[str, ...]:
    """Mots-cles associes a un code de langue ("fr" -> fr, fre, french...)."""
    code = language.strip().lower()
    return SUBTITLE_LANGUAGE_KEYWORDS.get(code, (code,) if code else ())


def _episode_code(name: str) -> Optional[tuple[int, int]]:
    match = _EPISODE_CODE.search(name)
    if match is None:
        return None
    return int(match.group(1)), int(match.group(2))


def _has_language(stem: str, keywords: tuple[str, ...]) -> bool:
    tokens = {t.lower() for t in _TOKEN_SPLIT.split(stem) if t}
    for keyword in keywords:
        if keyword.isascii():
            if keyword in tokens:
                return True
        elif keyword in stem:
            return True
    return False


class SubtitleFinder:
    """Choisit le meilleur sous-titre pour une video."""

    def find(self, video_path: Path, language: str = "fr") -> Optional[Path]:
        """
        Args:
            video_path: Fichier video
            language: Langue preferee (code court)

        Returns:
            Le sous-titre de meilleur score, ou None
        """
        keywords = language_keywords(language)
        video_stem = video_path.stem
        video_code = _episode_code(video_stem)

        best: Optional[tuple[int, str, Path]] = None
        for candidate in self._candidates(video_path.parent):
            stem = candidate.stem
            candidate_code = _episode_code(stem)
            if video_code and candidate_code and candidate_code != video_code:
                continue

            if stem == video_stem or stem.startswith(f"{video_stem}."):
                score = 3
            elif video_code and candidate_code == video_code and _has_language(stem, keywords):
                score = 2
            elif not video_code and _has_language(stem, keywords):
                score = 2
            else:
                score = 1

            key = (score, candidate.name, candidate)
            if best is None or score > best[0] or (score == best[0] and candidate.name < best[1]):
                best = key

        return best[2] if best else None

    @staticmethod
    def _candidates(folder: Path) -> list[Path]:
        folders = [folder]
        wanted = {name.lower() for name in SUBTITLE_DIR_NAMES}
        try:
            folders.extend(
                sorted(p for p in folder.iterdir() if p.is_dir() and p.name.lower() in wanted)
            )
        except OSError:
            return []

        candidates: list[Path] = []
        for current in folders:
            try:
                candidates.extend(
                    sorted(
                        p for p in current.iterdir()
                        if p.is_file() and p.suffix.lower() in SUBTITLE_EXTENSIONS
                    )
                )
            except OSError:
                continue
        return candidates
