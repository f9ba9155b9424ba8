"""
Classification des entrees du systeme de fichiers.

Fonction pure de ses entrees (chemin, drapeau repertoire, contenu) : aucun
acces disque. Produit NotVideo, SingleVideo ou SeriesFolder.

Motifs d'episode, par ordre de priorite (le premier qui correspond gagne) :
1. S01E02, s1e2, S01.E02, S01 E02
2. 1x02
3. 第1季第2集
4. 第2集 / 第2话 (saison : dossier, sinon 1)
5. E02, EP02, Episode 2 (saison : dossier, sinon 1)
"""

import re
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from videotheque.core.value_objects.classification import (
    Classification,
    EpisodeRef,
    NotVideo,
    SeriesFolder,
    SingleVideo,
)
from videotheque.utils.constants import IGNORED_FILE_PATTERN
from videotheque.utils.helpers import clean_title, clean_video_name

# (motif, porte la saison)
EPISODE_PATTERNS: tuple[tuple[re.Pattern, bool], ...] = (
    (re.compile(r"(?i)(?<![a-z0-9])S(?P<season>\d{1,2})[\s._-]*E(?P<episode>\d{1,3})(?!\d)"), True),
    (re.compile(r"(?i)(?<![a-z0-9])(?P<season>\d{1,2})x(?P<episode>\d{2,3})(?![a-z0-9])"), True),
    (re.compile(r"第(?P<season>\d{1,3})季第(?P<episode>\d{1,4})集"), True),
    (re.compile(r"第(?P<episode>\d{1,4})[集话話]"), False),
    (re.compile(r"(?i)(?<![a-z0-9])(?:Episode|EP?)[\s._-]?(?P<episode>\d{1,3})(?!\d)"), False),
)

SEASON_FOLDER_PATTERNS = (
    re.compile(r"(?i)(?<![a-z0-9])(?:season|saison|staffel)[\s._-]*(\d{1,2})(?!\d)"),
    re.compile(r"(?i)^S(\d{1,2})$"),
    re.compile(r"第(\d{1,3})季"),
)

# Debut des tags de release apres le titre d'episode
_RELEASE_TOKEN = re.compile(
    r"(?i)(?<![a-z0-9])("
    r"\d{3,4}p|4k|uhd|hdr|10bit|web[-.]?dl|webrip|web|blu-?ray|brrip|bdrip|hdtv|dvdrip"
    r"|x26[45]|h\.?26[45]|hevc|avc|xvid|aac|ac3|dts|multi|truefrench|french|vostfr|proper|repack"
    r")(?![a-z0-9])"
)


@dataclass(frozen=True)
class EpisodeMatch:
    """Resultat d'un motif d'episode sur un nom de fichier."""

    season: int
    episode: int
    episode_title: str = ""


def season_from_folder(folder_name: str) -> Optional[int]:
    """Saison indiquee par un nom de dossier ("Season 2", "Saison 2", "S02", "第2季")."""
    for pattern in SEASON_FOLDER_PATTERNS:
        match = pattern.search(folder_name)
        if match:
            return int(match.group(1))
    return None


def _episode_title(remainder: str) -> str:
    """Titre d'episode : texte apres le motif, coupe au premier tag de release."""
    token = _RELEASE_TOKEN.search(remainder)
    if token:
        remainder = remainder[: token.start()]
    remainder = re.sub(r"[._]+", " ", remainder)
    return clean_title(remainder.strip(" -–"))


def match_episode(filename: str, folder_season: Optional[int] = None) -> Optional[EpisodeMatch]:
    """
    Applique les motifs d'episode sur un nom de fichier.

    Args:
        filename: Nom du fichier (avec ou sans extension)
        folder_season: Saison deduite du dossier parent, pour les motifs sans saison

    Returns:
        EpisodeMatch, ou None si aucun motif ne correspond
    """
    stem = Path(filename).stem
    for pattern, has_season in EPISODE_PATTERNS:
        match = pattern.search(stem)
        if match is None:
            continue
        season = int(match.group("season")) if has_season else (folder_season or 1)
        return EpisodeMatch(
            season=season,
            episode=int(match.group("episode")),
            episode_title=_episode_title(stem[match.end():]),
        )
    return None


class PathClassifier:
    """
    Classe les fichiers et repertoires en unites video.

    Attributes:
        video_extensions: Extensions reconnues (".mkv", ...), en minuscules
    """

    def __init__(self, video_extensions: Iterable[str]) -> None:
        self._video_extensions = frozenset(ext.lower() for ext in video_extensions)

    def is_video(self, path: Path) -> bool:
        """Extension autorisee et nom sans mot exclu (sample, trailer)."""
        if path.suffix.lower() not in self._video_extensions:
            return False
        return IGNORED_FILE_PATTERN.search(path.stem) is None

    def classify(
        self, path: Path, is_dir: bool, children: Iterable[Path] = ()
    ) -> Classification:
        """
        Classe une entree.

        Args:
            path: Chemin de l'entree
            is_dir: True pour un repertoire
            children: Fichiers directs du repertoire (ignore pour un fichier)

        Returns:
            - fichier : SingleVideo si video, sinon NotVideo
            - repertoire : SeriesFolder si au moins deux videos portent un motif
              d'episode (ou dossier de saison avec plusieurs videos),
              SingleVideo s'il contient exactement une video, NotVideo sinon
        """
        if not is_dir:
            return SingleVideo(path) if self.is_video(path) else NotVideo(path)

        videos = sorted((c for c in children if self.is_video(c)), key=lambda p: p.name)
        if not videos:
            return NotVideo(path)

        folder_season = season_from_folder(path.name)
        matches = {video: match_episode(video.name, folder_season) for video in videos}
        matched_count = sum(1 for m in matches.values() if m is not None)

        if matched_count >= 2 or (folder_season is not None and len(videos) >= 2):
            return SeriesFolder(path=path, episodes=self._number_episodes(videos, matches, folder_season))
        if len(videos) == 1:
            return SingleVideo(path=videos[0], folder=path)
        return NotVideo(path)

    def _number_episodes(
        self,
        videos: list[Path],
        matches: dict[Path, Optional[EpisodeMatch]],
        folder_season: Optional[int],
    ) -> tuple[EpisodeRef, ...]:
        """
        Construit la liste ordonnee des episodes.

        Les fichiers sans motif recoivent, dans l'ordre lexicographique, les
        numeros libres suivant le plus grand episode de la saison par defaut
        (saison du dossier, sinon la plus frequente, sinon 1).
        """
        matched = [m for m in matches.values() if m is not None]
        if folder_season is not None:
            default_season = folder_season
        elif matched:
            counts = Counter(m.season for m in matched)
            default_season = min(counts, key=lambda s: (-counts[s], s))
        else:
            default_season = 1

        used = {(m.season, m.episode) for m in matched}
        next_episode = max((e for s, e in used if s == default_season), default=0) + 1

        refs: list[EpisodeRef] = []
        for video in videos:
            match = matches[video]
            if match is not None:
                refs.append(EpisodeRef(video, match.season, match.episode, match.episode_title))
                continue
            while (default_season, next_episode) in used:
                next_episode += 1
            used.add((default_season, next_episode))
            refs.append(EpisodeRef(video, default_season, next_episode, clean_video_name(video.stem)))
            next_episode += 1

        refs.sort(key=lambda r: (r.season, r.episode, r.path.name))
        return tuple(refs)
