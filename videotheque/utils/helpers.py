"""
Fonctions utilitaires partagees dans le projet Videotheque.

- clean_title : retrait des caracteres invisibles et espaces superflus
- clean_video_name : nettoyage regex d'un nom de fichier (repli sans guessit)
- format_duration : secondes -> "HH:MM:SS"
- title_sort_key : cle de tri insensible aux accents
- utc_now / as_utc : horodatages en UTC avec fuseau explicite
- printable_path : chemin affichable meme si le nom n'est pas de l'UTF-8
"""

import os
import re
import unicodedata
from datetime import datetime, timezone
from typing import Optional

_YEAR_PATTERN = re.compile(r"(?<!\d)(19|20)\d{2}(?!\d)")
_SEPARATORS_PATTERN = re.compile(r"[._\-]+")
_BRACKETS_PATTERN = re.compile(r"[\[(【].*?[\])】]")
_SPACES_PATTERN = re.compile(r"\s+")


def strip_invisible_chars(text: str) -> str:
    """
    Retire les caractères Unicode invisibles d'une chaîne.

    Supprime les caractères de contrôle et les marques directionnelles
    (LRM, RLM, BOM, etc.).
    """
    return "".join(
        char for char in text if unicodedata.category(char) not in ("Cf", "Cc")
    )


def clean_title(title: str) -> str:
    """Nettoie un titre : retire les caractères invisibles et les espaces superflus."""
    if not title:
        return title
    return _SPACES_PATTERN.sub(" ", strip_invisible_chars(title)).strip()


def clean_video_name(stem: str) -> str:
    """
    Nettoie un nom de fichier sans extension.

    Coupe avant la premiere annee (19xx/20xx) si un titre la precede, retire
    les tags entre crochets et remplace les separateurs . _ - par des espaces.

    Ex: "Le.Fabuleux.Destin.2001.1080p" -> "Le Fabuleux Destin"
    """
    name = _BRACKETS_PATTERN.sub(" ", stem)
    match = _YEAR_PATTERN.search(name)
    if match and match.start() > 0:
        name = name[: match.start()]
    name = _SEPARATORS_PATTERN.sub(" ", name)
    return clean_title(name)


def format_duration(seconds: Optional[int]) -> str:
    """Formate une durée en "HH:MM:SS" ; chaîne vide si inconnue."""
    if seconds is None or seconds < 0:
        return ""
    hours, remainder = divmod(int(seconds), 3600)
    minutes, secs = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def normalize_accents(text: str) -> str:
    """
    Supprime les accents d'une chaine pour une comparaison insensible aux accents.

    Utilise la decomposition NFD puis filtre les caracteres diacritiques (Mn).
    """
    normalized = unicodedata.normalize("NFD", text)
    return "".join(char for char in normalized if unicodedata.category(char) != "Mn")


def title_sort_key(title: str) -> str:
    """Clé de tri : titre nettoyé, sans accents, en minuscules."""
    return normalize_accents(clean_title(title)).lower()


def utc_now() -> datetime:
    """Instant courant en UTC, avec fuseau."""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Ramene une date en UTC avec fuseau.

    Une date sans fuseau (relue depuis SQLite par exemple) est consideree
    comme deja exprimee en UTC.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def printable_path(path) -> str:
    """Chemin affichable : les octets non decodables deviennent des echappements."""
    return os.fsencode(str(path)).decode("utf-8", "backslashreplace")
