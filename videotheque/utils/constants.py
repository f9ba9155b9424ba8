"""
Constantes globales pour Videotheque.

Ce module contient les constantes utilisees par le scan et la lecture :
- Mots excluant un fichier (sample, trailer)
- Sous-dossiers annexes d'un dossier film/serie
- Conventions de nommage des posters et extensions d'images
- Extensions et mots-cles de langue des sous-titres
- Mapping des IDs de genre TMDB vers noms francais
"""

import re

# Fichiers jamais consideres comme des videos (mots isoles)
IGNORED_FILE_PATTERN = re.compile(r"(?i)(?<![a-z0-9])(sample|trailer)(?![a-z0-9])")

# Sous-dossiers annexes d'un dossier deja consomme (jamais parcourus)
ANCILLARY_DIR_NAMES = frozenset({
    "extras",
    "featurettes",
    "featurette",
    "bonus",
    "behind the scenes",
    "deleted scenes",
    "interviews",
    "sample",
    "samples",
    "trailers",
    "subs",
    "subtitles",
    "字幕",
})

# Posters voisins : {stem} est remplace par le nom du fichier video
SIBLING_POSTER_NAMES = (
    "{stem}-poster",
    "{stem}-thumb",
    "{stem}",
    "poster",
    "folder",
    "cover",
    "movie",
    "show",
    "thumb",
    "fanart",
)
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".webp")

# Sous-titres
SUBTITLE_EXTENSIONS = frozenset({".srt", ".ass", ".ssa", ".vtt"})
SUBTITLE_DIR_NAMES = ("Subs", "Subtitles", "字幕")

# Mots-cles de langue reconnus dans les noms de sous-titres
SUBTITLE_LANGUAGE_KEYWORDS: dict[str, tuple[str, ...]] = {
    "fr": ("fr", "fre", "fra", "french", "vf", "vostfr"),
    "en": ("en", "eng", "english"),
    "zh": ("zh", "chs", "cht", "cn", "chinese", "chr", "简体", "简中", "繁中"),
}

# Mapping des IDs de genre TMDB (films) vers noms francais
TMDB_GENRE_MAPPING = {
    28: "Action",
    12: "Aventure",
    16: "Animation",
    35: "Comedie",
    80: "Crime",
    99: "Documentaire",
    18: "Drame",
    10751: "Famille",
    14: "Fantastique",
    36: "Histoire",
    27: "Horreur",
    10402: "Musique",
    9648: "Mystere",
    10749: "Romance",
    878: "Science-Fiction",
    10770: "Telefilm",
    53: "Thriller",
    10752: "Guerre",
    37: "Western",
}

# Genres specifiques aux series TMDB
TMDB_TV_GENRE_MAPPING = {
    **TMDB_GENRE_MAPPING,
    10759: "Action & Aventure",
    10762: "Enfants",
    10763: "Actualites",
    10764: "Telerealite",
    10765: "Science-Fiction & Fantastique",
    10766: "Feuilleton",
    10767: "Talk-show",
    10768: "Guerre & Politique",
}
