"""
Identifiant stable d'une video, derive de son chemin canonique.

L'identifiant ne depend pas du contenu : le meme chemin donne toujours le
meme id, un renommage donne un nouvel id. Le chemin est rendu absolu et
resolu (liens symboliques suivis) avant hachage.
"""

import os
from pathlib import Path

import xxhash


def canonical_path(path: Path) -> Path:
    """Chemin absolu resolu ; ne leve pas si le fichier n'existe plus."""
    return path.expanduser().resolve(strict=False)


def compute_video_id(path: Path) -> str:
    """
    Calcule l'id d'une video : XXH3-128 des octets du chemin canonique.

    Les octets sont ceux du systeme de fichiers (os.fsencode), un nom non
    decodable en UTF-8 a donc aussi un id.

    Retourne :
        Hash hexadecimal de 32 caracteres
    """
    return xxhash.xxh3_128_hexdigest(os.fsencode(canonical_path(path)))


def is_storable_path(path: Path) -> bool:
    """Le chemin canonique peut-il etre enregistre (texte UTF-8) ?"""
    try:
        str(canonical_path(path)).encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True
