"""
Configuration de l'application via pydantic-settings.

La configuration est chargée depuis les variables d'environnement avec le préfixe VIDEOTHEQUE_,
et peut optionnellement être fournie via un fichier .env.

Cette configuration technique (chemins, pool de workers, timeouts) est distincte
des préférences utilisateur (lecteur, sous-titres, TMDB) stockées dans settings.json,
voir user_settings.py.
"""

from pathlib import Path
from typing import Annotated, Optional

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# Trouver le fichier .env à la racine du projet (parent de videotheque/)
_PROJECT_ROOT = Path(__file__).parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"

_DEFAULT_DATA_DIR = Path("~/.local/share/videotheque")

DEFAULT_VIDEO_EXTENSIONS = (
    ".mkv",
    ".mp4",
    ".avi",
    ".mov",
    ".wmv",
    ".flv",
    ".webm",
    ".m4v",
    ".mpg",
    ".mpeg",
    ".ts",
    ".m2ts",
    ".vob",
    ".rmvb",
)


class Settings(BaseSettings):
    """Paramètres de l'application avec support des variables d'environnement.

    Tous les paramètres peuvent être surchargés via des variables d'environnement
    avec le préfixe VIDEOTHEQUE_.
    Exemple : VIDEOTHEQUE_SCAN_WORKERS=8

    Les chemins sont automatiquement étendus (~ -> répertoire home). Les chemins
    dérivés (base, settings.json, miniatures, cache API) sont placés sous data_dir
    s'ils ne sont pas fournis explicitement.
    """

    model_config = SettingsConfigDict(
        env_prefix="VIDEOTHEQUE_",
        env_file=_ENV_FILE if _ENV_FILE.exists() else ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Chemins (avec expansion ~)
    data_dir: Path = Field(default=_DEFAULT_DATA_DIR)
    settings_file: Optional[Path] = Field(default=None)
    thumbnail_dir: Optional[Path] = Field(default=None)
    api_cache_dir: Optional[Path] = Field(default=None)

    # Base de données
    database_url: Optional[str] = Field(default=None)

    # TMDB (clé de secours si settings.json n'en contient pas)
    tmdb_api_key: Optional[str] = Field(default=None)
    tmdb_language: str = Field(default="fr-FR")

    # Scan
    scan_workers: int = Field(default=4, ge=1)
    lookup_timeout: float = Field(default=10.0, gt=0)
    thumbnail_timeout: float = Field(default=10.0, gt=0)
    placeholder_thumbnail: str = Field(default="/assets/no-poster.png")
    # NoDecode : la variable d'environnement est une liste séparée par des virgules
    video_extensions: Annotated[tuple[str, ...], NoDecode] = Field(default=DEFAULT_VIDEO_EXTENSIONS)

    # Logging (fichier + stderr, rotation 10MB, 5 fichiers de rétention)
    log_level: str = Field(default="INFO")
    log_file: Path = Field(default=Path("logs/videotheque.log"))
    log_rotation_size: str = Field(default="10 MB")
    log_retention_count: int = Field(default=5)

    @field_validator(
        "data_dir", "settings_file", "thumbnail_dir", "api_cache_dir", "log_file",
        mode="before",
    )
    @classmethod
    def expand_path(cls, v: Optional[str | Path]) -> Optional[Path]:
        """Étend ~ vers le répertoire home dans les chemins."""
        if v is None:
            return None
        return Path(v).expanduser()

    @field_validator("video_extensions", mode="before")
    @classmethod
    def normalize_extensions(cls, v: str | list[str] | tuple[str, ...]) -> tuple[str, ...]:
        """Accepte "mkv,mp4" ou une liste, normalise en ".mkv" minuscule."""
        if isinstance(v, str):
            v = [part for part in v.split(",") if part.strip()]
        normalized = []
        for ext in v:
            ext = ext.strip().lower()
            normalized.append(ext if ext.startswith(".") else f".{ext}")
        return tuple(normalized)

    @model_validator(mode="after")
    def derive_paths(self) -> "Settings":
        """Complète les chemins non fournis à partir de data_dir."""
        self.data_dir = self.data_dir.expanduser()
        if self.settings_file is None:
            self.settings_file = self.data_dir / "settings.json"
        if self.thumbnail_dir is None:
            self.thumbnail_dir = self.data_dir / "thumbnails"
        if self.api_cache_dir is None:
            self.api_cache_dir = self.data_dir / "cache" / "api"
        if self.database_url is None:
            self.database_url = f"sqlite:///{self.data_dir / 'videotheque.db'}"
        return self

    @property
    def video_extension_set(self) -> frozenset[str]:
        """Extensions vidéo reconnues, sous forme d'ensemble."""
        return frozenset(self.video_extensions)
