"""
Préférences utilisateur : lecteur, sous-titres, intégration TMDB.

Enregistrement unique stocké en JSON (settings.json). Il est créé avec les
valeurs par défaut au premier lancement, lu et écrit en entier : pas de mise
à jour partielle, l'appelant fournit toujours l'enregistrement complet.
"""

import json
import os
from pathlib import Path
from typing import Literal, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, ValidationError

PlayerType = Literal["system", "vlc", "mpv", "iina", "custom"]


class UserSettings(BaseModel):
    """Préférences persistées dans settings.json."""

    model_config = ConfigDict(extra="ignore")

    player_path: str = ""
    player_type: PlayerType = "system"
    auto_subtitle: bool = True
    subtitle_language: str = "fr"
    auto_tmdb: bool = False
    auto_tmdb_poster: bool = False
    tmdb_api_key: str = ""

    def resolve_tmdb_key(self, fallback: Optional[str] = None) -> str:
        """Clé de l'enregistrement, sinon celle de l'environnement."""
        return self.tmdb_api_key.strip() or (fallback or "").strip()

    def tmdb_enabled(self, fallback_key: Optional[str] = None) -> bool:
        """TMDB n'est interrogé que si activé et qu'une clé est disponible."""
        return self.auto_tmdb and bool(self.resolve_tmdb_key(fallback_key))

    def poster_download_enabled(self, fallback_key: Optional[str] = None) -> bool:
        return self.auto_tmdb_poster and self.tmdb_enabled(fallback_key)


class UserSettingsStore:
    """Lecture et écriture de settings.json."""

    def __init__(self, settings_file: Path) -> None:
        self._settings_file = Path(settings_file)

    @property
    def path(self) -> Path:
        return self._settings_file

    def load(self) -> UserSettings:
        """Charge les préférences. Crée le fichier par défaut si absent ou invalide."""
        if self._settings_file.exists():
            try:
                data = json.loads(self._settings_file.read_text(encoding="utf-8"))
                return UserSettings.model_validate(data)
            except (OSError, json.JSONDecodeError, ValidationError) as exc:
                logger.warning(
                    "Préférences illisibles, valeurs par défaut restaurées",
                    path=str(self._settings_file),
                    error=str(exc),
                )

        settings = UserSettings()
        self.save(settings)
        return settings

    def save(self, settings: UserSettings) -> None:
        """Écrit l'enregistrement complet (fichier temporaire puis remplacement)."""
        self._settings_file.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self._settings_file.with_suffix(self._settings_file.suffix + ".tmp")
        tmp_path.write_text(
            json.dumps(settings.model_dump(), indent=2, ensure_ascii=False) + "\n",
            encoding="utf-8",
        )
        os.replace(tmp_path, self._settings_file)
