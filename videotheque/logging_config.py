"""
Configuration du logging de l'application via loguru.

Fournit un logging structuré avec :
- Sortie console : lisible par l'humain, colorée, niveau ajustable par -v / -q
- Sortie fichier : sérialisée en JSON, avec rotation, pour l'analyse historique

Les workers du scan loggent depuis des threads : le handler fichier utilise
enqueue=True pour sérialiser les écritures.
"""

import sys
from pathlib import Path

from loguru import logger

# Niveaux console selon le compteur de verbosité (-v, -vv)
_VERBOSITY_LEVELS = {0: None, 1: "INFO", 2: "DEBUG"}

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan> | "
    "<level>{message}</level>"
)


def resolve_console_level(log_level: str, verbose: int = 0, quiet: bool = False) -> str:
    """Calcule le niveau console effectif.

    quiet l'emporte sur verbose ; au-delà de -vv on reste en DEBUG.
    """
    if quiet:
        return "ERROR"
    level = _VERBOSITY_LEVELS.get(min(verbose, 2))
    return level or log_level.upper()


def configure_logging(
    log_level: str = "INFO",
    log_file: Path = Path("logs/videotheque.log"),
    rotation_size: str = "10 MB",
    retention_count: int = 5,
    verbose: int = 0,
    quiet: bool = False,
) -> None:
    """Configure le logging de l'application.

    Args :
        log_level : Niveau de log minimum pour la sortie console (DEBUG, INFO, WARNING, ERROR)
        log_file : Chemin vers le fichier de log
        rotation_size : Taille maximale du fichier avant rotation (ex: "10 MB", "1 GB")
        retention_count : Nombre de fichiers rotatifs à conserver
        verbose : Compteur -v de la CLI (surcharge log_level)
        quiet : Mode silencieux, erreurs uniquement sur la console
    """
    logger.remove()

    logger.add(
        sys.stderr,
        level=resolve_console_level(log_level, verbose, quiet),
        format=CONSOLE_FORMAT,
        colorize=True,
    )

    # Handler fichier - JSON, tous niveaux (détails HTTP en DEBUG)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        level="DEBUG",
        format="{message}",
        serialize=True,
        rotation=rotation_size,
        retention=retention_count,
        compression="zip",
        enqueue=True,
    )

    logger.debug("Logging configuré", log_file=str(log_file), rotation=rotation_size)
