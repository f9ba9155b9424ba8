"""
Hiérarchie d'erreurs de Videotheque.

- ScanRootError : racine de scan absente ou illisible (hérite d'OSError)
- StorageError : catalogue indisponible ou corrompu
- ExtractionError : échec non fatal sur un élément, compté comme ignoré
- LaunchError : le lecteur n'a pas pu être lancé
- ExternalLookupError : fournisseur de métadonnées/posters injoignable ou réponse invalide
- ScanInProgressError : un scan est déjà en cours
"""


class VideothequeError(Exception):
    """Erreur de base de l'application."""


class ScanRootError(VideothequeError, OSError):
    """La racine d'un scan est introuvable ou illisible."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Racine de scan inaccessible : {path} ({reason})")


class StorageError(VideothequeError):
    """Le stockage du catalogue est indisponible ou corrompu."""


class ExtractionError(VideothequeError):
    """Échec d'extraction pour un élément (fichier disparu, illisible...)."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Extraction impossible pour {path} : {reason}")


class LaunchError(VideothequeError):
    """Le lancement du lecteur a échoué."""


class ExternalLookupError(VideothequeError):
    """Le fournisseur externe (TMDB, poster) a échoué ou répondu de façon invalide."""


class ScanInProgressError(VideothequeError):
    """Un scan est déjà en cours, la nouvelle demande est rejetée."""

    def __init__(self) -> None:
        super().__init__("Un scan est déjà en cours")
