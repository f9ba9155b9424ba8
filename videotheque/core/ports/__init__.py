"""
Ports (interfaces abstraites) définissant les contrats pour les adaptateurs.

Les ports sont les frontières de l'architecture hexagonale. Ils définissent
ce dont le domaine a besoin du monde extérieur sans spécifier
comment ces besoins sont satisfaits.

- ICatalogRepository : stockage du catalogue
- IMetadataProvider, IPosterDownloader : services de métadonnées externes
- IFilenameParser, IMediaProbe : parsing de noms et sonde media
- IFileSystem, IProcessLauncher : système de fichiers et processus de l'OS
"""

from videotheque.core.ports.file_system import (
    DirectoryListing,
    IFileSystem,
    IProcessLauncher,
)
from videotheque.core.ports.metadata import (
    IMetadataProvider,
    IPosterDownloader,
    MetadataQuery,
    MetadataResult,
)
from videotheque.core.ports.parser import IFilenameParser, IMediaProbe
from videotheque.core.ports.repositories import ICatalogRepository

__all__ = [
    # Repositories
    "ICatalogRepository",
    # Métadonnées externes
    "IMetadataProvider",
    "IPosterDownloader",
    "MetadataQuery",
    "MetadataResult",
    # Parsing
    "IFilenameParser",
    "IMediaProbe",
    # Système
    "DirectoryListing",
    "IFileSystem",
    "IProcessLauncher",
]
