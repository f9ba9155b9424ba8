"""
Cache persistant des reponses TMDB avec TTL differencies.

Le cache utilise diskcache pour la persistence sur disque : un rescan
ne refait pas les memes requetes.

TTL par defaut:
- Recherches (SEARCH_TTL): 24 heures
- Details d'episode (DETAILS_TTL): 7 jours
"""

import asyncio
from functools import partial
from pathlib import Path
from typing import Any, Iterator, Optional

from diskcache import Cache


class APICache:
    """
    Cache asynchrone avec TTL pour les appels API.

    Les operations diskcache (SQLite) sont deportees dans l'executor par
    defaut pour ne pas bloquer la boucle du scan.

    Example:
        cache = APICache(cache_dir=settings.api_cache_dir)
        key = APICache.build_key("tmdb", "search", "movie", "inception")
        await cache.set_search(key, results)
        data = await cache.get(key)
    """

    SEARCH_TTL = 24 * 60 * 60  # 86400
    DETAILS_TTL = 7 * 24 * 60 * 60  # 604800

    def __init__(self, cache_dir: str | Path = ".cache/api") -> None:
        """
        Args:
            cache_dir: Repertoire du cache (cree si inexistant)
        """
        self._cache = Cache(str(cache_dir))

    @staticmethod
    def build_key(*parts: Any) -> str:
        """Cle normalisee : parties non vides, en minuscules, separees par ':'."""
        return ":".join(str(p).strip().lower() for p in parts if p is not None and p != "")

    async def get(self, key: str) -> Optional[Any]:
        """Recupere une valeur du cache, None si absente ou expiree."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._cache.get, key)

    async def set(self, key: str, value: Any, ttl: int) -> None:
        """Stocke une valeur avec une duree de vie en secondes."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(
            None, partial(self._cache.set, key, value, expire=ttl)
        )

    async def set_search(self, key: str, value: Any) -> None:
        await self.set(key, value, self.SEARCH_TTL)

    async def set_details(self, key: str, value: Any) -> None:
        await self.set(key, value, self.DETAILS_TTL)

    async def clear(self) -> None:
        """Supprime toutes les entrees du cache."""
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, self._cache.clear)

    def close(self) -> None:
        """Ferme la connexion au cache (a appeler a la fin)."""
        self._cache.close()


def open_api_cache(cache_dir: str | Path) -> Iterator[APICache]:
    """Ressource dependency-injector : cache ferme a l'arret du container."""
    cache = APICache(cache_dir)
    try:
        yield cache
    finally:
        cache.close()
