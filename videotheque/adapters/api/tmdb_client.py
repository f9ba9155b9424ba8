"""
Client TMDB implementant IMetadataProvider.

Films : /search/movie puis choix du meilleur resultat.
Episodes : /search/tv puis /tv/{id}/season/{s}/episode/{e}.

Toute erreur reseau, HTTP ou de format est convertie en ExternalLookupError ;
l'extracteur degrade alors vers le titre issu du nom de fichier.

Usage:
    client = TMDBClient(api_key="xxx", cache=APICache(cache_dir))
    result = await client.lookup(MetadataQuery(title="Inception", year=2010))
    await client.close()
"""

import sqlite3
from typing import Any, Optional

import httpx
from diskcache import Timeout as CacheTimeout
from loguru import logger

from videotheque.adapters.api.cache import APICache
from videotheque.adapters.api.retry import RateLimitError, request_with_retry
from videotheque.core.errors import ExternalLookupError
from videotheque.core.ports.metadata import IMetadataProvider, MetadataQuery, MetadataResult
from videotheque.utils.constants import TMDB_GENRE_MAPPING, TMDB_TV_GENRE_MAPPING
from videotheque.utils.helpers import normalize_accents


class TMDBClient(IMetadataProvider):
    """
    Client API TMDB.

    - Cache persistant (24h recherches, 7j episodes)
    - Retry sur rate limiting (429), borne a quelques tentatives pendant un scan
    - Authentification v3 (api_key) ou v4 (Bearer) selon la longueur de la cle

    Attributes:
        TMDB_BASE_URL: URL de base de l'API TMDB v3
        TMDB_IMAGE_BASE_URL: URL de base pour les posters
    """

    TMDB_BASE_URL = "https://api.themoviedb.org/3"
    TMDB_IMAGE_BASE_URL = "https://image.tmdb.org/t/p/w500"

    def __init__(
        self,
        api_key: str,
        cache: APICache,
        language: str = "fr-FR",
        timeout: float = 10.0,
        max_attempts: int = 3,
    ) -> None:
        """
        Args:
            api_key: Cle API v3 ou Read Access Token v4
            cache: Cache des reponses
            language: Langue des resultats (ex: "fr-FR")
            timeout: Timeout HTTP en secondes
            max_attempts: Tentatives maximum sur 429
        """
        self._api_key = api_key
        self._cache = cache
        self._language = language
        self._timeout = timeout
        self._max_attempts = max_attempts
        self._client: Optional[httpx.AsyncClient] = None

    def _get_client(self) -> httpx.AsyncClient:
        """Retourne le client HTTP, le cree si necessaire (lazy init)."""
        if self._client is None or self._client.is_closed:
            is_v4_token = len(self._api_key) > 40

            headers = {"Accept": "application/json"}
            params = {}
            if is_v4_token:
                headers["Authorization"] = f"Bearer {self._api_key}"
            else:
                params["api_key"] = self._api_key

            self._client = httpx.AsyncClient(
                base_url=self.TMDB_BASE_URL,
                headers=headers,
                params=params,
                timeout=self._timeout,
            )
        return self._client

    @property
    def source(self) -> str:
        return "tmdb"

    async def lookup(self, query: MetadataQuery) -> Optional[MetadataResult]:
        """
        Recherche un film ou un episode.

        Raises:
            ExternalLookupError: TMDB injoignable, rate limit persistant,
                                 reponse malformee ou cache illisible
        """
        try:
            if query.is_episode:
                return await self._lookup_episode(query)
            return await self._lookup_movie(query)
        except RateLimitError as exc:
            raise ExternalLookupError(f"TMDB rate limit : {exc}") from exc
        except httpx.HTTPError as exc:
            raise ExternalLookupError(f"TMDB injoignable : {exc}") from exc
        except (KeyError, TypeError, ValueError) as exc:
            raise ExternalLookupError(f"Reponse TMDB invalide : {exc!r}") from exc
        except (sqlite3.Error, CacheTimeout, OSError) as exc:
            raise ExternalLookupError(f"Cache API indisponible : {exc!r}") from exc

    async def _lookup_movie(self, query: MetadataQuery) -> Optional[MetadataResult]:
        results = await self.search_movie(query.title)
        best = self._pick_best(results, query.title, query.year, "title", "release_date")
        if best is None:
            return None
        return self._to_result(best, "title", "original_title", "release_date", TMDB_GENRE_MAPPING)

    async def _lookup_episode(self, query: MetadataQuery) -> Optional[MetadataResult]:
        results = await self.search_tv(query.title)
        best = self._pick_best(results, query.title, query.year, "name", "first_air_date")
        if best is None:
            return None
        show = self._to_result(best, "name", "original_name", "first_air_date", TMDB_TV_GENRE_MAPPING)

        episode = await self.get_episode(str(best["id"]), query.season, query.episode)
        if episode is None:
            return show
        return MetadataResult(
            title=show.title,
            original_title=show.original_title,
            overview=show.overview,
            poster_url=show.poster_url,
            genres=show.genres,
            year=show.year,
            episode_title=episode.get("name") or "",
            episode_overview=episode.get("overview") or "",
        )

    async def search_movie(self, title: str) -> list[dict[str, Any]]:
        """
        Recherche des films par titre (cache-first, 24h).

        L'annee n'est pas envoyee a l'API : elle sert seulement au choix du
        resultat, l'annee d'un nom de fichier etant souvent decalee.
        """
        return await self._search("/search/movie", title)

    async def search_tv(self, title: str) -> list[dict[str, Any]]:
        """Recherche des series par titre (cache-first, 24h)."""
        return await self._search("/search/tv", title)

    async def _search(self, endpoint: str, title: str) -> list[dict[str, Any]]:
        cache_key = APICache.build_key("tmdb", endpoint, self._language, title)
        cached = await self._cache.get(cache_key)
        if cached is not None:
            return cached

        logger.debug("Recherche TMDB", endpoint=endpoint, query=title)
        response = await request_with_retry(
            self._get_client(),
            "GET",
            endpoint,
            max_attempts=self._max_attempts,
            params={"query": title, "language": self._language, "include_adult": "false"},
        )
        results = response.json()["results"]
        if not isinstance(results, list):
            raise TypeError("results n'est pas une liste")

        await self._cache.set_search(cache_key, results)
        return results

    async def get_episode(
        self, tv_id: str, season: int, episode: int
    ) -> Optional[dict[str, Any]]:
        """
        Details d'un episode (cache-first, 7 jours).

        Returns:
            Donnees brutes de l'episode, ou None si TMDB ne le connait pas (404)
        """
        cache_key = APICache.build_key("tmdb", "episode", self._language, tv_id, season, episode)
        cached = await self._cache.get(cache_key)
        if cached is not None:
            return cached

        try:
            response = await request_with_retry(
                self._get_client(),
                "GET",
                f"/tv/{tv_id}/season/{season}/episode/{episode}",
                max_attempts=self._max_attempts,
                params={"language": self._language},
            )
        except httpx.HTTPStatusError as e:
            if e.response.status_code == 404:
                return None
            raise

        data = response.json()
        await self._cache.set_details(cache_key, data)
        return data

    def _pick_best(
        self,
        results: list[dict[str, Any]],
        title: str,
        year: Optional[int],
        title_field: str,
        date_field: str,
    ) -> Optional[dict[str, Any]]:
        """
        Choisit le resultat le plus pertinent.

        Premier resultat dont le titre contient le titre cherche (insensible
        a la casse et aux accents), en preferant l'annee exacte si connue ;
        a defaut le premier resultat.
        """
        if not results:
            return None

        needle = normalize_accents(title).lower()
        containing = [
            item for item in results
            if needle and needle in normalize_accents(item.get(title_field) or "").lower()
        ]
        if year is not None:
            for item in containing:
                if self._year_of(item.get(date_field)) == year:
                    return item
        if containing:
            return containing[0]
        return results[0]

    def _to_result(
        self,
        item: dict[str, Any],
        title_field: str,
        original_field: str,
        date_field: str,
        genre_mapping: dict[int, str],
    ) -> MetadataResult:
        title = item.get(title_field) or item.get(original_field) or ""
        poster_path = item.get("poster_path")
        genres = tuple(
            genre_mapping[gid] for gid in item.get("genre_ids") or [] if gid in genre_mapping
        )
        return MetadataResult(
            title=title,
            original_title=item.get(original_field) or "",
            overview=item.get("overview") or "",
            poster_url=f"{self.TMDB_IMAGE_BASE_URL}{poster_path}" if poster_path else None,
            genres=genres,
            year=self._year_of(item.get(date_field)),
        )

    @staticmethod
    def _year_of(date: Optional[str]) -> Optional[int]:
        if date and len(date) >= 4 and date[:4].isdigit():
            return int(date[:4])
        return None

    async def close(self) -> None:
        """Ferme le client HTTP."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
