"""
Tests unitaires pour APICache.

Ces tests verifient:
- Stockage et recuperation de valeurs
- TTL differencies pour recherche (24h) et details (7j)
- Construction des cles normalisees
- Ressource open_api_cache
"""

from pathlib import Path

import pytest

from videotheque.adapters.api.cache import APICache, open_api_cache


class TestAPICache:
    """Tests pour la classe APICache."""

    @pytest.fixture
    def cache(self, tmp_path: Path) -> APICache:
        cache = APICache(cache_dir=tmp_path / "api_cache")
        yield cache
        cache.close()

    @pytest.mark.asyncio
    async def test_get_returns_none_for_missing_key(self, cache: APICache) -> None:
        assert await cache.get("absent") is None

    @pytest.mark.asyncio
    async def test_set_and_get(self, cache: APICache) -> None:
        value = {"title": "Inception", "year": 2010}

        await cache.set("tmdb:movie", value, ttl=3600)

        assert await cache.get("tmdb:movie") == value

    def test_ttl_constants(self) -> None:
        """Recherches : 24 heures, details : 7 jours."""
        assert APICache.SEARCH_TTL == 86400
        assert APICache.DETAILS_TTL == 604800

    @pytest.mark.asyncio
    async def test_set_search_and_details(self, cache: APICache) -> None:
        await cache.set_search("search:inception", [{"id": 27205}])
        await cache.set_details("episode:1396:1:1", {"name": "Chute libre"})

        assert await cache.get("search:inception") == [{"id": 27205}]
        assert await cache.get("episode:1396:1:1") == {"name": "Chute libre"}

    @pytest.mark.asyncio
    async def test_clear(self, cache: APICache) -> None:
        await cache.set_search("k", "v")

        await cache.clear()

        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_persists_across_instances(self, tmp_path: Path) -> None:
        """Un rescan retrouve les reponses deja obtenues."""
        first = APICache(tmp_path / "api_cache")
        await first.set_search("k", "v")
        first.close()

        second = APICache(tmp_path / "api_cache")
        try:
            assert await second.get("k") == "v"
        finally:
            second.close()


class TestBuildKey:
    def test_parts_are_normalized(self) -> None:
        assert APICache.build_key("tmdb", "Search", "fr-FR", " Inception ") == "tmdb:search:fr-fr:inception"

    def test_empty_parts_are_skipped(self) -> None:
        assert APICache.build_key("tmdb", None, "", 2010) == "tmdb:2010"


class TestOpenApiCache:
    @pytest.mark.asyncio
    async def test_resource_yields_usable_cache(self, tmp_path: Path) -> None:
        resource = open_api_cache(tmp_path / "api_cache")
        cache = next(resource)
        try:
            await cache.set_search("k", "v")
            assert await cache.get("k") == "v"
        finally:
            resource.close()
