"""Implementations SQLModel des repositories."""

from videotheque.infrastructure.persistence.repositories.catalog_repository import (
    SQLModelCatalogRepository,
)

__all__ = ["SQLModelCatalogRepository"]
