"""Catalog data access."""

from starguide.repositories.catalog_repository import CharacterCatalog, CharacterNotFoundError

__all__ = ["CharacterCatalog", "CharacterNotFoundError"]
