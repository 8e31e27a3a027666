"""
Catalog queries.
"""

from .catalog_service import (
    CatalogEntry,
    CatalogResult,
    CatalogService,
    CatalogUnavailable,
    FeaturedBag,
)

__all__ = [
    "CatalogService",
    "CatalogResult",
    "CatalogEntry",
    "FeaturedBag",
    "CatalogUnavailable",
]
