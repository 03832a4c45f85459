"""Catalog core.

Query building, cursor pagination, record normalization and product
creation over the Shopify Admin API, composed by ``CatalogService``.
"""

from shopcatalog.catalog.creation import CreationOrchestrator, Immediate, Operation
from shopcatalog.catalog.normalizer import normalize_product
from shopcatalog.catalog.pager import Connection, Pager
from shopcatalog.catalog.query_builder import SortSpec, build_query, map_sort
from shopcatalog.catalog.service import CatalogService

__all__ = [
    # Query builder
    "SortSpec",
    "build_query",
    "map_sort",
    # Pager
    "Connection",
    "Pager",
    # Normalizer
    "normalize_product",
    # Creation
    "CreationOrchestrator",
    "Immediate",
    "Operation",
    # Service
    "CatalogService",
]
