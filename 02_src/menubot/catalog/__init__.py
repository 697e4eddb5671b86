"""Catalog module."""

from .gateway import SEARCH_LIMIT, CatalogGateway, ICatalogGateway

__all__ = ["SEARCH_LIMIT", "CatalogGateway", "ICatalogGateway"]
