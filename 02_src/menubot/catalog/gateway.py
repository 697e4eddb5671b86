"""Tenant-scoped catalog operations."""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Protocol

import aiosqlite

from ..errors import CatalogError
from ..logging_config import get_logger
from ..models import CatalogItem
from ..storage import ICatalogStore

logger = get_logger(__name__)

SEARCH_LIMIT = 8


class ICatalogGateway(Protocol):
    """Catalog mutations and queries bound to one tenant."""

    @property
    def tenant_id(self) -> str:
        ...

    async def add_item(self, name: str, price: Decimal, available: bool) -> CatalogItem:
        """Insert a new item for the tenant."""
        ...

    async def update_price_by_name_contains(
        self, name_fragment: str, price: Decimal
    ) -> list[CatalogItem]:
        """Set the price of every matching item; return affected items."""
        ...

    async def set_availability_by_name_contains(
        self, name_fragment: str, available: bool
    ) -> list[CatalogItem]:
        """Set availability of every matching item; return affected items."""
        ...

    async def search_by_name_contains(
        self, query: str, limit: int = SEARCH_LIMIT
    ) -> list[CatalogItem]:
        """Find matching items, oldest first."""
        ...


class CatalogGateway:
    """Catalog access for a single tenant.

    The tenant id is fixed at construction and added to every store call, so
    a name fragment can never reach another tenant's rows.
    """

    def __init__(self, store: ICatalogStore, tenant_id: str):
        if not tenant_id:
            raise ValueError("tenant_id is required")
        self._store = store
        self._tenant_id = tenant_id

    @property
    def tenant_id(self) -> str:
        return self._tenant_id

    async def add_item(self, name: str, price: Decimal, available: bool) -> CatalogItem:
        item = CatalogItem(
            id=str(uuid.uuid4()),
            tenant_id=self._tenant_id,
            name=name.strip(),
            price=price,
            available=available,
            created_at=datetime.now(timezone.utc),
        )
        try:
            await self._store.insert_catalog_item(item)
        except aiosqlite.IntegrityError as e:
            raise CatalogError(str(e)) from e

        logger.info("Catalog item %s added for tenant %s", item.id, self._tenant_id)
        return item

    async def update_price_by_name_contains(
        self, name_fragment: str, price: Decimal
    ) -> list[CatalogItem]:
        fragment = name_fragment.strip()
        if not fragment:
            return []
        try:
            return await self._store.update_catalog_items(
                self._tenant_id, fragment, price=price
            )
        except aiosqlite.IntegrityError as e:
            raise CatalogError(str(e)) from e

    async def set_availability_by_name_contains(
        self, name_fragment: str, available: bool
    ) -> list[CatalogItem]:
        fragment = name_fragment.strip()
        if not fragment:
            return []
        try:
            return await self._store.update_catalog_items(
                self._tenant_id, fragment, available=available
            )
        except aiosqlite.IntegrityError as e:
            raise CatalogError(str(e)) from e

    async def search_by_name_contains(
        self, query: str, limit: int = SEARCH_LIMIT
    ) -> list[CatalogItem]:
        fragment = query.strip()
        if not fragment:
            return []
        return await self._store.search_catalog_items(self._tenant_id, fragment, limit)
