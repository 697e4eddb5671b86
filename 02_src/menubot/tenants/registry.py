"""TenantRegistry: maps sender phone numbers to tenants."""

import re
from typing import Protocol

from ..logging_config import get_logger
from ..models import Tenant
from ..storage import ITenantStore

logger = get_logger(__name__)


def normalize_phone(raw: str) -> str:
    """Keep digits only ("+974 5555-0101" -> "97455550101")."""
    return re.sub(r"\D", "", raw or "")


class ITenantRegistry(Protocol):
    """Authenticates senders against registered tenants."""

    async def resolve(self, phone: str) -> str | None:
        """Return the tenant id for a sender, or None if not authorized."""
        ...

    async def register(self, tenant: Tenant) -> Tenant:
        """Save a tenant with normalized numbers."""
        ...


class TenantRegistry:
    """Tenant lookup backed by Storage."""

    def __init__(self, storage: ITenantStore):
        self._storage = storage

    async def resolve(self, phone: str) -> str | None:
        normalized = normalize_phone(phone)
        if not normalized:
            return None

        tenant = await self._storage.get_tenant_by_phone(normalized)
        if tenant is None:
            logger.warning("Unauthorized sender %s", normalized)
            return None
        return tenant.id

    async def register(self, tenant: Tenant) -> Tenant:
        numbers = sorted({normalize_phone(n) for n in tenant.whatsapp_numbers} - {""})
        normalized = Tenant(id=tenant.id, name=tenant.name, whatsapp_numbers=numbers)
        await self._storage.save_tenant(normalized)
        logger.info("Tenant %s registered with %d number(s)", tenant.id, len(numbers))
        return normalized
