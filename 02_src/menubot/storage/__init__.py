"""Storage module."""

from .storage import (
    IAuditStore,
    ICatalogStore,
    ISessionStore,
    IStorage,
    ITenantStore,
    Storage,
)

__all__ = [
    "IAuditStore",
    "ICatalogStore",
    "ISessionStore",
    "IStorage",
    "ITenantStore",
    "Storage",
]
