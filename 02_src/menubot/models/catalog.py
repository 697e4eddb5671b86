"""Catalog and tenant data models."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal


@dataclass
class Tenant:
    """A restaurant account and the WhatsApp numbers allowed to manage it."""

    id: str
    name: str
    whatsapp_numbers: list[str] = field(default_factory=list)


@dataclass
class CatalogItem:
    """A menu item owned by one tenant."""

    id: str
    tenant_id: str
    name: str
    price: Decimal
    available: bool
    created_at: datetime | None = None
