"""Dialogue session data models."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum


class SessionState(str, Enum):
    """States of the add-item dialogue."""

    IDLE = "idle"
    WAITING_NAME = "addItem.waitingName"
    WAITING_PRICE = "addItem.waitingPrice"
    WAITING_AVAILABLE = "addItem.waitingAvailable"
    CONFIRM = "addItem.confirm"


@dataclass
class ItemDraft:
    """Fields collected so far for a new catalog item."""

    name: str | None = None
    price: Decimal | None = None
    available: bool | None = None

    def next_state(self) -> SessionState:
        """State that asks for the first missing field, or CONFIRM."""
        if not self.name:
            return SessionState.WAITING_NAME
        if self.price is None:
            return SessionState.WAITING_PRICE
        if self.available is None:
            return SessionState.WAITING_AVAILABLE
        return SessionState.CONFIRM

    def to_dict(self) -> dict:
        data: dict = {}
        if self.name is not None:
            data["name"] = self.name
        if self.price is not None:
            data["price"] = str(self.price)
        if self.available is not None:
            data["available"] = self.available
        return data

    @classmethod
    def from_dict(cls, data: dict | None) -> "ItemDraft":
        data = data or {}
        price = data.get("price")
        return cls(
            name=data.get("name"),
            price=Decimal(price) if price is not None else None,
            available=data.get("available"),
        )


@dataclass
class Session:
    """Current dialogue record for one (tenant, sender) pair."""

    tenant_id: str
    sender: str
    state: SessionState
    draft: ItemDraft = field(default_factory=ItemDraft)
    locale: str = "en"
    version: int = 0
    updated_at: datetime | None = None
    expires_at: datetime | None = None

    def is_active(self, now: datetime) -> bool:
        """Idle and expired sessions are treated as absent."""
        if self.state is SessionState.IDLE:
            return False
        return self.expires_at is None or self.expires_at > now
