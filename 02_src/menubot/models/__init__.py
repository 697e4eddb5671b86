"""Core data models for the menu bot."""

from .audit import Action, AuditRecord, InputType
from .catalog import CatalogItem, Tenant
from .commands import (
    AddItem,
    CommandMatch,
    EditPrice,
    NoMatch,
    Search,
    ToggleAvailability,
)
from .messages import InboundMessage
from .session import ItemDraft, Session, SessionState

__all__ = [
    # Audit
    "Action",
    "AuditRecord",
    "InputType",
    # Catalog
    "CatalogItem",
    "Tenant",
    # Commands
    "AddItem",
    "CommandMatch",
    "EditPrice",
    "NoMatch",
    "Search",
    "ToggleAvailability",
    # Messages
    "InboundMessage",
    # Session
    "ItemDraft",
    "Session",
    "SessionState",
]
