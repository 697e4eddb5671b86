"""Audit-related data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class InputType(str, Enum):
    """Kind of inbound message."""

    TEXT = "text"
    AUDIO = "audio"


class Action(str, Enum):
    """Action tags written to the audit log."""

    MENUS_INSERT = "menus.insert"
    MENUS_UPDATE_PRICE = "menus.update.price"
    MENUS_UPDATE_AVAILABLE = "menus.update.available"
    MENUS_SEARCH = "menus.search"
    ADD_ITEM_START = "dialog.add_item.start"
    ADD_ITEM_NAME = "dialog.add_item.name"
    ADD_ITEM_PRICE = "dialog.add_item.price"
    ADD_ITEM_AVAILABLE = "dialog.add_item.available"
    ADD_ITEM_CONFIRM_PROMPT = "dialog.add_item.confirm_prompt"
    ADD_ITEM_CANCEL = "dialog.add_item.cancel"
    HELP = "help"


@dataclass
class AuditRecord:
    """Outcome of one processed inbound message."""

    id: str
    tenant_id: str
    sender: str
    message_id: str | None
    input_type: InputType
    input_text: str
    action: str
    success: bool
    details: dict = field(default_factory=dict)
    raw_payload: dict | None = None
    created_at: datetime | None = None
