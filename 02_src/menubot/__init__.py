"""Menu bot core module."""

from .app import Application, IApplication
from .audit import AuditLog, IAuditLog
from .catalog import CatalogGateway, ICatalogGateway
from .channels import IMessageChannel, WhatsAppChannel
from .commands import CommandRouter, ICommandRouter
from .dialog import DialogEngine, IDialogEngine
from .errors import CatalogError, MenuBotError, SessionConflictError
from .models import (
    Action,
    AddItem,
    AuditRecord,
    CatalogItem,
    CommandMatch,
    EditPrice,
    InboundMessage,
    InputType,
    ItemDraft,
    NoMatch,
    Search,
    Session,
    SessionState,
    Tenant,
    ToggleAvailability,
)
from .processor import IMessageProcessor, MessageProcessor
from .sessions import ISessionManager, SessionStore
from .storage import IStorage, Storage
from .tenants import ITenantRegistry, TenantRegistry

__all__ = [
    # Application
    "Application",
    "IApplication",
    # Models
    "Action",
    "AddItem",
    "AuditRecord",
    "CatalogItem",
    "CommandMatch",
    "EditPrice",
    "InboundMessage",
    "InputType",
    "ItemDraft",
    "NoMatch",
    "Search",
    "Session",
    "SessionState",
    "Tenant",
    "ToggleAvailability",
    # Errors
    "CatalogError",
    "MenuBotError",
    "SessionConflictError",
    # Components
    "IStorage",
    "Storage",
    "ISessionManager",
    "SessionStore",
    "IAuditLog",
    "AuditLog",
    "ICatalogGateway",
    "CatalogGateway",
    "ICommandRouter",
    "CommandRouter",
    "IDialogEngine",
    "DialogEngine",
    "IMessageProcessor",
    "MessageProcessor",
    "ITenantRegistry",
    "TenantRegistry",
    "IMessageChannel",
    "WhatsAppChannel",
]
