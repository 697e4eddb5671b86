"""Application bootstrap and lifecycle management."""

import os
from datetime import timedelta
from typing import Protocol

from .audit import AuditLog, IAuditLog
from .channels import IMessageChannel, WhatsAppChannel
from .config import Settings, resolve_db_path
from .dialog import DialogEngine
from .logging_config import get_logger
from .processor import IMessageProcessor, MessageProcessor
from .sessions import SessionStore
from .storage import IStorage, Storage
from .tenants import ITenantRegistry, TenantRegistry

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    async def reset(self) -> None:
        """Reset data between test runs."""
        ...

    @property
    def settings(self) -> Settings: ...

    @property
    def tenants(self) -> ITenantRegistry: ...

    @property
    def audit_log(self) -> IAuditLog: ...

    @property
    def processor(self) -> IMessageProcessor: ...

    @property
    def channel(self) -> IMessageChannel: ...


class Application:
    """Main application bootstrap."""

    def __init__(
        self,
        db_path: str | None = None,
        settings: Settings | None = None,
        channel: IMessageChannel | None = None,
    ):
        env_db_path = os.getenv("DATABASE_URL") if db_path is None else db_path
        self._db_path = resolve_db_path(env_db_path)
        self._settings = settings or Settings.from_env()

        # Components (initialized in start())
        self._storage: IStorage | None = None
        self._tenants: ITenantRegistry | None = None
        self._sessions: SessionStore | None = None
        self._audit_log: IAuditLog | None = None
        self._engine: DialogEngine | None = None
        self._processor: IMessageProcessor | None = None
        self._channel: IMessageChannel | None = channel

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 1. Storage (no dependencies)
        self._storage = Storage(self._db_path)
        await self._storage.init()
        logger.info("Storage initialized")

        # 2. Stores over Storage
        self._tenants = TenantRegistry(self._storage)
        self._sessions = SessionStore(
            self._storage,
            ttl=timedelta(minutes=self._settings.session_ttl_minutes),
        )
        self._audit_log = AuditLog(self._storage)

        # 3. DialogEngine (sessions, audit, catalog)
        self._engine = DialogEngine(
            sessions=self._sessions,
            audit_log=self._audit_log,
            catalog_store=self._storage,
            currency=self._settings.currency,
            search_limit=self._settings.search_limit,
        )

        # 4. MessageProcessor (engine, audit)
        self._processor = MessageProcessor(self._engine, self._audit_log)

        # 5. Outbound channel
        if self._channel is None:
            self._channel = WhatsAppChannel(
                token=self._settings.whatsapp_token,
                phone_number_id=self._settings.whatsapp_phone_number_id,
                api_version=self._settings.whatsapp_api_version,
            )
        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._channel:
            await self._channel.close()
        if self._storage:
            await self._storage.close()
            logger.info("Storage closed")

    async def reset(self) -> None:
        """Reset data between test runs."""
        if self._storage:
            await self._storage.clear()
            logger.info("Storage cleared")

    @property
    def settings(self) -> Settings:
        return self._settings

    @property
    def storage(self) -> IStorage:
        """Get storage instance."""
        if not self._storage:
            raise RuntimeError("Application not started")
        return self._storage

    @property
    def tenants(self) -> ITenantRegistry:
        """Get tenant registry."""
        if not self._tenants:
            raise RuntimeError("Application not started")
        return self._tenants

    @property
    def audit_log(self) -> IAuditLog:
        """Get audit log."""
        if not self._audit_log:
            raise RuntimeError("Application not started")
        return self._audit_log

    @property
    def processor(self) -> IMessageProcessor:
        """Get message processor."""
        if not self._processor:
            raise RuntimeError("Application not started")
        return self._processor

    @property
    def channel(self) -> IMessageChannel:
        """Get outbound message channel."""
        if not self._channel:
            raise RuntimeError("Application not started")
        return self._channel
