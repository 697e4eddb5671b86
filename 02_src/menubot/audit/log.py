"""AuditLog implementation for recording processed messages."""

import uuid
from datetime import datetime, timezone
from typing import Protocol

from ..logging_config import get_logger, log_context
from ..models import AuditRecord, InboundMessage
from ..storage import IAuditStore

logger = get_logger(__name__)


class IAuditLog(Protocol):
    """Append-only record of every processed inbound message."""

    async def seen(self, tenant_id: str, message_id: str) -> bool:
        """Check whether this message id was already processed."""
        ...

    async def record(
        self,
        message: InboundMessage,
        action: str,
        success: bool,
        details: dict | None = None,
    ) -> AuditRecord:
        """Create AuditRecord and save to Storage."""
        ...

    async def recent(self, tenant_id: str, limit: int = 100) -> list[AuditRecord]:
        """Get the latest records for a tenant."""
        ...


class AuditLog:
    """Writes and queries AuditRecords."""

    def __init__(self, storage: IAuditStore):
        self._storage = storage

    async def seen(self, tenant_id: str, message_id: str) -> bool:
        return await self._storage.has_audit_record(tenant_id, message_id)

    async def record(
        self,
        message: InboundMessage,
        action: str,
        success: bool,
        details: dict | None = None,
    ) -> AuditRecord:
        """Create AuditRecord and save to Storage."""
        audit_record = AuditRecord(
            id=str(uuid.uuid4()),
            tenant_id=message.tenant_id,
            sender=message.sender,
            message_id=message.message_id,
            input_type=message.input_type,
            input_text=message.text,
            action=action,
            success=success,
            details=details or {},
            raw_payload=message.raw_payload,
            created_at=datetime.now(timezone.utc),
        )
        inserted = await self._storage.insert_audit_record(audit_record)
        if not inserted:
            # A concurrent delivery of the same message id got there first
            logger.warning(
                "Duplicate audit record dropped",
                extra=log_context(message.tenant_id, message.sender, message.message_id),
            )
        return audit_record

    async def recent(self, tenant_id: str, limit: int = 100) -> list[AuditRecord]:
        return await self._storage.get_audit_records(tenant_id, limit=limit)
