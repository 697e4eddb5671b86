"""MessageProcessor: entry point for verified inbound messages."""

import asyncio
from typing import Protocol

from .audit import IAuditLog
from .commands import detect_locale
from .dialog import IDialogEngine, Replies
from .logging_config import get_logger, log_context
from .models import InboundMessage

logger = get_logger(__name__)

SenderKey = tuple[str, str]


class IMessageProcessor(Protocol):
    """Processes each inbound message at most once."""

    async def process(self, message: InboundMessage) -> str:
        """Return the reply for a message, or the replay reply for a duplicate."""
        ...


class MessageProcessor:
    """Idempotency gate in front of the DialogEngine.

    Turns from the same (tenant, sender) are serialized in this process so
    that two overlapping webhook deliveries never read the same session state.
    """

    def __init__(self, engine: IDialogEngine, audit_log: IAuditLog):
        self._engine = engine
        self._audit = audit_log
        self._locks: dict[SenderKey, asyncio.Lock] = {}
        self._pending: dict[SenderKey, int] = {}

    async def process(self, message: InboundMessage) -> str:
        key = (message.tenant_id, message.sender)
        lock = self._locks.setdefault(key, asyncio.Lock())
        self._pending[key] = self._pending.get(key, 0) + 1

        try:
            async with lock:
                return await self._process_locked(message)
        finally:
            self._pending[key] -= 1
            if self._pending[key] == 0:
                del self._pending[key]
                del self._locks[key]

    async def _process_locked(self, message: InboundMessage) -> str:
        context = log_context(message.tenant_id, message.sender, message.message_id)
        if message.message_id and await self._audit.seen(
            message.tenant_id, message.message_id
        ):
            logger.info("Message already processed; engine skipped", extra=context)
            return Replies(detect_locale(message.text)).text("already_processed")

        if not message.message_id:
            logger.debug("Message has no id; idempotency check skipped", extra=context)

        return await self._engine.handle(message)
