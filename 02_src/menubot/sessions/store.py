"""SessionStore implementation."""

from datetime import datetime, timedelta, timezone
from typing import Callable, Protocol

from ..errors import SessionConflictError
from ..logging_config import get_logger, log_context
from ..models import ItemDraft, Session, SessionState
from ..storage import ISessionStore

logger = get_logger(__name__)

DEFAULT_TTL = timedelta(minutes=20)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ISessionManager(Protocol):
    """Durable dialogue state keyed by (tenant, sender)."""

    async def load(self, tenant_id: str, sender: str) -> Session | None:
        """Get the stored row, possibly idle or expired."""
        ...

    async def current(self, tenant_id: str, sender: str) -> Session | None:
        """Get the session only if it is active."""
        ...

    def is_current(self, session: Session | None) -> bool:
        """True when the session is neither idle nor expired."""
        ...

    async def save(
        self,
        tenant_id: str,
        sender: str,
        state: SessionState,
        draft: ItemDraft,
        locale: str,
        expected_version: int,
    ) -> Session:
        """Write a new state; raise SessionConflictError on a lost race."""
        ...

    async def clear(
        self, tenant_id: str, sender: str, locale: str, expected_version: int
    ) -> Session:
        """Return the sender to idle with an empty draft."""
        ...


class SessionStore:
    """Current-session record with TTL stamping and optimistic versioning."""

    def __init__(
        self,
        storage: ISessionStore,
        ttl: timedelta = DEFAULT_TTL,
        clock: Clock = utcnow,
    ):
        self._storage = storage
        self._ttl = ttl
        self._clock = clock

    async def load(self, tenant_id: str, sender: str) -> Session | None:
        return await self._storage.get_session(tenant_id, sender)

    async def current(self, tenant_id: str, sender: str) -> Session | None:
        session = await self.load(tenant_id, sender)
        return session if self.is_current(session) else None

    def is_current(self, session: Session | None) -> bool:
        return session is not None and session.is_active(self._clock())

    async def save(
        self,
        tenant_id: str,
        sender: str,
        state: SessionState,
        draft: ItemDraft,
        locale: str,
        expected_version: int,
    ) -> Session:
        now = self._clock()
        session = Session(
            tenant_id=tenant_id,
            sender=sender,
            state=state,
            draft=draft,
            locale=locale,
            version=expected_version + 1,
            updated_at=now,
            expires_at=now + self._ttl,
        )

        if not await self._storage.save_session(session, expected_version):
            logger.warning(
                "Session conflict at version %s",
                expected_version,
                extra=log_context(tenant_id, sender),
            )
            raise SessionConflictError(tenant_id, sender, expected_version)

        logger.debug("Session -> %s", state.value, extra=log_context(tenant_id, sender))
        return session

    async def clear(
        self, tenant_id: str, sender: str, locale: str, expected_version: int
    ) -> Session:
        return await self.save(
            tenant_id,
            sender,
            SessionState.IDLE,
            ItemDraft(),
            locale,
            expected_version,
        )
