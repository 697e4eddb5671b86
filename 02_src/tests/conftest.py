"""Pytest configuration and fixtures."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

TENANT_A = "tenant-a"
TENANT_B = "tenant-b"
SENDER = "97455550101"


class FakeClock:
    """Controllable clock for session expiry tests."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


@pytest_asyncio.fixture
async def storage():
    """Create in-memory storage for testing."""
    from menubot.storage import Storage

    st = Storage(":memory:")
    await st.init()
    yield st
    await st.close()


@pytest.fixture
def clock():
    """Fixed clock at 2025-01-01 12:00 UTC."""
    return FakeClock(datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def session_store(storage, clock):
    """Create SessionStore with the fake clock."""
    from menubot.sessions import SessionStore

    return SessionStore(storage, clock=clock)


@pytest.fixture
def audit_log(storage):
    """Create AuditLog over storage."""
    from menubot.audit import AuditLog

    return AuditLog(storage)


@pytest.fixture
def gateway(storage):
    """CatalogGateway bound to tenant A."""
    from menubot.catalog import CatalogGateway

    return CatalogGateway(storage, TENANT_A)


@pytest.fixture
def engine(session_store, audit_log, storage):
    """Create DialogEngine over real storage."""
    from menubot.dialog import DialogEngine

    return DialogEngine(
        sessions=session_store,
        audit_log=audit_log,
        catalog_store=storage,
    )


@pytest.fixture
def mock_gateway():
    """Catalog gateway double for failure and call-shape tests."""
    gw = AsyncMock()
    gw.tenant_id = TENANT_A
    gw.update_price_by_name_contains.return_value = []
    gw.set_availability_by_name_contains.return_value = []
    gw.search_by_name_contains.return_value = []
    return gw


@pytest.fixture
def mock_engine(session_store, audit_log, mock_gateway):
    """DialogEngine whose catalog calls go to mock_gateway."""
    from menubot.dialog import DialogEngine

    return DialogEngine(
        sessions=session_store,
        audit_log=audit_log,
        gateway_factory=lambda tenant_id: mock_gateway,
    )


@pytest.fixture
def processor(engine, audit_log):
    """Create MessageProcessor over the real engine."""
    from menubot.processor import MessageProcessor

    return MessageProcessor(engine, audit_log)


@pytest.fixture
def make_message():
    """Factory for InboundMessage with test defaults."""
    from menubot.models import InboundMessage, InputType

    def _make(
        text: str,
        message_id: str | None = None,
        tenant_id: str = TENANT_A,
        sender: str = SENDER,
    ) -> InboundMessage:
        return InboundMessage(
            tenant_id=tenant_id,
            sender=sender,
            text=text,
            message_id=message_id,
            input_type=InputType.TEXT,
            raw_payload={"text": text, "id": message_id},
        )

    return _make


@pytest.fixture
def mock_channel():
    """Outbound channel double."""
    channel = AsyncMock()
    channel.send_text = AsyncMock()
    channel.close = AsyncMock()
    return channel
