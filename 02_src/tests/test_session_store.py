"""Tests for SessionStore."""

from datetime import timedelta
from decimal import Decimal

import pytest

from menubot.errors import SessionConflictError
from menubot.models import ItemDraft, SessionState
from menubot.sessions import SessionStore


class TestSessionStoreSave:
    """Tests for SessionStore.save()."""

    async def test_first_save_creates_version_one(self, session_store, clock):
        """Test creating a session stamps version and expiry."""
        session = await session_store.save(
            "tenant-a",
            "97455550101",
            SessionState.WAITING_NAME,
            ItemDraft(),
            "en",
            expected_version=0,
        )

        assert session.version == 1
        assert session.updated_at == clock.now
        assert session.expires_at == clock.now + timedelta(minutes=20)

        stored = await session_store.load("tenant-a", "97455550101")
        assert stored.state is SessionState.WAITING_NAME
        assert stored.version == 1

    async def test_save_advances_version(self, session_store):
        """Test successive saves bump the version."""
        await session_store.save(
            "tenant-a", "s1", SessionState.WAITING_NAME, ItemDraft(), "en", 0
        )
        session = await session_store.save(
            "tenant-a",
            "s1",
            SessionState.WAITING_PRICE,
            ItemDraft(name="Tea"),
            "en",
            1,
        )
        assert session.version == 2

    async def test_stale_version_raises_conflict(self, session_store):
        """Test that a lost race raises SessionConflictError."""
        await session_store.save(
            "tenant-a", "s1", SessionState.WAITING_NAME, ItemDraft(), "en", 0
        )

        with pytest.raises(SessionConflictError) as exc_info:
            await session_store.save(
                "tenant-a", "s1", SessionState.WAITING_PRICE, ItemDraft(name="Tea"), "en", 0
            )
        assert exc_info.value.expected_version == 0

        stored = await session_store.load("tenant-a", "s1")
        assert stored.state is SessionState.WAITING_NAME

    async def test_custom_ttl(self, storage, clock):
        """Test that the configured TTL is used for expiry."""
        store = SessionStore(storage, ttl=timedelta(minutes=5), clock=clock)
        session = await store.save(
            "tenant-a", "s1", SessionState.WAITING_NAME, ItemDraft(), "en", 0
        )
        assert session.expires_at == clock.now + timedelta(minutes=5)


class TestSessionStoreCurrent:
    """Tests for expiry and idle handling."""

    async def test_no_session(self, session_store):
        assert await session_store.current("tenant-a", "s1") is None

    async def test_active_session_is_current(self, session_store):
        """Test a fresh waiting session is returned."""
        await session_store.save(
            "tenant-a",
            "s1",
            SessionState.WAITING_AVAILABLE,
            ItemDraft(name="Tea", price=Decimal("3")),
            "ar",
            0,
        )

        session = await session_store.current("tenant-a", "s1")
        assert session is not None
        assert session.locale == "ar"
        assert session.draft.price == Decimal("3")

    async def test_expired_session_is_absent(self, session_store, clock):
        """Test that a session past expires_at is not current."""
        await session_store.save(
            "tenant-a", "s1", SessionState.WAITING_PRICE, ItemDraft(name="Tea"), "en", 0
        )

        clock.advance(minutes=20)
        assert await session_store.current("tenant-a", "s1") is None

        # The row is kept for its version
        stored = await session_store.load("tenant-a", "s1")
        assert stored is not None
        assert not session_store.is_current(stored)

    async def test_clear_returns_to_idle(self, session_store):
        """Test clear() resets state and draft."""
        await session_store.save(
            "tenant-a", "s1", SessionState.CONFIRM,
            ItemDraft(name="Tea", price=Decimal("3"), available=True), "en", 0,
        )

        cleared = await session_store.clear("tenant-a", "s1", "en", expected_version=1)

        assert cleared.state is SessionState.IDLE
        assert cleared.draft == ItemDraft()
        assert await session_store.current("tenant-a", "s1") is None

    async def test_sessions_scoped_by_tenant_and_sender(self, session_store):
        """Test that keys do not collide across tenants or senders."""
        await session_store.save(
            "tenant-a", "s1", SessionState.WAITING_NAME, ItemDraft(), "en", 0
        )

        assert await session_store.current("tenant-b", "s1") is None
        assert await session_store.current("tenant-a", "s2") is None
