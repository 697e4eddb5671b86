"""Tests for AuditLog."""

from menubot.models import Action, InputType


class TestAuditLog:
    """Tests for AuditLog."""

    async def test_record_creates_audit_record(self, audit_log, make_message):
        """Test that record() stores message fields."""
        message = make_message("search for tea", message_id="m1")

        record = await audit_log.record(
            message, Action.MENUS_SEARCH.value, True, {"query": "tea", "count": 0}
        )

        assert record.id
        assert record.tenant_id == "tenant-a"
        assert record.sender == "97455550101"
        assert record.message_id == "m1"
        assert record.input_type is InputType.TEXT
        assert record.input_text == "search for tea"
        assert record.action == "menus.search"
        assert record.success is True
        assert record.created_at is not None

    async def test_record_saves_to_storage(self, audit_log, make_message):
        """Test that records are readable back, newest first."""
        await audit_log.record(make_message("a", message_id="m1"), "help", True)
        await audit_log.record(make_message("b", message_id="m2"), "help", True)

        records = await audit_log.recent("tenant-a")
        assert [r.message_id for r in records] == ["m2", "m1"]
        assert records[0].raw_payload == {"text": "b", "id": "m2"}
        assert records[0].details == {}

    async def test_seen(self, audit_log, make_message):
        """Test lookup by message id."""
        assert not await audit_log.seen("tenant-a", "m1")

        await audit_log.record(make_message("hi", message_id="m1"), "help", True)

        assert await audit_log.seen("tenant-a", "m1")
        assert not await audit_log.seen("tenant-b", "m1")

    async def test_duplicate_message_id_keeps_first(self, audit_log, make_message):
        """Test that a second record for the same message id is dropped."""
        await audit_log.record(make_message("hi", message_id="m1"), "help", True)
        await audit_log.record(
            make_message("hi", message_id="m1"), "menus.search", False
        )

        records = await audit_log.recent("tenant-a")
        assert len(records) == 1
        assert records[0].action == "help"

    async def test_recent_limit(self, audit_log, make_message):
        for n in range(5):
            await audit_log.record(make_message(f"t{n}"), "help", True)

        assert len(await audit_log.recent("tenant-a", limit=3)) == 3
