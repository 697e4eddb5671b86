"""Tests for MessageProcessor."""

import asyncio
import logging
from unittest.mock import AsyncMock

from menubot.processor import MessageProcessor


class TestIdempotency:
    """Tests for duplicate delivery handling."""

    async def test_replayed_confirm_adds_once(self, processor, make_message, storage, audit_log):
        """Test that a redelivered confirmation inserts nothing more."""
        await processor.process(
            make_message("add item name: Tea price: 3 available: yes", message_id="m1")
        )
        assert await processor.process(make_message("confirm", message_id="m2")) == "Done ✅"

        reply = await processor.process(make_message("confirm", message_id="m2"))

        assert reply == "This message was already processed ✅"
        assert len(await storage.search_catalog_items("tenant-a", "tea", limit=8)) == 1
        records = await audit_log.recent("tenant-a")
        assert [r.message_id for r in records].count("m2") == 1

    async def test_replay_in_arabic(self, processor, make_message):
        await processor.process(make_message("ابحث عن شاي", message_id="m1"))

        reply = await processor.process(make_message("ابحث عن شاي", message_id="m1"))

        assert reply == "تمت معالجة هذه الرسالة مسبقًا ✅"

    async def test_replay_skips_engine(self, audit_log, make_message):
        """Test that a seen message id never reaches the engine."""
        engine = AsyncMock()
        engine.handle.return_value = "ok"
        processor = MessageProcessor(engine, audit_log)
        await audit_log.record(make_message("hi", message_id="m1"), "help", True)

        await processor.process(make_message("hi", message_id="m1"))

        engine.handle.assert_not_awaited()

    async def test_replay_logged_with_context(self, processor, make_message, caplog):
        """Test the skipped delivery is logged with tenant, sender and message id."""
        await processor.process(make_message("search for tea", message_id="m1"))

        with caplog.at_level(logging.INFO, logger="menubot.processor"):
            await processor.process(make_message("search for tea", message_id="m1"))

        record = next(r for r in caplog.records if "already processed" in r.getMessage())
        assert record.context == {
            "tenant_id": "tenant-a",
            "sender": "97455550101",
            "message_id": "m1",
        }

    async def test_same_id_other_tenant_is_processed(self, processor, make_message):
        """Test message ids are scoped per tenant."""
        await processor.process(make_message("search for tea", message_id="m1"))

        reply = await processor.process(
            make_message("search for tea", message_id="m1", tenant_id="tenant-b")
        )

        assert reply == "No results."

    async def test_missing_message_id_always_processed(
        self, processor, make_message, audit_log
    ):
        """Test that messages without an id are never treated as replays."""
        await processor.process(make_message("search for tea"))
        reply = await processor.process(make_message("search for tea"))

        assert reply == "No results."
        assert len(await audit_log.recent("tenant-a")) == 2

    async def test_concurrent_duplicates(self, processor, make_message, audit_log):
        """Test two overlapping deliveries of one message run it once."""
        replies = await asyncio.gather(
            processor.process(make_message("add item name: Tea", message_id="m1")),
            processor.process(make_message("add item name: Tea", message_id="m1")),
        )

        assert sorted(replies)[1] == "This message was already processed ✅"
        assert sorted(replies)[0].startswith("Missing: **price**")
        assert len(await audit_log.recent("tenant-a")) == 1


class TestSerialization:
    """Tests for per-sender ordering."""

    def _tracking_engine(self, log):
        async def handle(message):
            log.append(("start", message.sender, message.text))
            await asyncio.sleep(0.01)
            log.append(("end", message.sender, message.text))
            return message.text

        engine = AsyncMock()
        engine.handle.side_effect = handle
        return engine

    async def test_same_sender_never_overlaps(self, audit_log, make_message):
        log = []
        processor = MessageProcessor(self._tracking_engine(log), audit_log)

        await asyncio.gather(
            processor.process(make_message("one")),
            processor.process(make_message("two")),
        )

        assert [entry[0] for entry in log] == ["start", "end", "start", "end"]

    async def test_different_senders_run_concurrently(self, audit_log, make_message):
        log = []
        processor = MessageProcessor(self._tracking_engine(log), audit_log)

        await asyncio.gather(
            processor.process(make_message("one", sender="111")),
            processor.process(make_message("two", sender="222")),
        )

        assert [entry[0] for entry in log] == ["start", "start", "end", "end"]

    async def test_locks_released(self, processor, make_message):
        """Test that per-sender locks do not accumulate."""
        await asyncio.gather(
            processor.process(make_message("search for tea", sender="111")),
            processor.process(make_message("search for tea", sender="222")),
            processor.process(make_message("search for tea", sender="111")),
        )

        assert processor._locks == {}
        assert processor._pending == {}

    async def test_sequential_dialogue_under_gather(self, processor, make_message, session_store):
        """Test queued turns see the state written by the turn before them."""
        await asyncio.gather(
            processor.process(make_message("add item", message_id="m1")),
            processor.process(make_message("Tea", message_id="m2")),
            processor.process(make_message("3", message_id="m3")),
        )

        session = await session_store.load("tenant-a", "97455550101")
        assert session.draft.name == "Tea"
        assert str(session.draft.price) == "3"
