"""Unit tests for the history persistence adapter."""
import json
import logging
from datetime import datetime, timezone

import pytest

from conftest import BrokenHistoryStore
from sahamchat.chat import (
    STORAGE_KEY,
    HistoryPersistence,
    Message,
    Role,
    decode_history,
    encode_history,
)
from sahamchat.memory import InMemoryHistoryStore


def _conversation() -> list[Message]:
    return [
        Message.create(Role.USER, "Apa itu IHSG?"),
        Message.create(Role.ASSISTANT, "IHSG adalah indeks harga saham gabungan."),
    ]


class TestCodec:
    """Tests for encoding and decoding the stored record."""

    def test_envelope_format(self):
        messages = _conversation()

        data = json.loads(encode_history(messages))

        assert data["version"] == 1
        assert [m["role"] for m in data["messages"]] == ["user", "assistant"]
        assert isinstance(data["messages"][0]["timestamp"], str)

    def test_round_trip_preserves_messages(self):
        messages = _conversation()

        decoded = decode_history(encode_history(messages))

        assert decoded == messages
        assert decoded[0].timestamp == messages[0].timestamp

    def test_accepts_bare_list_from_browser_storage(self):
        raw = json.dumps([
            {
                "id": "user-1717171717171",
                "content": "Apa itu saham?",
                "role": "user",
                "timestamp": "2024-05-31T15:28:37.171Z",
            },
            {
                "id": "ai-1717171719000",
                "content": "Saham adalah bukti kepemilikan.",
                "role": "assistant",
                "timestamp": "2024-05-31T15:28:39.000Z",
            },
        ])

        decoded = decode_history(raw)

        assert [m.id for m in decoded] == ["user-1717171717171", "ai-1717171719000"]
        assert decoded[0].timestamp == datetime(2024, 5, 31, 15, 28, 37, 171000, tzinfo=timezone.utc)
        assert decoded[0].timestamp < decoded[1].timestamp

    def test_naive_timestamps_are_read_as_utc(self):
        raw = json.dumps([
            {"id": "user-1", "content": "halo", "role": "user", "timestamp": "2024-01-01T10:00:00"},
            {"id": "ai-1", "content": "Halo juga!", "role": "assistant", "timestamp": "2024-01-01T10:00:01Z"},
        ])

        decoded = decode_history(raw)

        assert decoded[0].timestamp == datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)
        assert decoded[0].timestamp < decoded[1].timestamp
        assert all(m.timestamp.tzinfo is not None for m in decoded)

    def test_malformed_entries_are_dropped(self, caplog):
        good = _conversation()[0].model_dump(mode="json")
        raw = json.dumps({
            "version": 1,
            "messages": [
                good,
                {"id": "user-2", "content": "no timestamp", "role": "user", "timestamp": "kemarin"},
                {"id": "user-3", "content": "halo", "role": "system", "timestamp": good["timestamp"]},
                "not even an object",
            ],
        })

        with caplog.at_level(logging.WARNING):
            decoded = decode_history(raw)

        assert [m.id for m in decoded] == [good["id"]]
        assert "Dropping malformed chat history entry" in caplog.text

    def test_unexpected_shape_loads_empty(self):
        assert decode_history(json.dumps({"messages": "nope"})) == []
        assert decode_history(json.dumps(42)) == []

    def test_invalid_json_raises(self):
        with pytest.raises(json.JSONDecodeError):
            decode_history("{not json")


class TestHistoryPersistence:
    """Tests for load/save/erase against a history store."""

    @pytest.mark.asyncio
    async def test_load_missing_record_is_empty(self, memory_store):
        assert await HistoryPersistence(memory_store).load() == []

    @pytest.mark.asyncio
    async def test_save_then_load(self, memory_store):
        persistence = HistoryPersistence(memory_store)
        messages = _conversation()

        persistence.save(messages)
        await persistence.flush()

        assert STORAGE_KEY in memory_store.records
        assert await HistoryPersistence(memory_store).load() == messages

    @pytest.mark.asyncio
    async def test_writes_land_in_call_order(self, memory_store):
        persistence = HistoryPersistence(memory_store)
        messages = _conversation()

        persistence.save(messages[:1])
        persistence.save(messages)
        persistence.erase()
        persistence.save(messages[:1])
        await persistence.flush()

        assert await persistence.load() == messages[:1]

    @pytest.mark.asyncio
    async def test_erase_deletes_record(self, memory_store):
        persistence = HistoryPersistence(memory_store)
        persistence.save(_conversation())
        persistence.erase()
        await persistence.flush()

        assert STORAGE_KEY not in memory_store.records

    @pytest.mark.asyncio
    async def test_custom_key(self, memory_store):
        persistence = HistoryPersistence(memory_store, key="widget-2")
        persistence.save(_conversation())
        await persistence.flush()

        assert list(memory_store.records) == ["widget-2"]

    @pytest.mark.asyncio
    async def test_read_failure_loads_empty(self, caplog):
        store = BrokenHistoryStore(fail_read=True)

        with caplog.at_level(logging.WARNING):
            messages = await HistoryPersistence(store).load()

        assert messages == []
        assert "Error loading chat history" in caplog.text

    @pytest.mark.asyncio
    async def test_corrupt_record_loads_empty(self):
        store = InMemoryHistoryStore({STORAGE_KEY: "{corrupt"})
        assert await HistoryPersistence(store).load() == []

    @pytest.mark.asyncio
    async def test_deeply_nested_record_loads_empty(self, caplog):
        """A record too deep for the JSON parser is unreadable, not fatal."""
        depth = 200_000
        store = InMemoryHistoryStore({STORAGE_KEY: "[" * depth + "]" * depth})

        with caplog.at_level(logging.WARNING):
            messages = await HistoryPersistence(store).load()

        assert messages == []
        assert "Stored chat history is unreadable" in caplog.text

    @pytest.mark.asyncio
    async def test_write_failure_is_logged_not_raised(self, caplog):
        store = BrokenHistoryStore(fail_write=True)
        persistence = HistoryPersistence(store)

        with caplog.at_level(logging.WARNING):
            persistence.save(_conversation())
            await persistence.flush()

        assert "Error saving chat history" in caplog.text
        assert store.records == {}

    @pytest.mark.asyncio
    async def test_failed_write_does_not_block_later_writes(self, memory_store):
        store = BrokenHistoryStore(fail_write=True)
        persistence = HistoryPersistence(store)
        persistence.save(_conversation())
        await persistence.flush()

        store.fail_write = False
        persistence.save(_conversation()[:1])
        await persistence.flush()

        assert len(await persistence.load()) == 1

    def test_save_without_event_loop_is_absorbed(self, memory_store, caplog):
        persistence = HistoryPersistence(memory_store)

        with caplog.at_level(logging.WARNING):
            persistence.save(_conversation())

        assert "no running event loop" in caplog.text
