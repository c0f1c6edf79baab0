"""
Tests for the persisted request history.
"""

from unittest.mock import AsyncMock

import orjson
import pytest

from portrait_studio.services.request_history import (
    FileHistoryStorage,
    MemoryHistoryStorage,
    RedisHistoryStorage,
    RequestHistory,
    create_history_storage,
)


class TestRequestHistory:

    @pytest.mark.asyncio
    async def test_newest_first_without_duplicates(self, memory_history):
        await memory_history.add("sunset")
        await memory_history.add("rainy street")
        await memory_history.add("sunset")

        assert memory_history.entries == ["sunset", "rainy street"]

    @pytest.mark.asyncio
    async def test_bounded_oldest_dropped(self, memory_history):
        for i in range(25):
            await memory_history.add(f"request {i}")

        assert len(memory_history) == 20
        assert memory_history.entries[0] == "request 24"
        assert memory_history.entries[-1] == "request 5"

    @pytest.mark.asyncio
    async def test_blank_requests_ignored(self, memory_history):
        await memory_history.add("   ")

        assert memory_history.entries == []
        assert memory_history.storage.payload is None

    @pytest.mark.asyncio
    async def test_entries_stripped(self, memory_history):
        await memory_history.add("  beach  ")
        await memory_history.add("beach")

        assert memory_history.entries == ["beach"]

    @pytest.mark.asyncio
    async def test_every_change_persisted(self):
        storage = MemoryHistoryStorage()
        history = RequestHistory(storage)

        await history.add("one")
        assert orjson.loads(storage.payload) == ["one"]

        await history.clear()
        assert orjson.loads(storage.payload) == []

    @pytest.mark.asyncio
    async def test_load_restores_previous_session(self):
        storage = MemoryHistoryStorage(orjson.dumps(["b", "a"]).decode())
        history = RequestHistory(storage)

        assert await history.load() == ["b", "a"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", ["{not json", '{"a": 1}'])
    async def test_corrupt_storage_treated_as_empty(self, payload):
        history = RequestHistory(MemoryHistoryStorage(payload))

        assert await history.load() == []

    @pytest.mark.asyncio
    async def test_load_drops_stored_duplicates(self):
        history = RequestHistory(MemoryHistoryStorage('["a", "a", "b", " b ", ""]'))

        assert await history.load() == ["a", "b"]

    @pytest.mark.asyncio
    async def test_explicit_zero_limit_respected(self):
        history = RequestHistory(MemoryHistoryStorage(), max_entries=0)

        await history.add("anything")

        assert history.entries == []

    @pytest.mark.asyncio
    async def test_entries_is_a_copy(self, memory_history):
        await memory_history.add("x")
        memory_history.entries.append("y")

        assert memory_history.entries == ["x"]


class TestStorages:

    @pytest.mark.asyncio
    async def test_redis_storage_single_key(self):
        redis = AsyncMock()
        redis.get.return_value = b'["saved"]'
        storage = RedisHistoryStorage(redis, key="history-key")

        assert await storage.read() == '["saved"]'
        await storage.write('["new"]')

        redis.get.assert_awaited_once_with("history-key")
        redis.set.assert_awaited_once_with("history-key", '["new"]')

    @pytest.mark.asyncio
    async def test_redis_storage_missing_key(self):
        redis = AsyncMock()
        redis.get.return_value = None

        assert await RedisHistoryStorage(redis, key="k").read() is None

    @pytest.mark.asyncio
    async def test_file_storage_round_trip(self, tmp_path):
        path = tmp_path / "nested" / "history.json"
        history = RequestHistory(FileHistoryStorage(path))
        await history.add("first")
        await history.add("second")

        reloaded = RequestHistory(FileHistoryStorage(path))

        assert await reloaded.load() == ["second", "first"]

    @pytest.mark.asyncio
    async def test_file_storage_missing_file(self, tmp_path):
        assert await FileHistoryStorage(tmp_path / "none.json").read() is None

    def test_factory(self):
        assert isinstance(create_history_storage("memory"), MemoryHistoryStorage)
        assert isinstance(create_history_storage("redis", redis=AsyncMock()), RedisHistoryStorage)
        with pytest.raises(ValueError):
            create_history_storage("redis")
        with pytest.raises(ValueError):
            create_history_storage("sqlite")
