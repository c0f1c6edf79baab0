# portrait_studio/services/request_history.py
import asyncio
from pathlib import Path
from typing import Protocol

import orjson
import structlog
from redis.asyncio import Redis

from portrait_studio.data.settings import settings

logger = structlog.get_logger(__name__)


class HistoryStorage(Protocol):
    """Stores the serialized history under a single key."""

    async def read(self) -> str | None: ...

    async def write(self, payload: str) -> None: ...


class RedisHistoryStorage:
    def __init__(self, redis: Redis, key: str | None = None) -> None:
        self.redis = redis
        self.key = key or settings.history.key

    async def read(self) -> str | None:
        raw = await self.redis.get(self.key)
        if raw is None:
            return None
        return raw.decode("utf-8") if isinstance(raw, bytes) else raw

    async def write(self, payload: str) -> None:
        await self.redis.set(self.key, payload)


class FileHistoryStorage:
    def __init__(self, path: Path | None = None) -> None:
        self.path = Path(path or settings.history.file_path)

    def _read_sync(self) -> str | None:
        if not self.path.exists():
            return None
        return self.path.read_text(encoding="utf-8")

    def _write_sync(self, payload: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(payload, encoding="utf-8")
        tmp_path.replace(self.path)

    async def read(self) -> str | None:
        return await asyncio.to_thread(self._read_sync)

    async def write(self, payload: str) -> None:
        await asyncio.to_thread(self._write_sync, payload)


class MemoryHistoryStorage:
    def __init__(self, payload: str | None = None) -> None:
        self.payload = payload

    async def read(self) -> str | None:
        return self.payload

    async def write(self, payload: str) -> None:
        self.payload = payload


class RequestHistory:
    """
    Most-recent-first list of past additional requests, without duplicates.

    Loaded once at startup and written back on every change.
    """

    def __init__(self, storage: HistoryStorage, max_entries: int | None = None) -> None:
        self.storage = storage
        self.max_entries = settings.history.max_entries if max_entries is None else max_entries
        self._entries: list[str] = []

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    async def load(self) -> list[str]:
        raw = await self.storage.read()
        if not raw:
            self._entries = []
            return self.entries
        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError:
            logger.exception("Could not decode stored request history")
            data = []
        if not isinstance(data, list):
            logger.warning("Stored request history is not a list", type=type(data).__name__)
            data = []
        entries = (item.strip() for item in data if isinstance(item, str))
        # First occurrence wins, matching the most-recent-first order
        self._entries = list(dict.fromkeys(item for item in entries if item))[: self.max_entries]
        logger.debug("Request history loaded", entries=len(self._entries))
        return self.entries

    async def add(self, request: str) -> list[str]:
        request = request.strip()
        if not request:
            return self.entries
        filtered = [item for item in self._entries if item != request]
        self._entries = [request, *filtered][: self.max_entries]
        await self._save()
        return self.entries

    async def clear(self) -> None:
        self._entries = []
        await self._save()

    async def _save(self) -> None:
        await self.storage.write(orjson.dumps(self._entries).decode("utf-8"))


def create_history_storage(backend: str | None = None, redis: Redis | None = None) -> HistoryStorage:
    backend = backend or settings.history.backend
    if backend == "redis":
        if redis is None:
            raise ValueError("Redis history storage requires a Redis connection.")
        return RedisHistoryStorage(redis)
    if backend == "file":
        return FileHistoryStorage()
    if backend == "memory":
        return MemoryHistoryStorage()
    raise ValueError(f"Unknown history backend: '{backend}'")
