"""
Key-value stores for cached declaration files.

``MemoryStore`` for tests and short-lived processes, ``FileStore`` for a
durable cache that survives restarts.
"""

import asyncio
from pathlib import Path
from typing import Any, Protocol

import orjson

from ..core import get_logger, hash_string, Algorithm

logger = get_logger(__name__)


class KeyValueStore(Protocol):
    """Async key-value storage of JSON-compatible values"""

    async def get(self, key: str) -> Any | None:
        ...

    async def set(self, key: str, value: Any) -> None:
        ...

    async def delete(self, key: str) -> None:
        ...


class MemoryStore:
    """In-process store."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(initial or {})

    async def get(self, key: str) -> Any | None:
        return self._data.get(key)

    async def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)

    def __len__(self) -> int:
        return len(self._data)


class FileStore:
    """One JSON file per key under a directory; I/O runs in worker threads."""

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{hash_string(key, Algorithm.SHA256, truncate=32)}.json"

    def _read(self, key: str) -> Any | None:
        path = self._path(key)
        try:
            return orjson.loads(path.read_bytes())
        except FileNotFoundError:
            return None
        except (OSError, orjson.JSONDecodeError) as e:
            logger.warning("store_read_failed", path=str(path), error=str(e))
            return None

    def _write(self, key: str, value: Any) -> None:
        path = self._path(key)
        tmp = path.with_suffix(".tmp")
        tmp.write_bytes(orjson.dumps(value))
        tmp.replace(path)

    def _remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    async def get(self, key: str) -> Any | None:
        return await asyncio.to_thread(self._read, key)

    async def set(self, key: str, value: Any) -> None:
        try:
            await asyncio.to_thread(self._write, key, value)
        except OSError as e:
            logger.warning("store_write_failed", key=key, error=str(e))

    async def delete(self, key: str) -> None:
        await asyncio.to_thread(self._remove, key)
