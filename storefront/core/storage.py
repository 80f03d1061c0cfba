"""
Persistent key-value storage for client-local state
Holds the cart snapshot and the cached session/profile mirrors as strings
"""

import json
import logging
import os
from pathlib import Path
from typing import Dict, Optional

import redis

from .config import settings
from .exceptions import StorageError

logger = logging.getLogger(__name__)


class KeyValueStorage:
    """String-to-string storage with whole-value replace semantics"""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError

    def remove(self, key: str) -> None:
        raise NotImplementedError


class MemoryStorage(KeyValueStorage):
    """In-process storage, lost when the process exits"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


class FileStorage(KeyValueStorage):
    """
    All slots kept in one JSON object on disk.

    Every write rewrites the whole file, so two processes sharing the file
    follow last-write-wins.
    """

    def __init__(self, path: str):
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except OSError as e:
            raise StorageError(f"Failed to read {self.path}: {e}") from e
        except json.JSONDecodeError:
            logger.warning(f"Storage file {self.path} is corrupt, starting empty")
            return {}
        return data if isinstance(data, dict) else {}

    def _dump(self, data: Dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            tmp_path.write_text(json.dumps(data), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Failed to write {self.path}: {e}") from e

    def get(self, key: str) -> Optional[str]:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._dump(data)

    def remove(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._dump(data)


class RedisStorage(KeyValueStorage):
    """Storage backed by a Redis server, one Redis key per slot"""

    def __init__(self, url: str, prefix: str = "storefront:"):
        self.prefix = prefix
        self.client = redis.Redis.from_url(url, decode_responses=True)

    def get(self, key: str) -> Optional[str]:
        try:
            return self.client.get(self.prefix + key)
        except redis.RedisError as e:
            raise StorageError(f"Redis get failed: {e}") from e

    def set(self, key: str, value: str) -> None:
        try:
            self.client.set(self.prefix + key, value)
        except redis.RedisError as e:
            raise StorageError(f"Redis set failed: {e}") from e

    def remove(self, key: str) -> None:
        try:
            self.client.delete(self.prefix + key)
        except redis.RedisError as e:
            raise StorageError(f"Redis delete failed: {e}") from e


def create_storage(backend: Optional[str] = None) -> KeyValueStorage:
    """Build the storage backend named in settings"""
    backend = (backend or settings.STORAGE_BACKEND).lower()

    if backend == "memory":
        return MemoryStorage()
    if backend == "file":
        return FileStorage(settings.STORAGE_FILE_PATH)
    if backend == "redis":
        return RedisStorage(settings.REDIS_URL)

    raise ValueError(f"Unknown storage backend: {backend}")
