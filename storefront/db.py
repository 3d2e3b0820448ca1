"""
Storage Module - Key-value backends for client-side persistence

Provides the persistent key-value store the cart lives in:
- MemoryStore: process-local dict (tests, single page session)
- FileStore: JSON file on disk, survives process restarts like localStorage
- RedisStore: Upstash Redis over REST, for shared persistence

All backends raise StorageError on faults; callers decide whether to fail soft.
"""

import json
import os
from pathlib import Path
from typing import Optional, Protocol

from upstash_redis import Redis

from storefront.config import Settings
from storefront.errors import StorageError
from storefront.logging import get_logger

logger = get_logger(__name__)


class KeyValueStore(Protocol):
    """Minimal string key-value interface (localStorage-shaped)."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryStore:
    """In-process store."""

    def __init__(self, initial: Optional[dict] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class FileStore:
    """
    JSON file holding a flat {key: value} mapping.

    The whole file is rewritten on every set, the way a browser flushes
    its origin storage.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read_all(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Unexpected storage layout in {self.path}")
        return data

    def _write_all(self, data: dict) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise StorageError(f"Cannot write {self.path}: {e}") from e

    def get(self, key: str) -> Optional[str]:
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def delete(self, key: str) -> None:
        data = self._read_all()
        if data.pop(key, None) is not None:
            self._write_all(data)


class RedisStore:
    """Upstash Redis (sync REST client) backend."""

    def __init__(self, client) -> None:
        self.client = client

    @classmethod
    def from_credentials(cls, url: str, token: str) -> "RedisStore":
        if not url or not token:
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")
        return cls(Redis(url=url, token=token))

    def get(self, key: str) -> Optional[str]:
        try:
            value = self.client.get(key)
        except Exception as e:
            raise StorageError(f"Redis GET failed: {e}") from e
        if value is None:
            return None
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value if isinstance(value, str) else json.dumps(value)

    def set(self, key: str, value: str) -> None:
        try:
            self.client.set(key, value)
        except Exception as e:
            raise StorageError(f"Redis SET failed: {e}") from e

    def delete(self, key: str) -> None:
        try:
            self.client.delete(key)
        except Exception as e:
            raise StorageError(f"Redis DEL failed: {e}") from e


class StorageKeys:
    """Key names in the persistent store."""

    CART = "stonearts-cart"

    @staticmethod
    def cart_key(settings: Optional[Settings] = None) -> str:
        return settings.cart_storage_key if settings else StorageKeys.CART


def get_store(settings: Settings) -> KeyValueStore:
    """
    Build the configured backend.

    CART_BACKEND selects memory | file | redis; unknown values fall back to
    memory with a warning.
    """
    backend = settings.cart_backend
    if backend == "file":
        return FileStore(settings.cart_file_path)
    if backend == "redis":
        return RedisStore.from_credentials(settings.redis_url, settings.redis_token)
    if backend != "memory":
        logger.warning(f"Unknown CART_BACKEND '{backend}', using in-memory storage")
    return MemoryStore()
