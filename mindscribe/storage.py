"""Key-value persistence layer for MindScribe collections.

Every collection (notes, tasks, events, ...) is stored whole under a
namespaced key as a JSON document. The adapter never raises to its
callers: loads fall back to a default, saves report success as a bool.
Backend failures are logged and counted, and the in-memory state of the
caller is left untouched.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Optional, Protocol

import redis

from mindscribe.metrics import STORAGE_BYTES, STORAGE_OPERATIONS

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = "mindscribe_"
BYTES_PER_CHAR = 2  # values are measured as UTF-16, like browser storage


class StorageBackend(Protocol):
    """Minimal string key-value store the adapter writes through."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...

    def keys(self, prefix: str) -> list[str]: ...


class QuotaExceededError(Exception):
    """Raised when a write would push the namespace over its quota."""


# ---------------------------------------------------------------------------
# Backends
# ---------------------------------------------------------------------------


class MemoryBackend:
    """Process-local backend. Nothing survives a restart."""

    def __init__(self, data: Optional[dict[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(data or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self, prefix: str) -> list[str]:
        return [k for k in self._data if k.startswith(prefix)]


class JsonFileBackend:
    """Stores all keys in a single JSON document on disk."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)
        self._data: dict[str, str] = {}
        self._load()

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> None:
        """Read the document from disk. A missing or broken file starts empty."""
        if not self._path.exists():
            logger.info("No storage file found at %s — starting fresh", self._path)
            return
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Failed to read %s: %s — starting fresh", self._path, exc)
            return
        if not isinstance(raw, dict):
            logger.error("Unexpected document in %s — starting fresh", self._path)
            return
        self._data = {str(k): v for k, v in raw.items() if isinstance(v, str)}
        logger.info("Loaded %d keys from %s", len(self._data), self._path)

    def _flush(self) -> None:
        """Write the whole document atomically (temp file + rename)."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=self._path.name, suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(self._data, fh, indent=2)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        previous = self._data.get(key)
        self._data[key] = value
        try:
            self._flush()
        except OSError:
            # Keep the in-memory document in step with what is on disk
            if previous is None:
                self._data.pop(key, None)
            else:
                self._data[key] = previous
            raise

    def delete(self, key: str) -> None:
        previous = self._data.pop(key, None)
        if previous is None:
            return
        try:
            self._flush()
        except OSError:
            self._data[key] = previous
            raise

    def keys(self, prefix: str) -> list[str]:
        return [k for k in self._data if k.startswith(prefix)]


class RedisBackend:
    """Synchronous Redis backend."""

    def __init__(self, redis_url: str, client: Optional[redis.Redis] = None) -> None:
        self._redis_url = redis_url
        self._client = client or redis.Redis.from_url(redis_url, decode_responses=True)

    def ping(self) -> bool:
        """Whether the Redis server answers."""
        try:
            return bool(self._client.ping())
        except redis.RedisError as e:
            logger.warning("Redis ping failed: %s", e)
            return False

    def get(self, key: str) -> Optional[str]:
        return self._client.get(key)

    def set(self, key: str, value: str) -> None:
        self._client.set(key, value)

    def delete(self, key: str) -> None:
        self._client.delete(key)

    def keys(self, prefix: str) -> list[str]:
        found: list[str] = []
        cursor: int | str = 0
        while True:
            cursor, batch = self._client.scan(cursor, match=f"{prefix}*", count=100)
            found.extend(batch)
            if cursor == 0:
                break
        return found


# ---------------------------------------------------------------------------
# Adapter
# ---------------------------------------------------------------------------


class PersistenceAdapter:
    """Load/save boundary between the managers and a storage backend."""

    def __init__(
        self,
        backend: StorageBackend,
        prefix: str = DEFAULT_PREFIX,
        quota_bytes: int = 0,
    ) -> None:
        self._backend = backend
        self._prefix = prefix
        self._quota_bytes = quota_bytes
        self.last_error: Optional[str] = None

    @property
    def backend(self) -> StorageBackend:
        return self._backend

    @property
    def prefix(self) -> str:
        return self._prefix

    def key_for(self, name: str) -> str:
        """Namespaced backend key for a collection name."""
        return f"{self._prefix}{name}"

    def load(self, name: str, default: Any = None) -> Any:
        """Return the stored value, or ``default`` if absent or undecodable."""
        key = self.key_for(name)
        try:
            raw = self._backend.get(key)
        except Exception as e:
            logger.warning("Storage read of %s failed: %s", key, e)
            STORAGE_OPERATIONS.labels(operation="load", outcome="error").inc()
            return default

        if raw is None:
            STORAGE_OPERATIONS.labels(operation="load", outcome="missing").inc()
            return default

        try:
            value = json.loads(raw)
        except (json.JSONDecodeError, TypeError) as e:
            logger.error("Stored value for %s is corrupt: %s", key, e)
            STORAGE_OPERATIONS.labels(operation="load", outcome="error").inc()
            return default

        STORAGE_OPERATIONS.labels(operation="load", outcome="ok").inc()
        return value

    def save(self, name: str, value: Any) -> bool:
        """Serialize and store ``value``. Returns False instead of raising."""
        key = self.key_for(name)
        try:
            raw = json.dumps(value, ensure_ascii=False)
            if self._quota_bytes:
                self._check_quota(key, raw)
            self._backend.set(key, raw)
        except Exception as e:
            self.last_error = f"{type(e).__name__}: {e}"
            logger.warning("Failed to save %s: %s", key, self.last_error)
            STORAGE_OPERATIONS.labels(operation="save", outcome="error").inc()
            return False

        self.last_error = None
        STORAGE_OPERATIONS.labels(operation="save", outcome="ok").inc()
        return True

    def remove(self, name: str) -> bool:
        """Delete one collection. Best effort."""
        key = self.key_for(name)
        try:
            self._backend.delete(key)
        except Exception as e:
            logger.warning("Failed to remove %s: %s", key, e)
            STORAGE_OPERATIONS.labels(operation="remove", outcome="error").inc()
            return False
        STORAGE_OPERATIONS.labels(operation="remove", outcome="ok").inc()
        return True

    def clear_all(self) -> bool:
        """Delete every key under the prefix, leaving other data alone."""
        try:
            keys = self._backend.keys(self._prefix)
            for key in keys:
                self._backend.delete(key)
        except Exception as e:
            logger.warning("Failed to clear storage: %s", e)
            STORAGE_OPERATIONS.labels(operation="clear", outcome="error").inc()
            return False
        logger.info("Cleared %d keys under %r", len(keys), self._prefix)
        STORAGE_OPERATIONS.labels(operation="clear", outcome="ok").inc()
        return True

    def usage(self) -> int:
        """Approximate bytes used by all values under the prefix (0 if unreadable)."""
        try:
            total = self._measure()
        except Exception as e:
            logger.warning("Failed to measure storage usage: %s", e)
            return 0
        STORAGE_BYTES.set(total)
        return total

    def _measure(self) -> int:
        total = 0
        for key in self._backend.keys(self._prefix):
            value = self._backend.get(key)
            if value is not None:
                total += len(value) * BYTES_PER_CHAR
        return total

    @property
    def quota_bytes(self) -> int:
        return self._quota_bytes

    def _check_quota(self, key: str, raw: str) -> None:
        current = self._backend.get(key)
        projected = self._measure() + (len(raw) - len(current or "")) * BYTES_PER_CHAR
        if projected > self._quota_bytes:
            raise QuotaExceededError(
                f"{projected} bytes would exceed quota of {self._quota_bytes}"
            )
