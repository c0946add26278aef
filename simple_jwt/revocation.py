"""
Revocation marker storage.

A store only needs three operations. Keys are opaque strings and every entry
carries its own lifetime, so no store has to support iteration or ordering.
"""

import hashlib
import json
import os
import tempfile
import threading
import time
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Protocol, Tuple, Union

import redis

from .errors import RevocationStoreError
from .logging import get_logger

Clock = Callable[[], float]


class RevocationStore(Protocol):
    """Key-value store holding self-expiring revocation markers."""

    def contains(self, key: str) -> bool: ...

    def save(self, key: str, value: int, expire_in_seconds: int) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryRevocationStore:
    """In-process store. Suitable for tests and single-process deployments.

    Expired markers read as absent and are purged on every ``save``.
    """

    def __init__(self, clock: Clock = time.time):
        self._clock = clock
        self._entries: Dict[str, Tuple[int, float]] = {}
        self._lock = threading.Lock()

    def contains(self, key: str) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and entry[1] > self._clock()

    def save(self, key: str, value: int, expire_in_seconds: int) -> None:
        with self._lock:
            now = self._clock()
            expired = [k for k, (_, expires_at) in self._entries.items() if expires_at <= now]
            for k in expired:
                del self._entries[k]

            if expire_in_seconds <= 0:
                self._entries.pop(key, None)
                return
            self._entries[key] = (value, now + expire_in_seconds)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class FilesystemRevocationStore:
    """One JSON file per marker under ``directory``.

    Reads never delete files. Expired and unreadable markers are swept by
    ``save`` at most once per ``sweep_interval`` seconds, under the same lock
    that guards writes, and each file's expiry is re-read right before it is
    unlinked. A marker file's mtime is set to its expiry so the sweep can skip
    live markers with a ``stat``.
    """

    def __init__(
        self,
        directory: Optional[Union[str, Path]] = None,
        clock: Clock = time.time,
        sweep_interval: float = 60.0,
    ):
        if directory is None:
            directory = Path(tempfile.gettempdir()) / "simple-jwt"
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._lock = threading.Lock()
        self._next_sweep = 0.0
        self.logger = get_logger("simple_jwt.revocation")

    def _path(self, key: str) -> Path:
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self.directory / f"{digest}.json"

    @staticmethod
    def _read_expiry(path: Path) -> float:
        data = json.loads(path.read_text(encoding="utf-8"))
        return float(data["expires_at"])

    def contains(self, key: str) -> bool:
        path = self._path(key)
        try:
            expires_at = self._read_expiry(path)
        except FileNotFoundError:
            return False
        except (ValueError, KeyError, TypeError) as e:
            self.logger.warning("Ignoring unreadable revocation marker", path=str(path), error=str(e))
            return False
        except OSError as e:
            self.logger.error("Error reading revocation marker", path=str(path), error=str(e))
            raise RevocationStoreError(str(e))

        return expires_at > self._clock()

    def save(self, key: str, value: int, expire_in_seconds: int) -> None:
        path = self._path(key)
        with self._lock:
            now = self._clock()
            try:
                if now >= self._next_sweep:
                    self._sweep(now)
                    self._next_sweep = now + self.sweep_interval

                if expire_in_seconds <= 0:
                    self._unlink(path)
                    return
                self._write(path, {"key": key, "value": value, "expires_at": now + expire_in_seconds})
            except OSError as e:
                self.logger.error("Error writing revocation marker", path=str(path), error=str(e))
                raise RevocationStoreError(str(e))

    def delete(self, key: str) -> None:
        path = self._path(key)
        with self._lock:
            try:
                self._unlink(path)
            except OSError as e:
                self.logger.error("Error deleting revocation marker", path=str(path), error=str(e))
                raise RevocationStoreError(str(e))

    def _write(self, path: Path, payload: Dict[str, Any]) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(payload, handle)
            os.utime(tmp_name, (payload["expires_at"], payload["expires_at"]))
            os.replace(tmp_name, path)
        except OSError:
            self._unlink(Path(tmp_name))
            raise

    def _sweep(self, now: float) -> None:
        removed = 0
        for path in self.directory.glob("*.json"):
            try:
                if path.stat().st_mtime > now or self._read_expiry(path) > now:
                    continue
            except FileNotFoundError:
                continue
            except (ValueError, KeyError, TypeError):
                pass
            self._unlink(path)
            removed += 1

        if removed:
            self.logger.debug("Swept revocation markers", removed=removed)

    @staticmethod
    def _unlink(path: Path) -> None:
        try:
            path.unlink()
        except FileNotFoundError:
            pass


class RedisRevocationStore:
    """Markers as redis keys with a native TTL."""

    def __init__(
        self,
        client: Optional[redis.Redis] = None,
        url: str = "redis://localhost:6379/0",
        prefix: str = "",
    ):
        self.redis = client if client is not None else redis.Redis.from_url(
            url,
            socket_connect_timeout=5,
            socket_timeout=5,
            health_check_interval=30
        )
        self.prefix = prefix
        self.logger = get_logger("simple_jwt.revocation.redis")

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def contains(self, key: str) -> bool:
        try:
            return bool(self.redis.exists(self._key(key)))
        except redis.RedisError as e:
            self.logger.error("Error reading revocation marker", error=str(e))
            raise RevocationStoreError(str(e))

    def save(self, key: str, value: int, expire_in_seconds: int) -> None:
        try:
            if expire_in_seconds <= 0:
                self.redis.delete(self._key(key))
                return
            self.redis.setex(self._key(key), expire_in_seconds, value)
        except redis.RedisError as e:
            self.logger.error("Error writing revocation marker", error=str(e))
            raise RevocationStoreError(str(e))

    def delete(self, key: str) -> None:
        try:
            self.redis.delete(self._key(key))
        except redis.RedisError as e:
            self.logger.error("Error deleting revocation marker", error=str(e))
            raise RevocationStoreError(str(e))

    def health_check(self) -> bool:
        """Check Redis health."""
        try:
            return bool(self.redis.ping())
        except redis.RedisError:
            return False
