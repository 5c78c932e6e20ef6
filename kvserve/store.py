"""Thread-safe in-memory keyspace holding strings, lists, sets and hashes."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Iterable, Optional

from kvserve.glob import matches_glob


class DataType(IntEnum):
    """Kind of value stored under a key."""

    STRING = 0
    LIST = 1
    SET = 2
    HASH = 3
    ZSET = 4


class WrongTypeError(Exception):
    """Raised when an operation targets a key that holds another kind of value."""

    def __init__(self, key: str, expected: DataType) -> None:
        super().__init__(f"key {key!r} does not hold a {expected.name.lower()}")
        self.key = key
        self.expected = expected


@dataclass
class StoredValue:
    """A stored value with its type and optional expiry instant."""

    data: Any
    data_type: DataType
    expires_at: Optional[float] = None

    def is_expired(self, now: float) -> bool:
        return self.expires_at is not None and now > self.expires_at


class Storage:
    """The keyspace, guarded by a lock so several connections can share it."""

    def __init__(self, clock: Optional[Callable[[], float]] = None) -> None:
        self._clock = clock or time.monotonic
        self._data: dict[str, StoredValue] = {}
        self._lock = threading.RLock()

    # -- generic keys -------------------------------------------------------

    def set_value(
        self,
        key: str,
        data: Any,
        data_type: DataType,
        ttl: Optional[float] = None,
    ) -> None:
        """Store ``data`` under ``key``, expiring after ``ttl`` seconds if given."""
        with self._lock:
            expires_at = None if ttl is None else self._clock() + ttl
            self._data[key] = StoredValue(data, data_type, expires_at)

    def _live(self, key: str) -> Optional[StoredValue]:
        value = self._data.get(key)
        if value is None:
            return None
        if value.is_expired(self._clock()):
            del self._data[key]
            return None
        return value

    def get_value(self, key: str) -> Optional[StoredValue]:
        """Return the value under ``key``, or None if it is missing or expired."""
        with self._lock:
            return self._live(key)

    def delete(self, key: str) -> bool:
        """Remove ``key``; return whether it was present."""
        with self._lock:
            return self._data.pop(key, None) is not None

    def exists(self, key: str) -> bool:
        with self._lock:
            return self._live(key) is not None

    def size(self) -> int:
        """Count the keys that have not expired."""
        with self._lock:
            now = self._clock()
            return sum(
                1
                for value in self._data.values()
                if value.expires_at is None or now < value.expires_at
            )

    def cleanup_expired(self) -> int:
        """Delete every expired key and return how many were removed."""
        with self._lock:
            now = self._clock()
            expired = [key for key, value in self._data.items() if value.is_expired(now)]
            for key in expired:
                del self._data[key]
            return len(expired)

    def flush_all(self) -> None:
        with self._lock:
            self._data = {}

    def key_type(self, key: str) -> Optional[DataType]:
        """Return the type of ``key``, or None when it does not exist."""
        with self._lock:
            value = self._live(key)
            return None if value is None else value.data_type

    def find_keys(self, pattern: str) -> list[str]:
        """Return the unexpired keys matching the glob ``pattern``."""
        with self._lock:
            now = self._clock()
            return [
                key
                for key, value in self._data.items()
                if not value.is_expired(now) and matches_glob(pattern, key)
            ]

    def _container(self, key: str, data_type: DataType, factory: Callable[[], Any]) -> Any:
        value = self._data.get(key)
        if value is None:
            container = factory()
            self._data[key] = StoredValue(container, data_type)
            return container
        if value.data_type is not data_type:
            raise WrongTypeError(key, data_type)
        return value.data

    def _existing(self, key: str, data_type: DataType) -> Any:
        """Return the container under ``key``, None if missing; raise on type mismatch."""
        value = self._data.get(key)
        if value is None:
            return None
        if value.data_type is not data_type:
            raise WrongTypeError(key, data_type)
        return value.data

    # -- lists --------------------------------------------------------------

    def push(self, key: str, elements: Iterable[str], left: bool) -> int:
        """Add ``elements`` at the head (in the given order) or at the tail; return the new length."""
        with self._lock:
            items: list[str] = self._container(key, DataType.LIST, list)
            new = list(elements)
            if left:
                items[:0] = new
            else:
                items.extend(new)
            return len(items)

    def pop(self, key: str, left: bool) -> Optional[str]:
        """Remove and return the head or tail element; None if there is none."""
        with self._lock:
            value = self._data.get(key)
            if value is None or value.data_type is not DataType.LIST or not value.data:
                return None
            items: list[str] = value.data
            element = items.pop(0) if left else items.pop()
            if not items:
                del self._data[key]
            return element

    def list_length(self, key: str) -> int:
        with self._lock:
            items = self._existing(key, DataType.LIST)
            return 0 if items is None else len(items)

    def list_range(self, key: str, start: int, stop: int) -> list[str]:
        """Return elements ``start`` to ``stop`` inclusive; negative indexes count from the end."""
        with self._lock:
            items = self._existing(key, DataType.LIST)
            if not items:
                return []
            length = len(items)
            if start < 0:
                start += length
            if stop < 0:
                stop += length
            start = max(start, 0)
            stop = min(stop, length - 1)
            if start > stop:
                return []
            return items[start : stop + 1]

    # -- sets ---------------------------------------------------------------

    def add_to_set(self, key: str, members: Iterable[str]) -> int:
        """Add ``members`` and return how many were not already present."""
        with self._lock:
            current: set[str] = self._container(key, DataType.SET, set)
            before = len(current)
            current.update(members)
            return len(current) - before

    def set_members(self, key: str) -> list[str]:
        with self._lock:
            current = self._existing(key, DataType.SET)
            return [] if current is None else list(current)

    def is_set_member(self, key: str, member: str) -> bool:
        with self._lock:
            value = self._data.get(key)
            if value is None or value.data_type is not DataType.SET:
                return False
            return member in value.data

    # -- hashes -------------------------------------------------------------

    def hash_set(self, key: str, field: str, value: str) -> bool:
        """Set ``field``; return True if it is new. A non-hash key is left untouched."""
        with self._lock:
            try:
                fields: dict[str, str] = self._container(key, DataType.HASH, dict)
            except WrongTypeError:
                return False
            is_new = field not in fields
            fields[field] = value
            return is_new

    def hash_get(self, key: str, field: str) -> Optional[str]:
        with self._lock:
            stored = self._data.get(key)
            if stored is None or stored.data_type is not DataType.HASH:
                return None
            return stored.data.get(field)

    def hash_get_all(self, key: str) -> dict[str, str]:
        """Return a copy of every field of the hash; empty when the key is missing."""
        with self._lock:
            fields = self._existing(key, DataType.HASH)
            return {} if fields is None else dict(fields)