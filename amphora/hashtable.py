"""A string-keyed open-addressing hash table using 32-bit FNV-1a."""

from __future__ import annotations

from collections.abc import Iterator, MutableMapping
from dataclasses import dataclass
from typing import Any

FNV_OFFSET = 0x811C9DC5
FNV_PRIME = 0x01000193
INITIAL_SIZE = 8
MAX_KEY_LEN = 32
_KEY_LIMIT = MAX_KEY_LEN - 2
_MASK32 = 0xFFFFFFFF


class TableFullError(Exception):
    """Raised when no free bucket can be found for a key."""


def fnv1a_hash(key: str | None) -> int:
    """Return the 32-bit FNV-1a hash of ``key``; ``None`` hashes to 0."""
    if key is None:
        return 0
    h = FNV_OFFSET
    for byte in key.encode("utf-8"):
        h ^= byte
        h = (h * FNV_PRIME) & _MASK32
    return h


@dataclass
class _Entry:
    key: str
    hash: int
    value: Any
    deleted: bool = False


class HashTable(MutableMapping):
    """Mapping of short strings to values with linear probing.

    The table starts with eight buckets and doubles once it is 70% full.
    Keys hold at most 30 characters.
    """

    def __init__(self) -> None:
        self._buckets: list[_Entry | None] = [None] * INITIAL_SIZE
        self._count = 0

    @staticmethod
    def _check_key(key: object) -> str:
        if not isinstance(key, str):
            raise TypeError(f"keys must be str, not {type(key).__name__}")
        if len(key) > _KEY_LIMIT:
            raise ValueError(f"key {key!r} is longer than {_KEY_LIMIT} characters")
        return key

    def _probe_order(self, h: int) -> Iterator[int]:
        size = len(self._buckets)
        start = h & (size - 1)
        for step in range(size):
            yield (start + step) % size

    def _find(self, key: str) -> int | None:
        h = fnv1a_hash(key)
        for i in self._probe_order(h):
            entry = self._buckets[i]
            if entry is None:
                return None
            if not entry.deleted and entry.hash == h and entry.key == key:
                return i
        return None

    def _grow(self) -> None:
        live = [e for e in self._buckets if e is not None and not e.deleted]
        self._buckets = [None] * (len(self._buckets) * 2)
        self._count = 0
        for entry in live:
            self._insert(entry.key, entry.value)

    def _insert(self, key: str, value: Any) -> None:
        h = fnv1a_hash(key)
        free: int | None = None
        for i in self._probe_order(h):
            entry = self._buckets[i]
            if entry is None:
                if free is None:
                    free = i
                break
            if entry.deleted:
                if free is None:
                    free = i
                continue
            if entry.hash == h and entry.key == key:
                entry.value = value
                return
        if free is None:
            raise TableFullError(f"Table full, cannot accept key {key}")
        self._buckets[free] = _Entry(key, h, value)
        self._count += 1

    def __getitem__(self, key: str) -> Any:
        i = self._find(self._check_key(key))
        if i is None:
            raise KeyError(f"Key {key} does not exist in table")
        entry = self._buckets[i]
        assert entry is not None
        return entry.value

    def __setitem__(self, key: str, value: Any) -> None:
        key = self._check_key(key)
        if self._count >= (len(self._buckets) * 7) // 10:
            self._grow()
        self._insert(key, value)

    def __delitem__(self, key: str) -> None:
        i = self._find(self._check_key(key))
        if i is None:
            raise KeyError(f"Key {key} does not exist in table")
        entry = self._buckets[i]
        assert entry is not None
        entry.deleted = True
        self._count -= 1

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str) or len(key) > _KEY_LIMIT:
            return False
        return self._find(key) is not None

    def __iter__(self) -> Iterator[str]:
        for entry in self._buckets:
            if entry is not None and not entry.deleted:
                yield entry.key

    def __len__(self) -> int:
        return self._count

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored for ``key`` or ``default``."""
        try:
            return self[key]
        except KeyError:
            return default

    def capacity(self) -> int:
        """Return the current number of buckets."""
        return len(self._buckets)