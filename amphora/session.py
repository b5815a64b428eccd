"""In-memory key/value data that lasts for one game session."""

from __future__ import annotations

from amphora.hashtable import HashTable


class SessionData:
    """Integer values stored by short string keys for the current session."""

    def __init__(self) -> None:
        self._table = HashTable()

    def get(self, key: str) -> int:
        """Return the value stored for ``key``, or 0 if there is none."""
        return self._table.get(key, 0)

    def store(self, key: str, value: int) -> None:
        """Store ``value`` under ``key``."""
        self._table[key] = int(value)

    def delete(self, key: str) -> None:
        """Remove ``key``; raises ``KeyError`` if it is not stored."""
        del self._table[key]

    def __contains__(self, key: object) -> bool:
        return key in self._table

    def __len__(self) -> int:
        return len(self._table)