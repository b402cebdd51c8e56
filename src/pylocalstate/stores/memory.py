"""Process-scoped in-memory store."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping

from pylocalstate.exceptions import StoreError

_logger = logging.getLogger(__name__)


class MemoryStore:
    """Dict-backed store whose records live as long as the instance.

    The session-storage counterpart of the durable stores: useful for tests
    and for values that should survive re-attachment but not a restart.

    Parameters
    ----------
    initial : Mapping[str, str] or None
        Records to seed the store with.
    capacity : int or None
        Maximum total length (in characters) of all keys and records.
        Writes that would exceed it raise :class:`StoreError`, the same way
        a browser storage quota rejects them.  ``None`` means unbounded.
    """

    def __init__(self, initial: Mapping[str, str] | None = None, *, capacity: int | None = None) -> None:
        if capacity is not None and capacity < 0:
            raise ValueError("capacity must be >= 0")
        self._records: dict[str, str] = dict(initial or {})
        self._capacity = capacity

    def _used(self) -> int:
        return sum(len(k) + len(v) for k, v in self._records.items())

    def get(self, key: str) -> str | None:
        return self._records.get(key)

    def set(self, key: str, value: str) -> None:
        if not isinstance(value, str):
            raise StoreError(f"Records must be str, got {type(value).__name__}", key=key, operation="set")
        if self._capacity is not None:
            existing = self._records.get(key)
            freed = len(key) + len(existing) if existing is not None else 0
            needed = self._used() - freed + len(key) + len(value)
            if needed > self._capacity:
                raise StoreError(
                    f"Quota exceeded writing {key!r}: {needed} > {self._capacity} chars",
                    key=key,
                    operation="set",
                )
        self._records[key] = value

    def remove(self, key: str) -> None:
        self._records.pop(key, None)

    def clear(self) -> None:
        _logger.debug("Clearing %d in-memory records", len(self._records))
        self._records.clear()

    def keys(self) -> list[str]:
        return list(self._records)

    def __contains__(self, key: object) -> bool:
        return key in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._records))
