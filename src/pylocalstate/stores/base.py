"""Key-value store interface consumed by bindings."""

from __future__ import annotations

from typing import Protocol


class KeyValueStore(Protocol):
    """Structural store interface.

    Each call is a single synchronous operation whose effect is visible to
    subsequent calls on the same store handle.  Implementations raise
    :class:`~pylocalstate.exceptions.StoreError` when they reject an
    operation; bindings wrap anything else they raise into one.
    """

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...
