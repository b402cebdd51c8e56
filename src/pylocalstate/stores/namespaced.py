"""Key prefixing so several applications can share one store."""

from __future__ import annotations

from pylocalstate._constants import NAMESPACE_SEPARATOR
from pylocalstate.events import validate_key
from pylocalstate.exceptions import StoreError
from pylocalstate.stores.base import KeyValueStore


class NamespacedStore:
    """Wrap *inner* so every key is stored as ``"<namespace>:<key>"``."""

    def __init__(self, inner: KeyValueStore, namespace: str) -> None:
        self._inner = inner
        self._namespace = validate_key(namespace)
        self._prefix = f"{self._namespace}{NAMESPACE_SEPARATOR}"

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def inner(self) -> KeyValueStore:
        return self._inner

    def _qualify(self, key: str) -> str:
        return f"{self._prefix}{key}"

    def get(self, key: str) -> str | None:
        return self._inner.get(self._qualify(key))

    def set(self, key: str, value: str) -> None:
        self._inner.set(self._qualify(key), value)

    def remove(self, key: str) -> None:
        self._inner.remove(self._qualify(key))

    def close(self) -> None:
        close = getattr(self._inner, "close", None)
        if close is not None:
            close()

    def keys(self) -> list[str]:
        list_keys = getattr(self._inner, "keys", None)
        if list_keys is None:
            raise StoreError(f"{type(self._inner).__name__} cannot enumerate keys", operation="keys")
        return [k[len(self._prefix) :] for k in list_keys() if k.startswith(self._prefix)]
