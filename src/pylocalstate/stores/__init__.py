"""Key-value store protocol and the bundled store implementations."""

from __future__ import annotations

import logging

from pylocalstate.config import LocalStateConfig
from pylocalstate.stores.base import KeyValueStore
from pylocalstate.stores.file import JsonFileStore
from pylocalstate.stores.memory import MemoryStore
from pylocalstate.stores.namespaced import NamespacedStore
from pylocalstate.stores.sqlite import SqliteStore

_logger = logging.getLogger(__name__)


def open_store(config: LocalStateConfig) -> KeyValueStore:
    """Build the store described by *config*."""
    store: KeyValueStore
    if config.backend == "memory":
        store = MemoryStore()
    elif config.backend == "sqlite":
        store = SqliteStore(config.resolved_path)
    else:
        store = JsonFileStore(config.resolved_path)

    if config.namespace:
        store = NamespacedStore(store, config.namespace)

    _logger.debug("Opened %s store (namespace=%s)", config.backend, config.namespace)
    return store


__all__ = [
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
    "NamespacedStore",
    "SqliteStore",
    "open_store",
]
