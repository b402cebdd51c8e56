"""pylocalstate - Reactive values persisted in a key-value store."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pylocalstate")
except PackageNotFoundError:
    __version__ = "0+local"
from pylocalstate._constants import ABSENT, Absent
from pylocalstate.binding import Apply, ReactiveBinding, bind, use_persisted_state
from pylocalstate.codec import JsonCodec, SerializationCodec
from pylocalstate.config import LocalStateConfig
from pylocalstate.events import BindingStatus, ChangeSource, ValueChange
from pylocalstate.exceptions import (
    BindingClosedError,
    DeserializationError,
    LocalStateConfigError,
    LocalStateError,
    SerializationError,
    StoreError,
)
from pylocalstate.stores import (
    JsonFileStore,
    KeyValueStore,
    MemoryStore,
    NamespacedStore,
    SqliteStore,
    open_store,
)

__all__ = [
    "__version__",
    "ABSENT",
    "Absent",
    "Apply",
    "BindingClosedError",
    "BindingStatus",
    "ChangeSource",
    "DeserializationError",
    "JsonCodec",
    "JsonFileStore",
    "KeyValueStore",
    "LocalStateConfig",
    "LocalStateConfigError",
    "LocalStateError",
    "MemoryStore",
    "NamespacedStore",
    "ReactiveBinding",
    "SerializationCodec",
    "SerializationError",
    "SqliteStore",
    "StoreError",
    "ValueChange",
    "bind",
    "open_store",
    "use_persisted_state",
]
