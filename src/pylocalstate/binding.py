"""Reactive binding between an observed value and a key-value store record.

A :class:`ReactiveBinding` owns one storage key.  On creation it reads the
record (or initializes it from a default), and every update afterwards is
written through to the store before observers are notified, so the observed
value and the stored record never disagree from the outside.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pylocalstate._constants import ABSENT, Absent
from pylocalstate._redact import preview_for_log
from pylocalstate.codec import JsonCodec, SerializationCodec
from pylocalstate.events import BindingStatus, ChangeSource, ValueChange, validate_key
from pylocalstate.exceptions import (
    BindingClosedError,
    DeserializationError,
    SerializationError,
    StoreError,
)
from pylocalstate.stores.base import KeyValueStore

_logger = logging.getLogger(__name__)

T = TypeVar("T")

Observer = Callable[[ValueChange], None]


@dataclass(frozen=True, slots=True)
class Apply(Generic[T]):
    """Functional update: ``binding.set(Apply(fn))`` stores ``fn(current)``.

    Wrapping the function keeps "replace with this callable" and "apply
    this callable to the previous value" distinguishable when the value
    itself is callable.
    """

    fn: Callable[[T | Absent], T | Absent]


class ReactiveBinding(Generic[T]):
    """Bind one storage key to an observed in-memory value.

    Creating the binding reads the record for *key*.  If one exists it is
    decoded and becomes the value; a record that fails to decode raises
    :class:`DeserializationError` instead of falling back to the default.
    Otherwise the default is resolved once (``initial`` as-is, or by
    calling ``default_factory``) and written through, unless it is
    :data:`ABSENT`.

    Parameters
    ----------
    store : KeyValueStore
        Store holding the record.  Never assumed to be exclusively owned.
    key : str
        Non-empty storage key.
    initial : T or ABSENT
        Literal default used when no record exists.
    default_factory : callable or None
        Zero-argument callable producing the default.  Mutually exclusive
        with ``initial``; only called when no record exists.
    codec : SerializationCodec or None
        Defaults to :class:`~pylocalstate.codec.JsonCodec`.
    observer : callable or None
        Called with a :class:`ValueChange` after every transition,
        including the one performed at creation.

    Usage::

        with ReactiveBinding(store, "name", initial="Test1") as name:
            name.set("New Test1")
            name.update(str.upper)
            name.clear()
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str,
        initial: T | Absent = ABSENT,
        *,
        default_factory: Callable[[], T | Absent] | None = None,
        codec: SerializationCodec | None = None,
        observer: Observer | None = None,
    ) -> None:
        if initial is not ABSENT and default_factory is not None:
            raise TypeError("pass either initial or default_factory, not both")

        self._store = store
        self._key = validate_key(key)
        self._codec: SerializationCodec = codec or JsonCodec()
        self._observers: list[Observer] = [observer] if observer is not None else []
        self._status = BindingStatus.UNINITIALIZED
        self._value: T | Absent = ABSENT

        self._initialize(initial, default_factory)

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    def __enter__(self) -> ReactiveBinding[T]:
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"ReactiveBinding(key={self._key!r}, status={self._status.value}, value={preview_for_log(self._value)})"

    # ------------------------------------------------------------------
    # Observed state
    # ------------------------------------------------------------------

    @property
    def key(self) -> str:
        return self._key

    @property
    def store(self) -> KeyValueStore:
        return self._store

    @property
    def value(self) -> T | Absent:
        """Current observed value, or :data:`ABSENT` when cleared."""
        return self._value

    @property
    def status(self) -> BindingStatus:
        return self._status

    @property
    def closed(self) -> bool:
        return self._status == BindingStatus.DETACHED

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register *observer*; returns a function that unregisters it."""
        self._ensure_attached()
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def set(self, value: T | Apply[T] | Absent) -> None:
        """Write *value* through to the store and notify observers.

        ``Apply(fn)`` stores ``fn(current_value)``.  :data:`ABSENT` removes
        the record.  Anything else, callables included, is stored as-is.
        Exactly one store write or removal is issued and the store is
        never read.  On failure the observed value is left unchanged.
        """
        self._ensure_attached()
        resolved = value.fn(self._value) if isinstance(value, Apply) else value
        previous = self._value

        if resolved is ABSENT:
            self._call_store("remove", self._store.remove, self._key)
            self._value = ABSENT
            self._status = BindingStatus.CLEARED
            source = ChangeSource.CLEAR
        else:
            raw = self._encode(resolved)
            self._call_store("set", self._store.set, self._key, raw)
            self._value = resolved
            self._status = BindingStatus.SYNCED
            source = ChangeSource.UPDATE

        _logger.debug("Binding %s -> %s (%s)", self._key, self._status.value, source.value)
        self._notify(source, previous)

    def update(self, fn: Callable[[T | Absent], T | Absent]) -> None:
        """Store ``fn(current_value)``; shorthand for ``set(Apply(fn))``."""
        self.set(Apply(fn))

    def clear(self) -> None:
        """Remove the record; the observed value becomes :data:`ABSENT`."""
        self.set(ABSENT)

    def refresh(self) -> T | Absent:
        """Re-read the record, e.g. after another binding wrote the same key.

        Bindings are never told about external writes; this is the only
        way to pick them up.  Observers are notified if the value changed.
        """
        self._ensure_attached()
        previous, previous_status = self._value, self._status
        raw = self._call_store("get", self._store.get, self._key)
        if raw is None:
            self._value = ABSENT
            self._status = BindingStatus.CLEARED
        else:
            self._value = self._decode(raw)
            self._status = BindingStatus.SYNCED

        if self._status != previous_status or self._value != previous:
            self._notify(ChangeSource.STORED, previous)
        return self._value

    def close(self) -> None:
        """Detach the binding.  The stored record is left untouched."""
        if self._status == BindingStatus.DETACHED:
            return
        self._observers.clear()
        self._status = BindingStatus.DETACHED
        _logger.debug("Binding %s detached", self._key)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _initialize(
        self,
        initial: T | Absent,
        default_factory: Callable[[], T | Absent] | None,
    ) -> None:
        raw = self._call_store("get", self._store.get, self._key)
        if raw is not None:
            self._value = self._decode(raw)
            self._status = BindingStatus.SYNCED
            _logger.debug("Binding %s read existing record: %s", self._key, preview_for_log(raw))
            self._notify(ChangeSource.STORED, ABSENT)
            return

        resolved = default_factory() if default_factory is not None else initial
        if resolved is ABSENT:
            self._status = BindingStatus.CLEARED
            _logger.debug("Binding %s has no record and no default", self._key)
        else:
            self._call_store("set", self._store.set, self._key, self._encode(resolved))
            self._value = resolved
            self._status = BindingStatus.SYNCED
            _logger.debug("Binding %s initialized from default", self._key)
        self._notify(ChangeSource.INITIAL, ABSENT)

    def _ensure_attached(self) -> None:
        if self._status == BindingStatus.DETACHED:
            raise BindingClosedError(f"Binding for {self._key!r} has been closed")

    def _call_store(self, operation: str, fn: Callable[..., Any], *args: Any) -> Any:
        try:
            return fn(*args)
        except StoreError:
            raise
        except Exception as exc:
            raise StoreError(
                f"Store {operation} failed for {self._key!r}: {exc}",
                key=self._key,
                operation=operation,
            ) from exc

    def _encode(self, value: T) -> str:
        # Custom codecs may raise anything; callers only ever see SerializationError.
        try:
            return self._codec.encode(value)
        except Exception as exc:
            raise SerializationError(f"Cannot encode value for {self._key!r}: {exc}") from exc

    def _decode(self, raw: str) -> T:
        try:
            value: T = self._codec.decode(raw)
        except Exception as exc:
            raise DeserializationError(
                f"Cannot decode record {self._key!r}: {exc}",
                key=self._key,
                raw=preview_for_log(raw),
            ) from exc
        return value

    def _notify(self, source: ChangeSource, previous: T | Absent) -> None:
        if not self._observers:
            return
        change = ValueChange(
            key=self._key,
            source=source,
            status=self._status,
            value=self._value,
            previous=previous,
        )
        for observer in list(self._observers):
            try:
                observer(change)
            except Exception:
                _logger.warning("Observer %r failed for %s", observer, self._key, exc_info=True)


def bind(
    store: KeyValueStore,
    key: str,
    initial: T | Absent = ABSENT,
    *,
    default_factory: Callable[[], T | Absent] | None = None,
    codec: SerializationCodec | None = None,
    observer: Observer | None = None,
) -> ReactiveBinding[T]:
    """Create a :class:`ReactiveBinding`; see its docstring for the arguments."""
    return ReactiveBinding(
        store,
        key,
        initial,
        default_factory=default_factory,
        codec=codec,
        observer=observer,
    )


def use_persisted_state(
    store: KeyValueStore,
    key: str,
    initial: T | Absent = ABSENT,
    *,
    default_factory: Callable[[], T | Absent] | None = None,
    codec: SerializationCodec | None = None,
    observer: Observer | None = None,
) -> tuple[T | Absent, Callable[[T | Apply[T] | Absent], None]]:
    """Hook-style entry point returning ``(current_value, set_value)``.

    ``set_value`` accepts a value, :class:`Apply` or :data:`ABSENT`.  The
    host should re-read the value from the observer's :class:`ValueChange`
    events, since the returned ``current_value`` is a snapshot.
    """
    binding = bind(store, key, initial, default_factory=default_factory, codec=codec, observer=observer)
    return binding.value, binding.set
