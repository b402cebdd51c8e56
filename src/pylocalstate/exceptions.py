"""Custom exception hierarchy for pylocalstate."""

from __future__ import annotations


class LocalStateError(Exception):
    """Base exception for all pylocalstate errors."""


class LocalStateConfigError(LocalStateError):
    """Invalid or missing configuration."""


class SerializationError(LocalStateError):
    """A value cannot be represented in the codec's wire format."""


class DeserializationError(LocalStateError):
    """A stored record cannot be decoded with the current codec.

    Usually means the record is corrupted or was written by a foreign
    codec.  The binding never falls back to its default value when this
    is raised, so the stored data is left for inspection.
    """

    def __init__(self, message: str, *, key: str = "", raw: str | None = None) -> None:
        self.key = key
        self.raw = raw
        super().__init__(message)


class StoreError(LocalStateError):
    """The underlying key-value store rejected a get/set/remove."""

    def __init__(
        self,
        message: str,
        *,
        key: str = "",
        operation: str = "",
    ) -> None:
        self.key = key
        self.operation = operation
        super().__init__(message)


class BindingClosedError(LocalStateError):
    """An update was issued on a binding that has been detached."""
