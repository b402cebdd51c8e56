"""Change notifications delivered to binding observers.

Every transition of a binding's observed value is described by a
:class:`ValueChange`.  Observers receive it synchronously, after the store
has already accepted the write, so the event always describes durable state.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from pylocalstate._constants import ABSENT


def validate_key(value: str) -> str:
    """Validate a storage key and return it unchanged.

    Keys are used verbatim: ``" name"`` and ``"name"`` are different slots.
    """
    if not isinstance(value, str):
        raise TypeError(f"key must be a str, got {type(value).__name__}")
    if not value:
        raise ValueError("key must be non-empty")
    return value


class BindingStatus(StrEnum):
    UNINITIALIZED = "uninitialized"
    SYNCED = "synced"
    CLEARED = "cleared"
    DETACHED = "detached"


class ChangeSource(StrEnum):
    """What caused a value change."""

    STORED = "stored"  # existing record read at creation or refresh
    INITIAL = "initial"  # default resolved at creation
    UPDATE = "update"
    CLEAR = "clear"


class ValueChange(BaseModel):
    """A single transition of a binding's observed value."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="Storage key of the binding")
    source: ChangeSource
    status: BindingStatus
    value: Any = Field(default=ABSENT, description="Observed value after the change")
    previous: Any = Field(default=ABSENT, description="Observed value before the change")
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("key")
    @classmethod
    def _validate_key(cls, value: str) -> str:
        return validate_key(value)

    @property
    def cleared(self) -> bool:
        return self.value is ABSENT
