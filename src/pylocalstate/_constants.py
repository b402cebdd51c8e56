"""Internal constants shared across the library."""

from __future__ import annotations

import enum
from typing import Final, Literal

DEFAULT_BACKEND = "file"
DEFAULT_FILE_PATH = ".pylocalstate.json"
DEFAULT_SQLITE_PATH = ".pylocalstate.sqlite3"
NAMESPACE_SEPARATOR = ":"

BACKENDS: frozenset[str] = frozenset({"memory", "file", "sqlite"})


class _Absent(enum.Enum):
    """Single-member enum backing the :data:`ABSENT` marker."""

    ABSENT = "ABSENT"

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT: Final = _Absent.ABSENT
"""Absence marker: "no value / delete the record".

Distinct from ``None``, which is an ordinary JSON ``null`` and is stored.
"""

Absent = Literal[_Absent.ABSENT]
