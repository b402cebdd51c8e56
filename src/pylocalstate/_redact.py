"""Helpers for safe debug logging.

Stored records are arbitrary user data and can be large.  These helpers
shorten them before they reach DEBUG logs.
"""

from __future__ import annotations

from typing import Any

from pylocalstate._constants import ABSENT

DEFAULT_PREVIEW_LENGTH = 120


def preview_for_log(value: Any, *, max_string: int = DEFAULT_PREVIEW_LENGTH) -> str:
    """Return a short printable form of *value* suitable for debug logs.

    ``ABSENT`` renders as ``<absent>``; ``None`` is a stored JSON ``null``
    and renders as ``None``.
    """
    if value is ABSENT:
        return "<absent>"

    text = value if isinstance(value, str) else repr(value)
    if len(text) > max_string:
        return f"{text[:max_string]}…<truncated {len(text) - max_string} chars>"
    return text
