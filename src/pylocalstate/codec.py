"""Serialization between in-memory values and stored string records."""

from __future__ import annotations

import json
from typing import Any, Protocol

from pylocalstate._constants import ABSENT
from pylocalstate._redact import preview_for_log
from pylocalstate.exceptions import DeserializationError, SerializationError


class SerializationCodec(Protocol):
    """Structural codec interface used by bindings.

    Any object with these two methods can be passed as ``codec=``; the
    binding never inspects the wire format itself.
    """

    def encode(self, value: Any) -> str:
        ...

    def decode(self, raw: str) -> Any:
        ...


class JsonCodec:
    """JSON codec producing the same text as ``JSON.stringify``.

    Output is compact (no whitespace after separators) so a stored string
    ``"Test1"`` is the record ``"\\"Test1\\""``.  The format is part of the
    durable contract: changing options such as ``sort_keys`` only affects
    how new records are written, never how existing ones decode.

    Parameters
    ----------
    sort_keys : bool
        Emit object keys in sorted order.
    ensure_ascii : bool
        Escape all non-ASCII characters.
    """

    def __init__(self, *, sort_keys: bool = False, ensure_ascii: bool = False) -> None:
        self._sort_keys = sort_keys
        self._ensure_ascii = ensure_ascii

    def encode(self, value: Any) -> str:
        """Encode *value* as compact JSON text.

        Raises :class:`SerializationError` for the absence marker, NaN and
        infinities, cyclic containers, mappings with non-``str`` keys, and
        types JSON cannot represent.
        """
        if value is ABSENT:
            raise SerializationError("ABSENT is not encodable; remove the record instead")
        _reject_non_str_keys(value)
        try:
            return json.dumps(
                value,
                separators=(",", ":"),
                sort_keys=self._sort_keys,
                ensure_ascii=self._ensure_ascii,
                allow_nan=False,
            )
        except (TypeError, ValueError, RecursionError) as exc:
            raise SerializationError(f"Value of type {type(value).__name__} is not JSON-encodable: {exc}") from exc

    def decode(self, raw: str) -> Any:
        """Decode a JSON record.  Pure; raises :class:`DeserializationError`.

        ``NaN`` and ``Infinity`` are rejected like any other invalid JSON.
        """
        if not isinstance(raw, str):
            raise DeserializationError(f"Expected a str record, got {type(raw).__name__}")
        try:
            return json.loads(raw, parse_constant=_reject_constant)
        except json.JSONDecodeError as exc:
            raise DeserializationError(f"Invalid JSON record: {exc.msg} at position {exc.pos}", raw=raw) from exc
        except RecursionError as exc:
            raise DeserializationError("JSON record is nested too deeply", raw=preview_for_log(raw)) from exc


def _reject_constant(name: str) -> Any:
    raise DeserializationError(f"Invalid JSON record: non-standard constant {name}")


def _reject_non_str_keys(value: Any) -> None:
    """Raise :class:`SerializationError` if any nested mapping has a non-``str`` key.

    ``json.dumps`` would silently turn ``{1: "a"}`` into ``{"1": "a"}``.
    Walks iteratively; containers already visited are skipped so cycles are
    left for ``json.dumps`` to report.
    """
    stack = [value]
    seen: set[int] = set()
    while stack:
        item = stack.pop()
        if isinstance(item, dict):
            if id(item) in seen:
                continue
            seen.add(id(item))
            for key, child in item.items():
                if not isinstance(key, str):
                    raise SerializationError(f"Mapping keys must be str, got {type(key).__name__} key {key!r}")
                stack.append(child)
        elif isinstance(item, (list, tuple)):
            if id(item) in seen:
                continue
            seen.add(id(item))
            stack.extend(item)
