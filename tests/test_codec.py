from __future__ import annotations

import math

import pytest

from pylocalstate import ABSENT, DeserializationError, JsonCodec, SerializationError


def test_encode_matches_json_stringify() -> None:
    codec = JsonCodec()
    assert codec.encode("Test1") == '"Test1"'
    assert codec.encode({"a": [1, 2, None], "b": True}) == '{"a":[1,2,null],"b":true}'
    assert codec.encode(None) == "null"


def test_round_trip_preserves_structure() -> None:
    codec = JsonCodec()
    value = {"name": "Zoë", "tags": ["x", "y"], "nested": {"n": 1.5, "flag": False}}
    assert codec.decode(codec.encode(value)) == value


def test_non_ascii_kept_unless_ensure_ascii() -> None:
    assert JsonCodec().encode("Zoë") == '"Zoë"'
    assert JsonCodec(ensure_ascii=True).encode("Zoë") == '"Zo\\u00eb"'


def test_sort_keys_option() -> None:
    assert JsonCodec(sort_keys=True).encode({"b": 1, "a": 2}) == '{"a":2,"b":1}'


def test_encode_rejects_cycles() -> None:
    cyclic: list[object] = []
    cyclic.append(cyclic)
    with pytest.raises(SerializationError):
        JsonCodec().encode(cyclic)


@pytest.mark.parametrize("value", [object(), {1, 2}, b"bytes", math.nan, math.inf, ABSENT])
def test_encode_rejects_unrepresentable_values(value: object) -> None:
    with pytest.raises(SerializationError):
        JsonCodec().encode(value)


@pytest.mark.parametrize(
    "value",
    [{1: "a"}, {None: "a"}, {True: "a"}, {1.5: "a"}, {"outer": [{"ok": 1}, {2: "nested"}]}],
)
def test_encode_rejects_non_string_mapping_keys(value: object) -> None:
    with pytest.raises(SerializationError):
        JsonCodec().encode(value)


def test_serialization_error_chains_original_cause() -> None:
    with pytest.raises(SerializationError) as exc_info:
        JsonCodec().encode(object())
    assert isinstance(exc_info.value.__cause__, TypeError)


@pytest.mark.parametrize("raw", ["", "{", "not json", "'single'", "NaN", "Infinity", "-Infinity", "[1,NaN]"])
def test_decode_rejects_invalid_records(raw: str) -> None:
    with pytest.raises(DeserializationError):
        JsonCodec().decode(raw)


def test_decode_rejects_non_string_input() -> None:
    with pytest.raises(DeserializationError):
        JsonCodec().decode(b'"bytes"')  # type: ignore[arg-type]


def test_decode_rejects_deeply_nested_record() -> None:
    raw = "[" * 100_000 + "]" * 100_000
    with pytest.raises(DeserializationError) as exc_info:
        JsonCodec().decode(raw)
    assert isinstance(exc_info.value.__cause__, RecursionError)
