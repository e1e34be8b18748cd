"""Tests for the immutable Value tree."""

import dataclasses

import pytest

from driftsafe.kernel.value import Value, ValueKind


def test_scalar_kinds():
    """Each JSON scalar maps to its own kind."""
    assert Value.from_python(None).kind == ValueKind.NULL
    assert Value.from_python(True).kind == ValueKind.BOOL
    assert Value.from_python(3).kind == ValueKind.NUMBER
    assert Value.from_python(2.5).kind == ValueKind.NUMBER
    assert Value.from_python("x").kind == ValueKind.STRING


def test_bool_is_not_number():
    """Python bools are ints, but never NUMBER values."""
    value = Value.from_python(False)
    assert value.kind == ValueKind.BOOL
    assert value != Value.from_python(0)


def test_number_keeps_original_python_type():
    """int and float share the NUMBER kind but keep their payload."""
    assert isinstance(Value.from_python(7).payload, int)
    assert isinstance(Value.from_python(7.0).payload, float)


def test_object_preserves_key_order():
    """Object keys keep insertion order."""
    value = Value.from_python({"b": 1, "a": 2, "c": 3})
    assert value.kind == ValueKind.OBJECT
    assert value.keys() == ("b", "a", "c")
    assert value.get("a") == Value.from_python(2)
    assert value.get("missing") is None


def test_array_items():
    value = Value.from_python([1, "two", None])
    assert value.kind == ValueKind.ARRAY
    assert [item.kind for item in value.items()] == [ValueKind.NUMBER, ValueKind.STRING, ValueKind.NULL]


def test_to_python_round_trip():
    """to_python() returns the data the tree was built from."""
    data = {"id": 1, "tags": ["a", "b"], "meta": {"ok": True, "score": 0.5, "note": None}}
    assert Value.from_python(data).to_python() == data


def test_value_is_immutable():
    """Values are frozen once built."""
    value = Value.from_python({"a": 1})
    with pytest.raises(dataclasses.FrozenInstanceError):
        value.kind = ValueKind.NULL


def test_non_object_access_is_empty():
    """Object/array accessors on other kinds return nothing instead of raising."""
    value = Value.from_python("text")
    assert value.get("a") is None
    assert value.keys() == ()
    assert value.items() == ()
    assert list(value.members()) == []


def test_rejects_non_json_types():
    """Non-JSON data is a caller error."""
    with pytest.raises(ValueError, match="Unsupported type"):
        Value.from_python({"when": object()})


def test_rejects_non_string_keys():
    with pytest.raises(ValueError, match="must be a string"):
        Value.from_python({1: "one"})


def test_rejects_non_finite_numbers():
    with pytest.raises(ValueError, match="Non-finite"):
        Value.from_python([float("nan")])


def test_error_path_points_at_offending_node():
    """Error messages carry the location of the bad node."""
    with pytest.raises(ValueError, match=r"\$\.items\[1\]"):
        Value.from_python({"items": [1, {2, 3}]})
