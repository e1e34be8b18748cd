"""Immutable JSON value tree used as decoder input.

A Value is produced once from the output of an external JSON parser
(``json.loads`` or anything returning plain dict/list/str/number/bool/None)
and is never mutated afterwards.

Key rules:
- bool is its own kind, never a NUMBER (even though Python bools are ints)
- int and float share the NUMBER kind; the original Python number is kept
- object keys keep insertion order
- non-JSON Python types are rejected
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Optional, Tuple
from collections.abc import Mapping, Sequence


class ValueKind(str, Enum):
    """Tag of a Value node."""

    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


@dataclass(frozen=True)
class Value:
    """A single node of a decoded JSON document.

    ``payload`` holds the scalar for NULL/BOOL/NUMBER/STRING, a tuple of
    Value for ARRAY, and a tuple of ``(key, Value)`` pairs for OBJECT.
    """

    kind: ValueKind
    payload: Any = None

    @classmethod
    def null(cls) -> "Value":
        return cls(ValueKind.NULL, None)

    @classmethod
    def from_python(cls, obj: Any, path: str = "$") -> "Value":
        """Build a Value tree from plain parser output.

        Raises:
            ValueError: If obj contains non-JSON types, non-string keys,
                        or non-finite floats.
        """
        if obj is None:
            return cls(ValueKind.NULL, None)
        if isinstance(obj, bool):
            return cls(ValueKind.BOOL, obj)
        if isinstance(obj, int):
            return cls(ValueKind.NUMBER, obj)
        if isinstance(obj, float):
            if not math.isfinite(obj):
                raise ValueError(f"Non-finite number at {path}: {obj!r}")
            return cls(ValueKind.NUMBER, obj)
        if isinstance(obj, str):
            return cls(ValueKind.STRING, obj)
        if isinstance(obj, Mapping):
            pairs = []
            for key, item in obj.items():
                if not isinstance(key, str):
                    raise ValueError(f"Object key at {path} must be a string, got {type(key).__name__}")
                pairs.append((key, cls.from_python(item, f"{path}.{key}")))
            return cls(ValueKind.OBJECT, tuple(pairs))
        if isinstance(obj, Sequence) and not isinstance(obj, (bytes, bytearray)):
            return cls(
                ValueKind.ARRAY,
                tuple(cls.from_python(item, f"{path}[{i}]") for i, item in enumerate(obj)),
            )
        raise ValueError(f"Unsupported type at {path}: {type(obj).__name__}")

    def to_python(self) -> Any:
        """Convert back to plain Python data (dict/list/scalars)."""
        if self.kind == ValueKind.ARRAY:
            return [item.to_python() for item in self.payload]
        if self.kind == ValueKind.OBJECT:
            return {key: item.to_python() for key, item in self.payload}
        return self.payload

    # Object access

    def keys(self) -> Tuple[str, ...]:
        if self.kind != ValueKind.OBJECT:
            return ()
        return tuple(key for key, _ in self.payload)

    def get(self, key: str) -> Optional["Value"]:
        """Return the member named key, or None when absent (or not an object)."""
        if self.kind != ValueKind.OBJECT:
            return None
        for member_key, item in self.payload:
            if member_key == key:
                return item
        return None

    def members(self) -> Iterator[Tuple[str, "Value"]]:
        if self.kind == ValueKind.OBJECT:
            yield from self.payload

    # Array access

    def items(self) -> Tuple["Value", ...]:
        if self.kind != ValueKind.ARRAY:
            return ()
        return self.payload

    def __repr__(self) -> str:
        if self.kind in (ValueKind.ARRAY, ValueKind.OBJECT):
            return f"Value({self.kind.value}, {self.to_python()!r})"
        return f"Value({self.kind.value}, {self.payload!r})"
