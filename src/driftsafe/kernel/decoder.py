"""Fail-soft decoder: walk a Value against a ModelDescriptor.

Every anomaly becomes a Diagnostic; nothing raises. A field that cannot be
decoded degrades to ABSENT and the rest of the document is still decoded.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, Literal, Optional, Tuple, Union
from collections.abc import Mapping

from pydantic import BaseModel, ConfigDict

from driftsafe.codes import DiagnosticKind, Severity
from .descriptor import FieldDescriptor, FieldType, ModelDescriptor
from .diagnostics import Diagnostic, Diagnostics
from .value import Value, ValueKind


class Absent(Enum):
    """Marker for a declared field (or array element) with no usable value."""
    ABSENT = "ABSENT"

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT = Absent.ABSENT


class DecodeOptions(BaseModel):
    """Per-call decode configuration."""
    extra_keys: Literal["report", "ignore"] = "report"
    required_missing_severity: Literal["warning", "error"] = "warning"

    model_config = ConfigDict(frozen=True, extra="forbid")


@dataclass(frozen=True)
class DecodedArray:
    """Element-wise decoded array; bad elements are ABSENT at their index."""
    elements: Tuple[Any, ...]

    def __iter__(self) -> Iterator[Any]:
        return iter(self.elements)

    def __len__(self) -> int:
        return len(self.elements)

    def __getitem__(self, index: int) -> Any:
        return self.elements[index]

    def present(self) -> Tuple[Any, ...]:
        """Elements that decoded successfully, in order."""
        return tuple(e for e in self.elements if e is not ABSENT)

    def to_python(self) -> list:
        return [_to_python(e) for e in self.elements]


Decoded = Union[Value, "DecodedModel", DecodedArray, Absent]


class DecodedModel(Mapping):
    """Read-only mapping holding every declared field, in declaration order.

    Values are Value (scalars and nullable nulls), DecodedModel (object
    fields), DecodedArray (array fields), or ABSENT.
    """

    def __init__(self, name: str, fields: Dict[str, Decoded]):
        self._name = name
        self._fields = dict(fields)

    @property
    def name(self) -> str:
        return self._name

    def __getitem__(self, key: str) -> Decoded:
        return self._fields[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def is_present(self, key: str) -> bool:
        return self._fields.get(key, ABSENT) is not ABSENT

    def python_value(self, key: str) -> Any:
        """Plain Python value of a field; ABSENT and JSON null both give None."""
        return _to_python(self._fields[key])

    def to_python(self) -> Dict[str, Any]:
        return {key: _to_python(item) for key, item in self._fields.items()}

    def __repr__(self) -> str:
        return f"DecodedModel({self._name!r}, {self._fields!r})"


def _to_python(item: Decoded) -> Any:
    if item is ABSENT:
        return None
    return item.to_python()


@dataclass(frozen=True)
class DecodeResult:
    """Best-effort model plus every anomaly found while building it."""
    model: DecodedModel
    diagnostics: Diagnostics

    def ok(self, fail_on: Literal["warning", "error"] = "error") -> bool:
        """Caller-side fatality policy.

        fail_on="error" tolerates warnings; fail_on="warning" requires a
        clean decode.
        """
        if fail_on == "warning":
            return not self.diagnostics.has_any()
        return not self.diagnostics.has_severity(Severity.ERROR)


def decode(
    value: Union[Value, Any],
    descriptor: ModelDescriptor,
    options: Optional[DecodeOptions] = None,
) -> DecodeResult:
    """
    Decode a value against a model descriptor.

    Args:
        value: Value tree, or plain parser output (converted with Value.from_python)
        descriptor: Target model
        options: Decode configuration (defaults to DecodeOptions())

    Returns:
        DecodeResult whose model holds every declared field and whose
        diagnostics follow a pre-order walk of the descriptor.
    """
    if options is None:
        options = DecodeOptions()
    if not isinstance(value, Value):
        value = Value.from_python(value)

    if value.kind != ValueKind.OBJECT:
        # Root mismatch explains every field; no per-field MISSING entries
        diagnostics = Diagnostics()
        diagnostics.append(_mismatch((), "object", value.kind))
        model = DecodedModel(descriptor.name, {f.name: ABSENT for f in descriptor.fields})
        return DecodeResult(model=model, diagnostics=diagnostics)

    model, diagnostics = _decode_model(value, descriptor, options)
    return DecodeResult(model=model, diagnostics=diagnostics)


def _mismatch(path: Tuple, expected: str, actual: ValueKind) -> Diagnostic:
    return Diagnostic(
        path=path,
        kind=DiagnosticKind.TYPE_MISMATCH,
        expected=expected,
        actual=actual.value,
    )


def _missing_severity(field: FieldDescriptor, options: DecodeOptions) -> Severity:
    if field.required:
        return Severity(options.required_missing_severity)
    return Severity.WARNING


def _decode_model(
    value: Value,
    descriptor: ModelDescriptor,
    options: DecodeOptions,
) -> Tuple[DecodedModel, Diagnostics]:
    """Decode an OBJECT value; diagnostic paths are relative to it."""
    diagnostics = Diagnostics()
    fields: Dict[str, Decoded] = {}

    for field in descriptor.fields:
        member = value.get(field.name)

        if member is None:
            default = field.default_value()
            if default is not None:
                # Defaults already conform, nested gaps inside them are not reported
                fields[field.name], _ = _decode_type(field.kind, default, field.nullable, options)
            else:
                fields[field.name] = ABSENT
                diagnostics.append(Diagnostic(
                    path=(field.name,),
                    kind=DiagnosticKind.MISSING,
                    severity=_missing_severity(field, options),
                ))
            continue

        decoded, nested = _decode_type(field.kind, member, field.nullable, options)
        fields[field.name] = decoded
        diagnostics.extend_prefixed((field.name,), nested)

    if options.extra_keys == "report":
        declared = set(descriptor.field_names())
        for key in value.keys():
            if key not in declared:
                diagnostics.append(Diagnostic(path=(key,), kind=DiagnosticKind.UNEXPECTED_EXTRA))

    return DecodedModel(descriptor.name, fields), diagnostics


def _decode_type(
    field_type: FieldType,
    value: Value,
    nullable: bool,
    options: DecodeOptions,
) -> Tuple[Decoded, Diagnostics]:
    """Decode one present value; diagnostic paths are relative to it."""
    if value.kind == ValueKind.NULL and nullable:
        return value, Diagnostics()

    if not field_type.accepts(value.kind):
        diagnostics = Diagnostics()
        diagnostics.append(_mismatch((), field_type.kind, value.kind))
        return ABSENT, diagnostics

    if field_type.kind == "object":
        return _decode_model(value, field_type.model, options)

    if field_type.kind == "array":
        diagnostics = Diagnostics()
        elements = []
        for index, item in enumerate(value.items()):
            decoded, nested = _decode_type(field_type.items, item, False, options)
            elements.append(decoded)
            diagnostics.extend_prefixed((index,), nested)
        return DecodedArray(tuple(elements)), diagnostics

    return value, Diagnostics()
