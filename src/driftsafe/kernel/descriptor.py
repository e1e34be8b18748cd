"""Pydantic models for model descriptors with strict validation.

A ModelDescriptor is runtime data describing one target type: its fields in
declaration order, the kind each field expects, and whether the field is
required, nullable or defaulted. The same decode engine serves every model
by walking its descriptor.
"""

from typing import Any, Dict, List, Literal, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .value import Value, ValueKind


FieldKindName = Literal["bool", "number", "string", "array", "object"]

_KIND_TO_VALUE_KIND: Dict[str, ValueKind] = {
    "bool": ValueKind.BOOL,
    "number": ValueKind.NUMBER,
    "string": ValueKind.STRING,
    "array": ValueKind.ARRAY,
    "object": ValueKind.OBJECT,
}


class FieldType(BaseModel):
    """Expected kind of a field (or of an array element).

    Arrays carry the element type in ``items``; objects carry the nested
    descriptor in ``model``. A bare string such as ``"string"`` is accepted
    as shorthand for ``{"kind": "string"}``.
    """
    kind: FieldKindName
    items: Optional["FieldType"] = None
    model: Optional["ModelDescriptor"] = None

    model_config = ConfigDict(frozen=True, extra="forbid")

    @model_validator(mode="before")
    @classmethod
    def expand_shorthand(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"kind": data}
        return data

    @model_validator(mode="after")
    def check_shape(self) -> "FieldType":
        """Arrays need items, objects need a model, scalars need neither."""
        if self.kind == "array":
            if self.items is None:
                raise ValueError("Array kind requires 'items'")
            if self.model is not None:
                raise ValueError("Array kind does not take 'model'")
        elif self.kind == "object":
            if self.model is None:
                raise ValueError("Object kind requires 'model'")
            if self.items is not None:
                raise ValueError("Object kind does not take 'items'")
        elif self.items is not None or self.model is not None:
            raise ValueError(f"Scalar kind '{self.kind}' takes neither 'items' nor 'model'")
        return self

    @classmethod
    def array_of(cls, items: Union["FieldType", str]) -> "FieldType":
        return cls(kind="array", items=items)

    @classmethod
    def object_of(cls, model: "ModelDescriptor") -> "FieldType":
        return cls(kind="object", model=model)

    def accepts(self, kind: ValueKind) -> bool:
        """Shallow kind check (numbers are permissive: int and float both match)."""
        return _KIND_TO_VALUE_KIND[self.kind] == kind

    def describe(self) -> str:
        """Human-readable type, e.g. ``array<string>`` or ``object<Author>``."""
        if self.kind == "array":
            return f"array<{self.items.describe()}>"
        if self.kind == "object":
            return f"object<{self.model.name}>"
        return self.kind

    def conforms(self, value: Value) -> bool:
        """Deep check used for default values."""
        if not self.accepts(value.kind):
            return False
        if self.kind == "array":
            return all(self.items.conforms(item) for item in value.items())
        if self.kind == "object":
            for field in self.model.fields:
                member = value.get(field.name)
                if member is None:
                    if field.required and not field.has_default:
                        return False
                    continue
                if member.kind == ValueKind.NULL and field.nullable:
                    continue
                if not field.kind.conforms(member):
                    return False
        return True


class FieldDescriptor(BaseModel):
    """A single declared field of a model."""
    name: str
    kind: FieldType
    required: bool = False  # Decode-time requirement; affects MISSING severity only
    nullable: bool = False  # Explicit JSON null is accepted as a present NULL value
    default: Any = Field(None, description="JSON value used when the key is absent (only if explicitly set)")

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v:
            raise ValueError("Field name must be a non-empty string")
        return v

    @model_validator(mode="after")
    def validate_default(self) -> "FieldDescriptor":
        """Validate that an explicit default is pure JSON and matches the kind."""
        if not self.has_default:
            return self
        value = Value.from_python(self.default, path=self.name)
        if value.kind == ValueKind.NULL and self.nullable:
            return self
        if not self.kind.conforms(value):
            raise ValueError(
                f"Default for field '{self.name}' does not match kind {self.kind.describe()}: {self.default!r}"
            )
        return self

    @property
    def has_default(self) -> bool:
        """True when a default was set explicitly (a null default counts)."""
        return "default" in self.model_fields_set

    def default_value(self) -> Optional[Value]:
        if not self.has_default:
            return None
        return Value.from_python(self.default, path=self.name)


class ModelDescriptor(BaseModel):
    """Ordered set of uniquely named fields describing one target type."""
    name: str = "Model"
    fields: Tuple[FieldDescriptor, ...] = Field(..., description="Declared fields in declaration order")

    model_config = ConfigDict(frozen=True, extra="forbid")

    @field_validator('fields')
    @classmethod
    def validate_unique_names(cls, v: Tuple[FieldDescriptor, ...]) -> Tuple[FieldDescriptor, ...]:
        """Reject duplicate field names (order is preserved, never sorted)."""
        seen = set()
        duplicates = set()
        for field in v:
            if field.name in seen:
                duplicates.add(field.name)
            seen.add(field.name)
        if duplicates:
            raise ValueError(f"Duplicate field names not allowed: {sorted(duplicates)}")
        return v

    def field_names(self) -> List[str]:
        return [field.name for field in self.fields]

    def get_field(self, name: str) -> Optional[FieldDescriptor]:
        for field in self.fields:
            if field.name == name:
                return field
        return None

    @classmethod
    def from_json_bytes(cls, data: bytes) -> "ModelDescriptor":
        """Load a descriptor from JSON bytes."""
        return cls.model_validate_json(data)


FieldType.model_rebuild()
FieldDescriptor.model_rebuild()
ModelDescriptor.model_rebuild()
