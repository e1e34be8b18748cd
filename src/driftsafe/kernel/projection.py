"""View projection: turn a decoded model into a view value or a Rejection.

Decoding stays permissive; projection enforces the business rules a view
needs. Every rule is evaluated before returning, so a Rejection carries the
complete set of reasons for one model.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, Tuple, TypeVar, Union

from pydantic import ValidationError

from driftsafe.codes import RuleCode
from .decoder import ABSENT, DecodedModel


V = TypeVar("V")


@dataclass(frozen=True)
class RuleViolation:
    """One unmet projection rule."""
    field: Optional[str]  # None when the violation is not tied to one field
    code: RuleCode
    message: str

    def to_record(self) -> Dict[str, Optional[str]]:
        return {"field": self.field, "code": self.code.value, "message": self.message}


@dataclass(frozen=True)
class Rejection:
    """Projection failure with every unmet rule, in rule declaration order."""
    model_name: str
    violations: Tuple[RuleViolation, ...]

    def messages(self) -> List[str]:
        return [v.message for v in self.violations]

    def fields(self) -> List[str]:
        return [v.field for v in self.violations if v.field is not None]

    def to_record(self) -> Dict[str, Any]:
        return {
            "model": self.model_name,
            "violations": [v.to_record() for v in self.violations],
        }


@dataclass(frozen=True)
class Check:
    """Custom predicate over a present field value.

    The value is plain Python data. Arrays keep their length, so elements that
    failed to decode show up as None in the list. A predicate that raises is
    recorded as a failed check rather than propagated.
    """
    name: str
    predicate: Callable[[Any], bool]
    message: Optional[str] = None

    def describe(self, field_name: str) -> str:
        return self.message or f"{field_name} failed {self.name}"


@dataclass(frozen=True)
class ViewField:
    """Required-for-view rules of one field.

    These are independent of the decode-time ``required`` flag: a field may
    be optional for decoding yet mandatory for the view.
    """
    name: str
    required: bool = True
    non_empty: bool = False  # Strings are trimmed first; empty arrays/objects also fail
    checks: Tuple[Check, ...] = field(default_factory=tuple)


def _is_empty(value: Any) -> bool:
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict)):
        return not value
    return False


class Projector(Generic[V]):
    """Failable conversion from DecodedModel to a view value.

    ``build`` is called with one keyword argument per view field (plain
    Python values; absent optional fields are None). It is typically a
    pydantic model class or a dataclass.
    """

    def __init__(self, fields: Sequence[ViewField], build: Callable[..., V]):
        names = [f.name for f in fields]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate view fields not allowed: {duplicates}")
        self._fields: Tuple[ViewField, ...] = tuple(fields)
        self._build = build

    @property
    def fields(self) -> Tuple[ViewField, ...]:
        return self._fields

    def evaluate(self, model: DecodedModel) -> Tuple[Dict[str, Any], List[RuleViolation]]:
        """Evaluate every rule; returns the view inputs and all violations."""
        values: Dict[str, Any] = {}
        violations: List[RuleViolation] = []

        for rule in self._fields:
            raw = model.get(rule.name, ABSENT)
            value = None if raw is ABSENT else raw.to_python()
            values[rule.name] = value

            if value is None:
                if rule.required:
                    violations.append(RuleViolation(rule.name, RuleCode.ABSENT, f"{rule.name} absent"))
                # Nothing further to check on a missing value
                continue

            if rule.non_empty and _is_empty(value):
                violations.append(RuleViolation(rule.name, RuleCode.EMPTY, f"{rule.name} is empty"))

            for check in rule.checks:
                try:
                    passed = check.predicate(value)
                except Exception as e:
                    message = f"{check.describe(rule.name)} ({type(e).__name__}: {e})"
                    violations.append(RuleViolation(rule.name, RuleCode.CHECK_FAILED, message))
                    continue
                if not passed:
                    violations.append(RuleViolation(rule.name, RuleCode.CHECK_FAILED, check.describe(rule.name)))

        return values, violations

    def project(self, model: DecodedModel) -> Union[V, Rejection]:
        """Return the view value, or a Rejection listing every unmet rule."""
        values, violations = self.evaluate(model)
        if violations:
            return Rejection(model_name=model.name, violations=tuple(violations))

        try:
            return self._build(**values)
        except ValidationError as e:
            return Rejection(
                model_name=model.name,
                violations=tuple(
                    RuleViolation(
                        field=str(err["loc"][0]) if err.get("loc") else None,
                        code=RuleCode.BUILD_FAILED,
                        message=err["msg"],
                    )
                    for err in e.errors()
                ),
            )
        except ValueError as e:
            return Rejection(
                model_name=model.name,
                violations=(RuleViolation(None, RuleCode.BUILD_FAILED, str(e)),),
            )
