"""Code constants for diagnostics and projection rejections.

These constants prevent stringly-typed codes and ensure client code
filters diagnostics and rejections with the correct values.
"""

from enum import Enum


class DiagnosticKind(str, Enum):
    """Decode-time anomaly kinds (all non-fatal)."""

    MISSING = "MISSING"
    TYPE_MISMATCH = "TYPE_MISMATCH"
    UNEXPECTED_EXTRA = "UNEXPECTED_EXTRA"


class Severity(str, Enum):
    """Diagnostic severity. The engine itself never aborts on either."""

    WARNING = "warning"
    ERROR = "error"


class RuleCode(str, Enum):
    """Projection-time rule violation codes."""

    ABSENT = "absent"
    EMPTY = "empty"
    CHECK_FAILED = "check_failed"
    BUILD_FAILED = "build_failed"
