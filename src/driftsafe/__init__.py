"""driftsafe: fail-soft decoding of drifting JSON payloads with precise diagnostics."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("driftsafe")
except PackageNotFoundError:
    __version__ = "dev"

# Public API exports
# Note: decode is exported from driftsafe.api and driftsafe.kernel.decoder, not from root,
# so the report-returning and model-returning variants are never confused
from driftsafe.api import decode_records, load_descriptor, DecodeReport, BatchReport, DiagnosticRecord
from driftsafe.codes import DiagnosticKind, RuleCode, Severity
from driftsafe.kernel.decoder import ABSENT, DecodeOptions, DecodedModel, DecodeResult
from driftsafe.kernel.descriptor import FieldDescriptor, FieldType, ModelDescriptor
from driftsafe.kernel.diagnostics import Diagnostic, Diagnostics
from driftsafe.kernel.projection import Check, Projector, Rejection, RuleViolation, ViewField
from driftsafe.kernel.value import Value, ValueKind

__all__ = [
    "__version__",
    "decode_records",
    "load_descriptor",
    "DecodeReport",
    "BatchReport",
    "DiagnosticRecord",
    "DiagnosticKind",
    "RuleCode",
    "Severity",
    "ABSENT",
    "DecodeOptions",
    "DecodedModel",
    "DecodeResult",
    "FieldDescriptor",
    "FieldType",
    "ModelDescriptor",
    "Diagnostic",
    "Diagnostics",
    "Check",
    "Projector",
    "Rejection",
    "RuleViolation",
    "ViewField",
    "Value",
    "ValueKind",
]
