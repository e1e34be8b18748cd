"""Public API for driftsafe.

High-level functions that accept files or in-memory data and return
complete, serializable pydantic reports. Applications that need the typed
DecodedModel or the view values directly use driftsafe.kernel instead.
"""

import logging
import os
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from driftsafe.codes import Severity
from driftsafe.kernel.batch import BatchResult, decode_batch
from driftsafe.kernel.decoder import DecodeOptions, DecodedModel, decode as decode_value
from driftsafe.kernel.descriptor import ModelDescriptor
from driftsafe.kernel.diagnostics import Diagnostics
from driftsafe.kernel.projection import Projector
from driftsafe.kernel.value import Value
from driftsafe._internal.io.descriptor import load_descriptor_from_path, load_payload_from_path

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike, Path]
DescriptorInput = Union[ModelDescriptor, Dict[str, Any], PathLike]


def _normalize_path(path: PathLike) -> Path:
    """Normalize path input to Path object."""
    return Path(path) if not isinstance(path, Path) else path


class DiagnosticRecord(BaseModel):
    """A single decode anomaly, as emitted to logs and reports."""
    path: str  # e.g. "author", "items[2].name", "$" for the root
    kind: str  # "MISSING" | "TYPE_MISMATCH" | "UNEXPECTED_EXTRA"
    severity: str  # "warning" | "error"
    expected: Optional[str] = None  # For TYPE_MISMATCH
    actual: Optional[str] = None  # For TYPE_MISMATCH


class DecodeReport(BaseModel):
    """Result of decoding one document."""
    ok: bool  # True if no error-severity diagnostics (warnings don't block)
    model: Dict[str, Any]  # Decoded fields as plain data; absent fields are None
    absent_fields: List[str]  # Top-level declared fields with no value, in declaration order
    diagnostics: List[DiagnosticRecord]  # Pre-order traversal order
    counts: Dict[str, int] = Field(default_factory=dict)  # kind -> count


class RecordReport(BaseModel):
    """Anomalies of one record in a batch."""
    index: int
    diagnostics: List[DiagnosticRecord]
    rejection: Optional[Dict[str, Any]] = None  # {"model": ..., "violations": [...]}
    error: Optional[str] = None  # Conversion failure; no diagnostics or view in that case


class BatchReport(BaseModel):
    """Result of decoding (and projecting) a batch of records."""
    total: int
    accepted: int
    accepted_indexes: List[int]
    views: List[Any]  # Plain-data form of each accepted view
    records: List[RecordReport]  # Only records with diagnostics, a rejection, or an error
    counts: Dict[str, int] = Field(default_factory=dict)  # kind -> count across the batch


def load_descriptor(descriptor: DescriptorInput) -> ModelDescriptor:
    """Load a model descriptor from a ModelDescriptor, dict, or JSON file path."""
    if isinstance(descriptor, ModelDescriptor):
        return descriptor
    if isinstance(descriptor, dict):
        return ModelDescriptor.model_validate(descriptor)
    path = _normalize_path(descriptor)
    model_descriptor = load_descriptor_from_path(path)
    logger.debug("Loaded descriptor %s (%d fields) from %s", model_descriptor.name, len(model_descriptor.fields), path)
    return model_descriptor


def _load_payload(payload: Any) -> Any:
    """Path objects are read as JSON files; anything else (str included) is in-memory data."""
    if isinstance(payload, os.PathLike):
        return load_payload_from_path(_normalize_path(payload))
    return payload


def _records(diagnostics: Diagnostics) -> List[DiagnosticRecord]:
    return [DiagnosticRecord(**record) for record in diagnostics.to_records()]


def _view_to_data(view: Any) -> Any:
    if isinstance(view, DecodedModel):
        return view.to_python()
    if isinstance(view, BaseModel):
        return view.model_dump()
    if is_dataclass(view) and not isinstance(view, type):
        return asdict(view)
    return view


def decode(
    payload: Union[Value, Dict[str, Any], os.PathLike],
    descriptor: DescriptorInput,
    options: Optional[DecodeOptions] = None,
) -> DecodeReport:
    """
    Decode one document against a descriptor.

    Args:
        payload: Value tree, parsed JSON data, or a Path to a JSON file. A plain
                 str is a JSON string value, not a file name
        descriptor: ModelDescriptor, descriptor dict, or path to a descriptor file
        options: Decode configuration

    Returns:
        DecodeReport (never raises for payload anomalies)

    Raises:
        DescriptorError: If the descriptor file is unreadable or invalid
        OSError, json.JSONDecodeError: If the payload file cannot be read/parsed
    """
    model_descriptor = load_descriptor(descriptor)
    result = decode_value(_load_payload(payload), model_descriptor, options)

    return DecodeReport(
        ok=result.ok(),
        model=result.model.to_python(),
        absent_fields=[name for name in result.model if not result.model.is_present(name)],
        diagnostics=_records(result.diagnostics),
        counts=result.diagnostics.summary(),
    )


def decode_records(
    payload: Union[Value, List[Any], os.PathLike],
    descriptor: DescriptorInput,
    projector: Optional[Projector] = None,
    options: Optional[DecodeOptions] = None,
) -> BatchReport:
    """
    Decode a batch of records (an array payload) and optionally project each.

    Args:
        payload: Array Value, list of records, or a Path to a JSON file (a
                 plain str is data, not a file name)
        descriptor: ModelDescriptor, descriptor dict, or path to a descriptor file
        projector: Optional view projector applied to each decoded record
        options: Decode configuration

    Returns:
        BatchReport with accepted views and per-record anomalies
    """
    model_descriptor = load_descriptor(descriptor)
    batch: BatchResult = decode_batch(_load_payload(payload), model_descriptor, projector, options)

    counts: Dict[str, int] = {}
    records: List[RecordReport] = []
    for outcome in batch.outcomes:
        for kind, count in outcome.diagnostics.summary().items():
            counts[kind] = counts.get(kind, 0) + count
        records.append(RecordReport(
            index=outcome.index,
            diagnostics=_records(outcome.diagnostics),
            rejection=outcome.rejection.to_record() if outcome.rejection else None,
            error=outcome.error,
        ))

    return BatchReport(
        total=batch.total,
        accepted=len(batch.views),
        accepted_indexes=list(batch.view_indexes),
        views=[_view_to_data(view) for view in batch.views],
        records=records,
        counts=counts,
    )


def has_errors(report: Union[DecodeReport, BatchReport]) -> bool:
    """True when any diagnostic has error severity, or a batch record failed to convert."""
    if isinstance(report, DecodeReport):
        diagnostics = report.diagnostics
    else:
        if any(record.error for record in report.records):
            return True
        diagnostics = [d for record in report.records for d in record.diagnostics]
    return any(d.severity == Severity.ERROR.value for d in diagnostics)
