"""Batch driver: decode and project many records independently.

One bad record never blocks the others. Successful views are kept in order;
every record with diagnostics, a rejection, or a conversion error (non-JSON
or non-finite data) gets a RecordOutcome.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Generic, List, Optional, Sequence, TypeVar, Union

from .decoder import DecodeOptions, DecodeResult, decode
from .descriptor import ModelDescriptor
from .diagnostics import Diagnostics
from .projection import Projector, Rejection
from .value import Value, ValueKind

logger = logging.getLogger(__name__)

V = TypeVar("V")


@dataclass(frozen=True)
class RecordOutcome:
    """Decode/projection trail of one record in a batch."""
    index: int
    diagnostics: Diagnostics
    rejection: Optional[Rejection] = None
    error: Optional[str] = None  # Set when the record could not be converted at all

    @property
    def rejected(self) -> bool:
        return self.rejection is not None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def to_record(self) -> dict:
        return {
            "index": self.index,
            "diagnostics": self.diagnostics.to_records(),
            "rejection": self.rejection.to_record() if self.rejection else None,
            "error": self.error,
        }


@dataclass
class BatchResult(Generic[V]):
    """Views that projected successfully plus per-record outcomes."""
    views: List[V] = field(default_factory=list)
    view_indexes: List[int] = field(default_factory=list)  # Source record index of each view
    outcomes: List[RecordOutcome] = field(default_factory=list)  # Only records with anomalies
    total: int = 0

    @property
    def rejected_indexes(self) -> List[int]:
        return [o.index for o in self.outcomes if o.rejected]

    @property
    def failed_indexes(self) -> List[int]:
        return [o.index for o in self.outcomes if o.failed]

    def outcome_for(self, index: int) -> Optional[RecordOutcome]:
        for outcome in self.outcomes:
            if outcome.index == index:
                return outcome
        return None


def _split_records(records: Union[Value, Sequence[Any]]) -> List[Any]:
    if isinstance(records, Value):
        if records.kind == ValueKind.ARRAY:
            return list(records.items())
        return [records]
    if isinstance(records, (list, tuple)):
        return list(records)
    return [records]


def decode_batch(
    records: Union[Value, Sequence[Any]],
    descriptor: ModelDescriptor,
    projector: Optional[Projector[V]] = None,
    options: Optional[DecodeOptions] = None,
) -> BatchResult[V]:
    """
    Decode (and optionally project) each record of a batch.

    Args:
        records: Array Value or sequence of Values/plain records; a single
                 non-array record is treated as a batch of one
        descriptor: Model of each record
        projector: Optional projector; without one, decoded models are the views
        options: Decode configuration shared by all records

    Returns:
        BatchResult with views in record order
    """
    result: BatchResult[V] = BatchResult()
    items = _split_records(records)
    result.total = len(items)

    for index, record in enumerate(items):
        try:
            decoded: DecodeResult = decode(record, descriptor, options)
        except ValueError as e:
            outcome = RecordOutcome(index=index, diagnostics=Diagnostics(), error=str(e))
            result.outcomes.append(outcome)
            logger.warning(
                "Record %d of %s: not decodable: %s",
                index,
                descriptor.name,
                e,
                extra={"driftsafe_record": outcome.to_record()},
            )
            continue

        rejection: Optional[Rejection] = None

        if projector is None:
            view = decoded.model
        else:
            view = projector.project(decoded.model)
            if isinstance(view, Rejection):
                rejection = view

        if rejection is None:
            result.views.append(view)
            result.view_indexes.append(index)

        if decoded.diagnostics.has_any() or rejection is not None:
            outcome = RecordOutcome(index=index, diagnostics=decoded.diagnostics, rejection=rejection)
            result.outcomes.append(outcome)
            logger.warning(
                "Record %d of %s: %d diagnostic(s)%s",
                index,
                descriptor.name,
                len(decoded.diagnostics),
                ", rejected" if rejection else "",
                extra={"driftsafe_record": outcome.to_record()},
            )

    logger.debug(
        "Decoded %d %s record(s): %d view(s), %d with anomalies",
        result.total,
        descriptor.name,
        len(result.views),
        len(result.outcomes),
    )
    return result
