"""Structured decode diagnostics and their append-only collector."""

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from driftsafe.codes import DiagnosticKind, Severity


PathSegment = Union[str, int]
Path = Tuple[PathSegment, ...]


def format_path(path: Path) -> str:
    """Render a path as ``author`` or ``items[2].name``; the root is ``$``."""
    if not path:
        return "$"
    parts: List[str] = []
    for segment in path:
        if isinstance(segment, int):
            parts.append(f"[{segment}]")
        elif parts:
            parts.append(f".{segment}")
        else:
            parts.append(segment)
    return "".join(parts)


@dataclass(frozen=True)
class Diagnostic:
    """A single field-level decode anomaly."""
    path: Path
    kind: DiagnosticKind
    severity: Severity = Severity.WARNING
    expected: Optional[str] = None  # TYPE_MISMATCH only: declared kind, e.g. "string"
    actual: Optional[str] = None  # TYPE_MISMATCH only: value tag, e.g. "number"

    @property
    def path_str(self) -> str:
        return format_path(self.path)

    def with_prefix(self, prefix: Path) -> "Diagnostic":
        return Diagnostic(
            path=tuple(prefix) + self.path,
            kind=self.kind,
            severity=self.severity,
            expected=self.expected,
            actual=self.actual,
        )

    def to_record(self) -> Dict[str, str]:
        """Structured log record; expected/actual only appear for mismatches."""
        record = {
            "path": self.path_str,
            "kind": self.kind.value,
            "severity": self.severity.value,
        }
        if self.expected is not None:
            record["expected"] = self.expected
        if self.actual is not None:
            record["actual"] = self.actual
        return record

    def message(self) -> str:
        if self.kind == DiagnosticKind.MISSING:
            return f"{self.path_str}: missing"
        if self.kind == DiagnosticKind.TYPE_MISMATCH:
            return f"{self.path_str}: expected {self.expected}, got {self.actual}"
        return f"{self.path_str}: unexpected key"


class Diagnostics:
    """Ordered, append-only diagnostics of one decode call.

    Entries are never removed or reordered. Each field is visited once per
    decode call, so a path is reported at most once per kind.
    """

    def __init__(self, entries: Iterable[Diagnostic] = ()):
        self._entries: List[Diagnostic] = list(entries)

    def append(self, diagnostic: Diagnostic) -> None:
        self._entries.append(diagnostic)

    def extend_prefixed(self, prefix: Path, other: "Diagnostics") -> None:
        """Merge nested diagnostics, prefixing every path."""
        for diagnostic in other:
            self._entries.append(diagnostic.with_prefix(prefix))

    def count(self, kind: Optional[DiagnosticKind] = None) -> int:
        if kind is None:
            return len(self._entries)
        return sum(1 for d in self._entries if d.kind == kind)

    def has_any(self, kind: Optional[DiagnosticKind] = None) -> bool:
        if kind is None:
            return bool(self._entries)
        return any(d.kind == kind for d in self._entries)

    def has_severity(self, severity: Severity) -> bool:
        return any(d.severity == severity for d in self._entries)

    def by_kind(self) -> Dict[DiagnosticKind, List[Diagnostic]]:
        """Group entries by kind, preserving traversal order within each group."""
        grouped: Dict[DiagnosticKind, List[Diagnostic]] = {}
        for diagnostic in self._entries:
            grouped.setdefault(diagnostic.kind, []).append(diagnostic)
        return grouped

    def by_prefix(self, prefix: Path) -> List[Diagnostic]:
        """Entries whose path starts with prefix (the empty prefix matches all)."""
        prefix = tuple(prefix)
        return [d for d in self._entries if d.path[:len(prefix)] == prefix]

    def summary(self) -> Dict[str, int]:
        """Counts by kind, keyed by the kind's string value."""
        counts: Dict[str, int] = {}
        for diagnostic in self._entries:
            counts[diagnostic.kind.value] = counts.get(diagnostic.kind.value, 0) + 1
        return counts

    def to_records(self) -> List[Dict[str, str]]:
        return [d.to_record() for d in self._entries]

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(tuple(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> Diagnostic:
        return self._entries[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Diagnostics):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"Diagnostics({self._entries!r})"
