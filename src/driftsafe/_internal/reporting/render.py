"""Render decode reports as markdown or stable JSON (internal)."""

import json
from typing import Dict, List, Union

from driftsafe.api import BatchReport, DecodeReport, DiagnosticRecord


_KIND_TITLES = {
    "MISSING": "Missing fields",
    "TYPE_MISMATCH": "Type mismatches",
    "UNEXPECTED_EXTRA": "Unexpected keys",
}


def _diagnostic_line(d: DiagnosticRecord) -> str:
    marker = " (error)" if d.severity == "error" else ""
    if d.kind == "TYPE_MISMATCH":
        return f"- `{d.path}`: expected {d.expected}, got {d.actual}{marker}"
    return f"- `{d.path}`{marker}"


def _grouped(diagnostics: List[DiagnosticRecord]) -> Dict[str, List[DiagnosticRecord]]:
    grouped: Dict[str, List[DiagnosticRecord]] = {}
    for d in diagnostics:
        grouped.setdefault(d.kind, []).append(d)
    return grouped


def _diagnostic_sections(diagnostics: List[DiagnosticRecord], heading: str) -> List[str]:
    lines: List[str] = []
    for kind, items in _grouped(diagnostics).items():
        lines.append(f"{heading} {_KIND_TITLES.get(kind, kind)} ({len(items)})\n")
        lines.extend(_diagnostic_line(d) for d in items)
        lines.append("")
    return lines


def render_decode_report(report: DecodeReport, descriptor_name: str) -> str:
    """Markdown summary of one decoded document."""
    lines = [f"# Decode report: {descriptor_name}\n"]
    lines.append(f"Status: {'OK' if report.ok else 'FAILED'}")
    lines.append(f"Diagnostics: {len(report.diagnostics)}")
    if report.absent_fields:
        lines.append(f"Absent fields: {', '.join(report.absent_fields)}")
    lines.append("")

    if not report.diagnostics:
        lines.append("No anomalies detected.")
        return "\n".join(lines)

    lines.extend(_diagnostic_sections(report.diagnostics, "##"))
    return "\n".join(lines).rstrip() + "\n"


def render_batch_report(report: BatchReport, descriptor_name: str) -> str:
    """Markdown summary of a decoded batch, one section per anomalous record."""
    lines = [f"# Batch decode report: {descriptor_name}\n"]
    lines.append(f"Records: {report.total}")
    lines.append(f"Accepted: {report.accepted}")
    lines.append(f"With anomalies: {len(report.records)}")
    lines.append("")

    if not report.records:
        lines.append("No anomalies detected.")
        return "\n".join(lines)

    for record in report.records:
        lines.append(f"## Record {record.index}\n")
        if record.error:
            lines.append(f"Not decodable: {record.error}")
            lines.append("")
        if record.rejection:
            lines.append("Rejected:")
            for violation in record.rejection["violations"]:
                lines.append(f"- {violation['message']}")
            lines.append("")
        lines.extend(_diagnostic_sections(record.diagnostics, "###"))

    return "\n".join(lines).rstrip() + "\n"


def render_json_report(report: Union[DecodeReport, BatchReport]) -> str:
    """
    Serialize a report as JSON that is identical across runs for the same input.

    Object keys are sorted at every level, separators carry no whitespace and
    non-ASCII text is kept as is. List order is kept, so diagnostics stay in
    traversal order.
    """
    return json.dumps(report.model_dump(mode="json"), sort_keys=True, separators=(",", ":"), ensure_ascii=False)
