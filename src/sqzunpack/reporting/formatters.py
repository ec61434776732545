"""Output formatters for unpacking reports."""

from __future__ import annotations

import csv
import io
import json
from pathlib import Path

from sqzunpack.reporting.report import UnpackReport


def to_json(report: UnpackReport, indent: int = 2) -> str:
    """Format report as JSON string."""
    return json.dumps(report.to_dict(), indent=indent, default=str)


def to_markdown(report: UnpackReport) -> str:
    """Format report as Markdown."""
    lines = [
        "# Unpack Report",
        "",
        "| Field | Value |",
        "|-------|-------|",
        f"| Source | `{report.source_dir}` |",
        f"| Output | `{report.output_dir}` |",
        f"| Pattern | `{report.pattern}` |",
        "",
        "## Statistics",
        "",
        "| Metric | Count |",
        "|--------|-------|",
        f"| Unpacked | {report.files_unpacked} |",
        f"| Failed | {report.files_failed} |",
        f"| Bytes written | {report.total_bytes} |",
        f"| Duration | {report.duration_seconds:.1f}s |",
    ]

    if report.files:
        lines.extend([
            "",
            "## Files",
            "",
            "| File | Format | Size | Alt LZW |",
            "|------|--------|------|---------|",
        ])
        for f in report.files:
            lines.append(
                f"| `{f.source_file}` | {f.compression or '-'} "
                f"| {f.payload_size} | {'yes' if f.alt_lzw else 'no'} |"
            )

    if report.errors:
        lines.extend([
            "",
            "## Errors",
            "",
        ])
        for err in report.errors:
            lines.append(f"- {err}")

    return "\n".join(lines) + "\n"


def to_csv(report: UnpackReport) -> str:
    """Format report as CSV, one row per file."""
    output = io.StringIO()
    fieldnames = ["source_file", "output_file", "compression", "payload_size", "alt_lzw", "error"]
    writer = csv.DictWriter(output, fieldnames=fieldnames)
    writer.writeheader()
    for f in report.files:
        writer.writerow(f.to_dict())
    return output.getvalue()


def save_report(report: UnpackReport, path: str | Path) -> None:
    """Save report to file, auto-detecting format from extension."""
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        content = to_json(report)
    elif suffix in (".md", ".markdown"):
        content = to_markdown(report)
    elif suffix == ".csv":
        content = to_csv(report)
    else:
        content = to_json(report)

    path.write_text(content, encoding="utf-8")
