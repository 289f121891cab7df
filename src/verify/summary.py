"""Human-readable summary and exit status of a validation run."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

from utils import percentage

if TYPE_CHECKING:
    from contract.results import ValidationReport

_RULE = "=" * 80


def _banner(title: str) -> list[str]:
    return [_RULE, title, _RULE, ""]


def format_summary(report: ValidationReport) -> str:
    total = report.total
    valid = report.valid_count
    invalid = total - valid

    lines = _banner("VALIDATION SUMMARY")
    lines.append(f"Total files:   {total}")
    lines.append(f"Valid files:   {valid} ({percentage(valid, total)}%)")
    lines.append(f"Invalid files: {invalid} ({percentage(invalid, total)}%)")
    if report.errors:
        lines.append(f"Unreadable:    {len(report.errors)}")
    lines.append("")

    if invalid:
        lines.extend(_banner("INVALID API CALLS FOUND"))
        for result in report.invalid_results:
            suffix = " (regex fallback)" if result.fallback else ""
            lines.append(f"{result.file}{suffix}")
            lines.append("   Invalid calls:")
            lines.extend(f"      - {call}" for call in result.invalid)
            lines.append("")

    if report.errors:
        lines.extend(_banner("FILES NOT VALIDATED"))
        lines.extend(f"{error.file}: {error.message}" for error in report.errors)
        lines.append("")

    if report.ok:
        lines.append("All files use valid public APIs!")

    return "\n".join(lines)


def print_summary(report: ValidationReport, stream: TextIO | None = None) -> None:
    out = stream if stream is not None else sys.stdout
    out.write(format_summary(report))
    out.write("\n")


def exit_code(report: ValidationReport) -> int:
    """0 when every file is valid and readable, 1 otherwise."""
    return 0 if report.ok else 1


__all__ = ["exit_code", "format_summary", "print_summary"]
