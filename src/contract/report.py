"""JSON report serialization."""

from __future__ import annotations

from typing import TYPE_CHECKING

import orjson
from pydantic import ValidationError

from contract.models import FileErrorRecord, FileResultRecord, ReportRecord

if TYPE_CHECKING:
    from pathlib import Path

    from contract.results import ValidationReport


class ReportError(Exception):
    """Raised when a report file cannot be read back."""


def build_report_record(report: ValidationReport) -> ReportRecord:
    return ReportRecord(
        ok=report.ok,
        total=report.total,
        valid=report.valid_count,
        invalid=len(report.invalid_results),
        results=[
            FileResultRecord(
                file=result.file,
                valid=result.valid,
                calls=list(result.calls),
                invalid=list(result.invalid),
                fallback=result.fallback,
            )
            for result in report.results
        ],
        errors=[
            FileErrorRecord(file=error.file, message=error.message)
            for error in report.errors
        ],
    )


def write_report(report: ValidationReport, path: Path) -> None:
    """Write the report as sorted-key, indented JSON."""
    payload = build_report_record(report).model_dump()
    opts = orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(orjson.dumps(payload, option=opts))


def load_report(path: Path) -> ReportRecord:
    try:
        data = orjson.loads(path.read_bytes())
    except (OSError, orjson.JSONDecodeError) as exc:
        msg = f"Failed to read report {path}: {exc}"
        raise ReportError(msg) from exc

    try:
        return ReportRecord.model_validate(data)
    except ValidationError as exc:
        msg = f"Schema validation failed for {path}: {exc}"
        raise ReportError(msg) from exc


__all__ = ["ReportError", "build_report_record", "load_report", "write_report"]
