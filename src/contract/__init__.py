"""Stable result and report surface for validation consumers.

Report formatters and other tooling should depend on these exports only.
"""

from contract.models import (
    REPORT_SCHEMA_VERSION,
    FileErrorRecord,
    FileResultRecord,
    ReportRecord,
)
from contract.results import FileError, ValidationReport, ValidationResult


def __getattr__(name: str) -> object:
    if name in {"ReportError", "build_report_record", "load_report", "write_report"}:
        from contract.report import (
            ReportError,
            build_report_record,
            load_report,
            write_report,
        )

        return {
            "ReportError": ReportError,
            "build_report_record": build_report_record,
            "load_report": load_report,
            "write_report": write_report,
        }[name]

    msg = f"module 'contract' has no attribute {name!r}"
    raise AttributeError(msg)


__all__ = [
    "REPORT_SCHEMA_VERSION",
    "FileError",
    "FileErrorRecord",
    "FileResultRecord",
    "ReportError",
    "ReportRecord",
    "ValidationReport",
    "ValidationResult",
    "build_report_record",
    "load_report",
    "write_report",
]
