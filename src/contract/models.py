"""Serialized report schema exposed to downstream report consumers."""

from __future__ import annotations

from pydantic import BaseModel, Field

# Schema version constant
REPORT_SCHEMA_VERSION = 1


class FileResultRecord(BaseModel):
    """Validation outcome for one file."""

    file: str
    valid: bool
    calls: list[str] = Field(default_factory=list)
    invalid: list[str] = Field(default_factory=list)
    fallback: bool = False


class FileErrorRecord(BaseModel):
    """A file that could not be validated."""

    file: str
    message: str


class ReportRecord(BaseModel):
    """Schema for the JSON validation report."""

    schema_version: int = Field(default=REPORT_SCHEMA_VERSION)
    ok: bool
    total: int
    valid: int
    invalid: int
    results: list[FileResultRecord] = Field(default_factory=list)
    errors: list[FileErrorRecord] = Field(default_factory=list)


__all__ = [
    "REPORT_SCHEMA_VERSION",
    "FileErrorRecord",
    "FileResultRecord",
    "ReportRecord",
]
