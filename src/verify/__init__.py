"""Validation orchestration and reporting for"""

from verify.summary import exit_code, format_summary, print_summary
from verify.validator import (
    ExtractedFile,
    SourceDocument,
    Validator,
    extract_calls,
    is_allowed_module,
    read_document,
    validate,
    validate_project,
)

__all__ = [
    "ExtractedFile",
    "SourceDocument",
    "Validator",
    "exit_code",
    "extract_calls",
    "format_summary",
    "is_allowed_module",
    "print_summary",
    "read_document",
    "validate",
    "validate_project",
]
