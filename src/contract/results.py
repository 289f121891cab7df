"""In-memory validation results."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ValidationResult:
    """Outcome for one file.

    ``calls`` and ``invalid`` hold rendered resolved calls
    (``Module.fun`` or ``Module.fun/arity``), sorted.
    """

    file: str
    calls: tuple[str, ...] = field(default_factory=tuple)
    invalid: tuple[str, ...] = field(default_factory=tuple)
    fallback: bool = False

    @property
    def valid(self) -> bool:
        return not self.invalid


@dataclass(frozen=True)
class FileError:
    """A file that could not be read or processed."""

    file: str
    message: str


@dataclass(frozen=True)
class ValidationReport:
    results: tuple[ValidationResult, ...] = field(default_factory=tuple)
    errors: tuple[FileError, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.errors and all(result.valid for result in self.results)

    @property
    def invalid_results(self) -> tuple[ValidationResult, ...]:
        return tuple(result for result in self.results if not result.valid)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def valid_count(self) -> int:
        return self.total - len(self.invalid_results)


__all__ = ["FileError", "ValidationReport", "ValidationResult"]
