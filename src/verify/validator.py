"""Validation of Elixir scripts and Livebook notebooks against real module exports.

Each file is read, reduced to its executable code (notebooks only), parsed
and walked for aliases and remote calls. Calls are resolved through the
file's aliases and then checked: a call passes when its module starts with
an allowed prefix or when the exports backend reports the function under
any arity.
"""

from __future__ import annotations

import concurrent.futures
import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Protocol

from contract.results import FileError, ValidationReport, ValidationResult
from exports.factory import build_exports
from exports.registry import ExportsIndex, PreloadingExportsIndex
from notebook.extractor import extract_executable_code
from parse.regex_fallback import fallback_calls
from parse.treesitter_elixir import ParseError, parse_source
from parse.walker import walk
from rules.config import ApiCheckConfig, build_config, load_config
from rules.defaults import DEFAULT_ALLOWED_MODULES
from scan.files import find_source_files
from utils import display_path

logger = logging.getLogger(__name__)

DocumentKind = Literal["plain-source", "notebook"]


class CheckedCall(Protocol):
    """A resolved call, from either the syntax tree or the regex fallback."""

    @property
    def module(self) -> str: ...

    @property
    def function(self) -> str: ...

    def render(self) -> str: ...


@dataclass(frozen=True)
class SourceDocument:
    path: Path
    text: str
    kind: DocumentKind

    def executable_text(self) -> str:
        if self.kind == "notebook":
            return extract_executable_code(self.text)
        return self.text


@dataclass(frozen=True)
class ExtractedFile:
    """Resolved calls of one file, before classification."""

    file: str
    calls: tuple[CheckedCall, ...]
    parse_error: ParseError | None = None

    @property
    def fallback(self) -> bool:
        return self.parse_error is not None


def read_document(path: Path, notebook_suffixes: Sequence[str]) -> SourceDocument:
    """Read a file; raises OSError or UnicodeDecodeError when unreadable."""
    kind: DocumentKind = (
        "notebook" if path.suffix in notebook_suffixes else "plain-source"
    )
    return SourceDocument(path=path, text=path.read_text(encoding="utf-8"), kind=kind)


def extract_calls(document: SourceDocument, display_name: str) -> ExtractedFile:
    """Parse a document and resolve its calls, falling back to regex scanning."""
    code = document.executable_text()
    outcome = parse_source(code)

    if isinstance(outcome, ParseError):
        logger.debug("%s: %s; using regex fallback", display_name, outcome)
        return ExtractedFile(
            file=display_name,
            calls=tuple(fallback_calls(code)),
            parse_error=outcome,
        )

    return ExtractedFile(
        file=display_name, calls=tuple(walk(outcome).resolved_calls())
    )


def is_allowed_module(module: str, allowed_prefixes: Iterable[str]) -> bool:
    return any(module.startswith(prefix) for prefix in allowed_prefixes)


class Validator:
    """Classifies the calls of a set of files as valid or invalid."""

    def __init__(
        self,
        exports: ExportsIndex,
        *,
        allowed_modules: Sequence[str] = (),
        notebook_suffixes: Sequence[str] = (".livemd",),
        workers: int | None = None,
        root: Path | None = None,
    ) -> None:
        self._exports = exports
        self.allowed_prefixes = (*allowed_modules, *DEFAULT_ALLOWED_MODULES)
        self._notebook_suffixes = tuple(notebook_suffixes)
        self._workers = workers
        self._root = root

    @classmethod
    def from_config(
        cls,
        config: ApiCheckConfig,
        exports: ExportsIndex,
        *,
        root: Path | None = None,
    ) -> Validator:
        return cls(
            exports,
            allowed_modules=config.allowed_modules,
            notebook_suffixes=config.notebook_suffixes,
            workers=config.workers,
            root=root,
        )

    def _display_name(self, path: Path) -> str:
        return display_path(path, self._root)

    def _extract_path(self, path: Path) -> ExtractedFile | FileError:
        display_name = self._display_name(path)
        try:
            document = read_document(path, self._notebook_suffixes)
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("%s: unreadable: %s", display_name, exc)
            return FileError(file=display_name, message=f"unreadable: {exc}")
        return extract_calls(document, display_name)

    def function_exists(self, module: str, function: str) -> bool:
        try:
            return self._exports.function_exists(module, function)
        except Exception as exc:
            logger.warning(
                "Existence check for %s.%s failed: %s", module, function, exc
            )
            return False

    def is_valid_call(self, module: str, function: str) -> bool:
        if is_allowed_module(module, self.allowed_prefixes):
            return True
        return self.function_exists(module, function)

    def classify(self, extracted: ExtractedFile) -> ValidationResult:
        calls = sorted({call.render() for call in extracted.calls})
        invalid = sorted(
            {
                call.render()
                for call in extracted.calls
                if not self.is_valid_call(call.module, call.function)
            }
        )
        return ValidationResult(
            file=extracted.file,
            calls=tuple(calls),
            invalid=tuple(invalid),
            fallback=extracted.fallback,
        )

    def _extract_all(self, paths: Sequence[Path]) -> list[ExtractedFile | FileError]:
        outcomes: list[ExtractedFile | FileError] = []
        with concurrent.futures.ThreadPoolExecutor(
            max_workers=self._workers
        ) as executor:
            futures_map = {
                executor.submit(self._extract_path, path): path for path in paths
            }

            for future in concurrent.futures.as_completed(futures_map):
                path = futures_map[future]
                try:
                    outcomes.append(future.result())
                except Exception as exc:
                    display_name = self._display_name(path)
                    logger.error("%s: extraction failed: %s", display_name, exc)
                    outcomes.append(
                        FileError(
                            file=display_name, message=f"extraction failed: {exc}"
                        )
                    )
        return outcomes

    def _preload(self, extracted: Sequence[ExtractedFile]) -> None:
        if not isinstance(self._exports, PreloadingExportsIndex):
            return
        modules = {
            call.module
            for item in extracted
            for call in item.calls
            if not is_allowed_module(call.module, self.allowed_prefixes)
        }
        if modules:
            self._exports.preload(modules)

    def validate(self, paths: Iterable[Path]) -> ValidationReport:
        """Validate every path; file-level failures never abort the batch."""
        unique_paths = sorted(set(paths))
        outcomes = self._extract_all(unique_paths)

        extracted = [item for item in outcomes if isinstance(item, ExtractedFile)]
        errors = [item for item in outcomes if isinstance(item, FileError)]

        self._preload(extracted)

        results = sorted(
            (self.classify(item) for item in extracted), key=lambda r: r.file
        )
        errors.sort(key=lambda error: error.file)
        logger.info(
            "Validated %d file(s): %d invalid, %d unreadable",
            len(results),
            sum(1 for result in results if not result.valid),
            len(errors),
        )
        return ValidationReport(results=tuple(results), errors=tuple(errors))


def validate(
    paths: Iterable[Path],
    allowed_name_prefixes: Any,
    exports: ExportsIndex,
    *,
    notebook_suffixes: Any = None,
    workers: Any = None,
    root: Path | None = None,
) -> ValidationReport:
    """Validate files against ``exports``, accepting ``allowed_name_prefixes``.

    Options are checked before any file is touched.

    Raises:
        ConfigError: If an option has the wrong type or value.
    """
    options: dict[str, Any] = {"allowed_modules": allowed_name_prefixes}
    if notebook_suffixes is not None:
        options["notebook_suffixes"] = notebook_suffixes
    if workers is not None:
        options["workers"] = workers
    config = build_config(options)
    return Validator.from_config(config, exports, root=root).validate(paths)


def validate_project(
    root: Path,
    *,
    config: ApiCheckConfig | None = None,
    exports: ExportsIndex | None = None,
) -> ValidationReport:
    """Discover and validate the files of a project.

    Raises:
        ConfigError: If apicheck.toml or the exports backend is misconfigured.
    """
    if config is None:
        config = load_config(root)
    if exports is None:
        exports = build_exports(config.exports, root)

    paths = list(
        find_source_files(
            root,
            patterns=config.file_patterns,
            exclude_prefixes=config.exclude_patterns,
            respect_gitignore=config.respect_gitignore,
        )
    )
    return Validator.from_config(config, exports, root=root).validate(paths)


__all__ = [
    "ExtractedFile",
    "SourceDocument",
    "Validator",
    "extract_calls",
    "is_allowed_module",
    "read_document",
    "validate",
    "validate_project",
]
