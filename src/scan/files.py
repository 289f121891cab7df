"""File discovery utilities for"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, cast

from gitignore_parser import parse_gitignore  # type: ignore[import-untyped]

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from pathlib import Path

logger = logging.getLogger(__name__)

_BRACE_GROUP = re.compile(r"\{([^{}]*)\}")


def expand_braces(pattern: str) -> list[str]:
    """Expand ``{a,b}`` alternatives in a glob pattern.

    Examples:
        >>> expand_braces("**/*.{exs,livemd}")
        ['**/*.exs', '**/*.livemd']
        >>> expand_braces("lib/**/*.ex")
        ['lib/**/*.ex']
    """
    match = _BRACE_GROUP.search(pattern)
    if match is None:
        return [pattern]

    head, tail = pattern[: match.start()], pattern[match.end() :]
    expanded: list[str] = []
    for option in match.group(1).split(","):
        expanded.extend(expand_braces(f"{head}{option}{tail}"))
    return expanded


def _should_include_file(
    path: Path,
    directory: Path,
    gitignore_matches: Callable[[str], bool] | None,
    exclude_prefixes: list[str] | None,
) -> bool:
    """Check if a file should be included based on all filtering rules."""
    if not path.is_file() or path.is_symlink():
        return False

    if not _is_within_root(path, directory):
        return False

    try:
        rel_path_str = path.relative_to(directory).as_posix()
    except ValueError:
        return False

    if exclude_prefixes and any(
        rel_path_str.startswith(prefix) for prefix in exclude_prefixes
    ):
        return False

    return not (gitignore_matches is not None and gitignore_matches(str(path)))


def _is_within_root(path: Path, root: Path) -> bool:
    """Return True when the resolved path stays within the resolved root."""
    try:
        root_resolved = root.resolve()
        path_resolved = path.resolve()
    except OSError:
        return False

    try:
        path_resolved.relative_to(root_resolved)
    except ValueError:
        return False

    return True


def _build_gitignore_matcher(root: Path) -> Callable[[str], bool] | None:
    gitignore_path = root / ".gitignore"
    if gitignore_path.is_file():
        return cast("Callable[[str], bool]", parse_gitignore(gitignore_path))
    return None


def find_source_files(
    directory: Path,
    *,
    patterns: list[str],
    exclude_prefixes: list[str] | None = None,
    respect_gitignore: bool = False,
) -> Iterator[Path]:
    """Find files matching glob patterns under a directory.

    Args:
        directory: Directory to search
        patterns: Glob patterns relative to ``directory``; ``{a,b}``
            alternatives are expanded
        exclude_prefixes: Relative POSIX path prefixes to skip
            (e.g. ``"_build/"``)
        respect_gitignore: Also skip files ignored by the root .gitignore

    Yields:
        Unique paths, sorted lexicographically by relative path.
    """
    gitignore_matches = (
        _build_gitignore_matcher(directory) if respect_gitignore else None
    )

    candidates: set[Path] = set()
    for pattern in patterns:
        for expanded in expand_braces(pattern):
            candidates.update(directory.glob(expanded))

    matched_files = [
        path
        for path in candidates
        if _should_include_file(path, directory, gitignore_matches, exclude_prefixes)
    ]

    matched_files.sort(key=lambda p: p.relative_to(directory).as_posix())
    logger.debug("Discovered %d file(s) under %s", len(matched_files), directory)

    yield from matched_files


__all__ = ["expand_braces", "find_source_files"]
