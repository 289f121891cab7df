"""Shared utilities for"""

from __future__ import annotations

from pathlib import Path


def display_path(file_path: str | Path, root: Path | None = None) -> str:
    """Render a file path for reports, relative to ``root`` when possible.

    Args:
        file_path: Path of a validated file (absolute or relative)
        root: Project root the path should be shown relative to

    Returns:
        POSIX-style path string (e.g., "notebooks/intro.livemd")

    Examples:
        >>> display_path(Path("/work/app/scripts/seed.exs"), Path("/work/app"))
        'scripts/seed.exs'
        >>> display_path(Path("/elsewhere/seed.exs"), Path("/work/app"))
        '/elsewhere/seed.exs'
        >>> display_path("notes\\\\intro.livemd")
        'notes/intro.livemd'
    """
    path = Path(str(file_path).replace("\\", "/"))
    if root is not None:
        try:
            return path.relative_to(root).as_posix()
        except ValueError:
            pass
    return path.as_posix()


def percentage(count: int, total: int) -> float:
    """Share of ``count`` in ``total`` as a percentage rounded to one decimal.

    Examples:
        >>> percentage(1, 3)
        33.3
        >>> percentage(0, 0)
        0.0
    """
    if total <= 0:
        return 0.0
    return round(count * 100 / total, 1)
