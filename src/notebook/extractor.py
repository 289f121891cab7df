"""Executable-code extraction for Livebook (.livemd) notebooks.

A notebook interleaves markdown with fenced code blocks. Only ```elixir
blocks are executable, and a block preceded by a
``<!-- livebook:{"force_markdown":true} -->`` directive is an illustration
that Livebook renders but never runs.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

FORCE_MARKDOWN_DIRECTIVE = '<!-- livebook:{"force_markdown":true}'

_EXECUTABLE_FENCE_OPEN = re.compile(r"^```elixir\s*$")
_ANY_FENCE_OPEN = re.compile(r"^```[\w+-]*\s*$")
_FENCE_CLOSE = re.compile(r"^```\s*$")


class BlockState(str, Enum):
    """Position of the extractor relative to fenced blocks."""

    OUTSIDE = "outside"
    IN_SUPPRESSED_MARKER = "in_suppressed_marker"
    IN_SUPPRESSED_BLOCK = "in_suppressed_block"
    IN_EXECUTABLE_BLOCK = "in_executable_block"


def _next_state(state: BlockState, line: str) -> tuple[BlockState, list[str]]:
    """Advance the state machine by one line.

    Returns the new state and the lines to emit for this step.
    """
    if state is BlockState.OUTSIDE:
        if FORCE_MARKDOWN_DIRECTIVE in line:
            return BlockState.IN_SUPPRESSED_MARKER, []
        if _EXECUTABLE_FENCE_OPEN.match(line):
            return BlockState.IN_EXECUTABLE_BLOCK, []
        return BlockState.OUTSIDE, []

    if state is BlockState.IN_SUPPRESSED_MARKER:
        if _ANY_FENCE_OPEN.match(line):
            return BlockState.IN_SUPPRESSED_BLOCK, []
        return BlockState.IN_SUPPRESSED_MARKER, []

    if state is BlockState.IN_SUPPRESSED_BLOCK:
        if _FENCE_CLOSE.match(line):
            return BlockState.OUTSIDE, []
        return BlockState.IN_SUPPRESSED_BLOCK, []

    if _FENCE_CLOSE.match(line):
        # Blank separator keeps consecutive cells syntactically independent.
        return BlockState.OUTSIDE, [""]
    return BlockState.IN_EXECUTABLE_BLOCK, [line]


def _trim_blank_lines(lines: list[str]) -> list[str]:
    start = 0
    end = len(lines)
    while start < end and not lines[start].strip():
        start += 1
    while end > start and not lines[end - 1].strip():
        end -= 1
    return lines[start:end]


def extract_executable_code(content: str) -> str:
    """Extract only the executable Elixir code from notebook text.

    Markdown, non-Elixir fences and blocks marked with the force_markdown
    directive are dropped. Executable blocks are kept verbatim, in order,
    separated by a single blank line. A block left open at the end of the
    document is closed implicitly.

    Examples:
        >>> doc = "# Title\\n```elixir\\nIO.puts(1)\\n```\\n"
        >>> extract_executable_code(doc)
        'IO.puts(1)'
        >>> extract_executable_code("")
        ''
    """
    state = BlockState.OUTSIDE
    executable: list[str] = []

    for line in content.splitlines():
        state, emitted = _next_state(state, line)
        executable.extend(emitted)

    return "\n".join(_trim_blank_lines(executable))


def extract_notebook_code(path: Path) -> str:
    """Read a notebook file and return its executable code."""
    return extract_executable_code(path.read_text(encoding="utf-8"))


__all__ = [
    "FORCE_MARKDOWN_DIRECTIVE",
    "BlockState",
    "extract_executable_code",
    "extract_notebook_code",
]
