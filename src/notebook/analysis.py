"""Markdown analysis of extracted notebook code."""

from __future__ import annotations

from typing import TYPE_CHECKING

from parse.name_resolution import resolve_call
from parse.treesitter_elixir import ParseError, parse_source
from parse.walker import walk

if TYPE_CHECKING:
    from pathlib import Path

    from parse.walker import WalkResult

_INDEPENDENT_CELLS_NOTE = (
    "> This might be because livebook cells are independent and some may "
    "have incomplete expressions."
)


def _site_text(module: str, function: str, arity: int | None) -> str:
    call = f"{module}.{function}"
    return call if arity is None else f"{call}/{arity}"


def _analysis_lines(result: WalkResult) -> list[str]:
    lines = ["## Analysis", "", "**Code is syntactically valid Elixir**", ""]

    bindings = sorted(result.aliases.bindings.items())
    if bindings:
        lines.append(f"### Aliases ({len(bindings)})")
        lines.append("")
        lines.extend(f"- `{short}` → `{full}`" for short, full in bindings)
        lines.append("")

    if result.calls:
        lines.append(f"### Module Function Calls ({len(result.calls)})")
        lines.append("")
        sites = sorted(
            result.calls,
            key=lambda site: (site.module, site.function, site.arity or -1),
        )
        for site in sites:
            literal = _site_text(site.module, site.function, site.arity)
            resolved = resolve_call(site, result.aliases)
            if resolved.aliased:
                lines.append(f"- `{literal}` → `{resolved.render()}`")
            else:
                lines.append(f"- `{literal}`")
        lines.append("")

    return lines


def _error_lines(error: ParseError) -> list[str]:
    return [
        "## Analysis",
        "",
        "**Code has syntax errors:**",
        "",
        f"- **Line {error.line}:** {error.message}",
        "",
        _INDEPENDENT_CELLS_NOTE,
        "",
    ]


def render_analysis(path: Path | str, code: str) -> str:
    """Render extracted code plus its aliases and calls as a markdown document.

    When the code does not parse, the first syntax error is reported instead
    of the aliases and calls.
    """
    lines = [
        "# Extracted Code Analysis",
        "",
        f"**Source:** `{path}`",
        "",
        "## Extracted Executable Code",
        "",
        "```elixir",
        code,
        "```",
        "",
    ]

    outcome = parse_source(code)
    if isinstance(outcome, ParseError):
        lines.extend(_error_lines(outcome))
    else:
        lines.extend(_analysis_lines(walk(outcome)))

    return "\n".join(lines)


__all__ = ["render_analysis"]
