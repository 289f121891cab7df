"""Regex-based call and alias detection for text the parser rejects.

This path is best-effort: it cannot see arities and may over- or
under-report, but it lets a fragment that does not parse on its own still
produce a result.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from parse.name_resolution import AliasTable, resolve_dotted

_CALL_PATTERN = re.compile(r"([A-Z][A-Za-z0-9._]*\.[a-z_][a-z0-9_!?]*)\s*[(\[]")
_ALIAS_PATTERN = re.compile(
    r"\balias\s+([A-Z][A-Za-z0-9_]*(?:\.[A-Z][A-Za-z0-9_]*)*)(?![\w.])"
    r"(?:\s*,\s*as:\s*([A-Z][A-Za-z0-9_.]*))?"
)
_GROUP_ALIAS_PATTERN = re.compile(
    r"\balias\s+([A-Z][A-Za-z0-9_]*(?:\.[A-Z][A-Za-z0-9_]*)*)\.\{([^}]+)\}"
)
_DEFMODULE_PATTERN = re.compile(
    r"defmodule\s+([A-Z][A-Za-z0-9_]*(?:\.[A-Z][A-Za-z0-9_]*)*)"
)


@dataclass(frozen=True)
class FallbackCall:
    """A dotted ``Module.fun`` string found by the regex scan."""

    call: str
    resolved: str

    @property
    def module(self) -> str:
        return self.resolved.rpartition(".")[0]

    @property
    def function(self) -> str:
        return self.resolved.rpartition(".")[2]

    @property
    def aliased(self) -> bool:
        return self.call != self.resolved

    def render(self) -> str:
        return self.resolved


def parse_aliases(content: str) -> AliasTable:
    """Scan single, renamed and group alias statements plus the first defmodule.

    Examples:
        >>> table = parse_aliases("alias A.B.{X, Y}\\nalias C.D, as: E")
        >>> sorted(table.bindings.items())
        [('E', 'C.D'), ('X', 'A.B.X'), ('Y', 'A.B.Y')]
    """
    pairs: list[tuple[int, str, str]] = []

    for match in _ALIAS_PATTERN.finditer(content):
        full_module, alias_name = match.group(1), match.group(2)
        short_name = alias_name or full_module.rsplit(".", 1)[-1]
        pairs.append((match.start(), short_name, full_module))

    for match in _GROUP_ALIAS_PATTERN.finditer(content):
        base_module = match.group(1)
        for member in match.group(2).split(","):
            member = member.strip()
            if not member:
                continue
            short_name = member.rsplit(".", 1)[-1]
            pairs.append((match.start(), short_name, f"{base_module}.{member}"))

    pairs.sort(key=lambda pair: pair[0])

    namespace_match = _DEFMODULE_PATTERN.search(content)
    return AliasTable.from_bindings(
        ((short, full) for _, short, full in pairs),
        namespace=namespace_match.group(1) if namespace_match else None,
    )


def scan_calls(content: str) -> list[str]:
    """Return the sorted, de-duplicated ``Module.fun`` strings in ``content``."""
    return sorted({match.group(1) for match in _CALL_PATTERN.finditer(content)})


def fallback_calls(content: str) -> list[FallbackCall]:
    """Scan ``content`` and resolve every call found through its aliases."""
    aliases = parse_aliases(content)
    return [
        FallbackCall(call=call, resolved=resolve_dotted(call, aliases))
        for call in scan_calls(content)
    ]


__all__ = ["FallbackCall", "fallback_calls", "parse_aliases", "scan_calls"]
