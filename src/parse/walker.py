"""Single-pass harvesting of aliases and remote calls from an Elixir tree."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from parse.name_resolution import AliasTable, ResolvedCall, resolve_call
from parse.syntax import (
    AliasStatement,
    CallSite,
    GroupAliasStatement,
    ModuleDefinition,
    RemoteCall,
    UnsupportedAlias,
    classify,
)

if TYPE_CHECKING:
    from tree_sitter import Node

    from parse.treesitter_elixir import ParsedSource


@dataclass
class _WalkState:
    bindings: list[tuple[str, str]] = field(default_factory=list)
    calls: set[CallSite] = field(default_factory=set)
    namespace: str | None = None


@dataclass(frozen=True)
class WalkResult:
    """Aliases and call sites harvested from one tree."""

    aliases: AliasTable
    calls: frozenset[CallSite]

    def resolved_calls(self) -> list[ResolvedCall]:
        """Resolve every call site against this file's alias table."""
        resolved = [resolve_call(site, self.aliases) for site in self.calls]
        resolved.sort(key=lambda call: (call.render(), call.site.module))
        return resolved


def _traverse(node: Node, *, parsed: ParsedSource, state: _WalkState) -> None:
    shape = classify(parsed, node)

    if isinstance(shape, (AliasStatement, GroupAliasStatement, UnsupportedAlias)):
        state.bindings.extend(shape.bindings())
        return

    if isinstance(shape, ModuleDefinition):
        if state.namespace is None:
            state.namespace = shape.name
    elif isinstance(shape, RemoteCall):
        state.calls.add(shape.site)

    for child in node.children:
        _traverse(child, parsed=parsed, state=state)


def walk(parsed: ParsedSource) -> WalkResult:
    """Collect alias bindings and remote call sites in source order.

    Alias statements are consumed whole and never counted as calls. Later
    aliases for the same short name override earlier ones. The first
    ``defmodule`` seen provides the enclosing namespace.
    """
    state = _WalkState()
    _traverse(parsed.root_node, parsed=parsed, state=state)
    return WalkResult(
        aliases=AliasTable.from_bindings(state.bindings, namespace=state.namespace),
        calls=frozenset(state.calls),
    )


__all__ = ["WalkResult", "walk"]
