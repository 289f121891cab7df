"""Tagged syntax shapes recognised in Elixir trees.

Every tree-sitter node is classified into at most one shape. The order of
checks in ``classify`` is significant: alias statements are matched before
anything else so that ``alias Foo.Bar`` is never mistaken for a remote call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tree_sitter import Node

    from parse.treesitter_elixir import ParsedSource


@dataclass(frozen=True)
class CallSite:
    """One ``Module.function`` occurrence; ``module`` is the literal source text."""

    module: str
    function: str
    arity: int | None = None


@dataclass(frozen=True)
class AliasStatement:
    """``alias A.B.C`` or ``alias A.B.C, as: D``."""

    target: str
    as_name: str | None = None

    @property
    def short_name(self) -> str:
        if self.as_name:
            return self.as_name
        return self.target.rsplit(".", 1)[-1]

    def bindings(self) -> list[tuple[str, str]]:
        return [(self.short_name, self.target)]


@dataclass(frozen=True)
class GroupAliasStatement:
    """``alias A.B.{X, Y}``."""

    base: str
    members: tuple[str, ...]

    def bindings(self) -> list[tuple[str, str]]:
        return [
            (member.rsplit(".", 1)[-1], f"{self.base}.{member}")
            for member in self.members
        ]


@dataclass(frozen=True)
class UnsupportedAlias:
    """An alias form outside the supported set (e.g. ``alias __MODULE__.X``)."""

    source: str

    def bindings(self) -> list[tuple[str, str]]:
        return []


@dataclass(frozen=True)
class ModuleDefinition:
    """``defmodule Name do ... end``."""

    name: str


@dataclass(frozen=True)
class RemoteCall:
    """``Module.function(...)``, ``Module.function`` or ``&Module.function/n``."""

    site: CallSite


AliasShape = AliasStatement | GroupAliasStatement | UnsupportedAlias
SyntaxShape = AliasShape | ModuleDefinition | RemoteCall


def _child_of_type(node: Node, node_type: str) -> Node | None:
    for child in node.children:
        if child.type == node_type:
            return child
    return None


def _argument_nodes(node: Node) -> list[Node] | None:
    """Return the argument nodes of a call, or None when it has no argument list."""
    arguments = _child_of_type(node, "arguments")
    if arguments is None:
        return None
    return [child for child in arguments.named_children if child.type != "comment"]


def _local_call_name(parsed: ParsedSource, node: Node) -> str | None:
    if node.type != "call":
        return None
    target = node.child_by_field_name("target")
    if target is None or target.type != "identifier":
        return None
    return parsed.text(target)


def literal_module_name(parsed: ParsedSource, node: Node | None) -> str | None:
    """Return the dotted module name spelled by ``node``, if it is a literal one."""
    if node is None:
        return None

    if node.type == "alias":
        return "".join(parsed.text(node).split())

    if node.type == "dot":
        right = node.child_by_field_name("right")
        if right is None or right.type != "alias":
            return None
        left_name = literal_module_name(parsed, node.child_by_field_name("left"))
        right_name = literal_module_name(parsed, right)
        if left_name and right_name:
            return f"{left_name}.{right_name}"

    return None


def _keyword_value(parsed: ParsedSource, args: list[Node], key: str) -> Node | None:
    for arg in args:
        if arg.type != "keywords":
            continue
        for pair in arg.named_children:
            if pair.type != "pair":
                continue
            key_node = pair.child_by_field_name("key")
            if key_node is None:
                continue
            if parsed.text(key_node).strip().rstrip(":") == key:
                return pair.child_by_field_name("value")
    return None


def _classify_alias(parsed: ParsedSource, node: Node) -> AliasShape:
    args = _argument_nodes(node) or []
    if not args:
        return UnsupportedAlias(source=parsed.text(node))

    first = args[0]
    target = literal_module_name(parsed, first)
    if target is not None:
        as_node = _keyword_value(parsed, args[1:], "as")
        as_name = literal_module_name(parsed, as_node) if as_node is not None else None
        return AliasStatement(target=target, as_name=as_name)

    if first.type == "dot":
        right = first.child_by_field_name("right")
        base = literal_module_name(parsed, first.child_by_field_name("left"))
        if base is not None and right is not None and right.type == "tuple":
            members = tuple(
                member
                for member in (
                    literal_module_name(parsed, child) for child in right.named_children
                )
                if member
            )
            return GroupAliasStatement(base=base, members=members)

    return UnsupportedAlias(source=parsed.text(node))


def _is_captured(parsed: ParsedSource, node: Node) -> bool:
    """True for the ``Mod.fun`` in ``&Mod.fun/2``."""
    parent = node.parent
    if parent is None or parent.type != "binary_operator":
        return False
    operator = parent.child_by_field_name("operator")
    left = parent.child_by_field_name("left")
    if operator is None or parsed.text(operator) != "/":
        return False
    if left is None:
        return False
    if (left.start_byte, left.end_byte) != (node.start_byte, node.end_byte):
        return False

    grandparent = parent.parent
    if grandparent is None or grandparent.type != "unary_operator":
        return False
    capture = grandparent.child_by_field_name("operator")
    return capture is not None and parsed.text(capture) == "&"


def _classify_remote_call(parsed: ParsedSource, node: Node) -> RemoteCall | None:
    target = node.child_by_field_name("target")
    if target is None or target.type != "dot":
        return None

    right = target.child_by_field_name("right")
    if right is None or right.type != "identifier":
        return None

    module = literal_module_name(parsed, target.child_by_field_name("left"))
    if module is None:
        return None

    args = _argument_nodes(node)
    has_do_block = _child_of_type(node, "do_block") is not None

    arity: int | None
    if args is None and not has_do_block and _is_captured(parsed, node):
        arity = None
    else:
        arity = len(args or []) + (1 if has_do_block else 0)

    return RemoteCall(
        site=CallSite(module=module, function=parsed.text(right), arity=arity)
    )


def classify(parsed: ParsedSource, node: Node) -> SyntaxShape | None:
    """Classify a node into a syntax shape, or None for pass-through nodes."""
    if node.type != "call":
        return None

    local_name = _local_call_name(parsed, node)
    if local_name == "alias":
        return _classify_alias(parsed, node)

    if local_name == "defmodule":
        args = _argument_nodes(node) or []
        name = literal_module_name(parsed, args[0]) if args else None
        return ModuleDefinition(name=name) if name else None

    return _classify_remote_call(parsed, node)


__all__ = [
    "AliasShape",
    "AliasStatement",
    "CallSite",
    "GroupAliasStatement",
    "ModuleDefinition",
    "RemoteCall",
    "SyntaxShape",
    "UnsupportedAlias",
    "classify",
    "literal_module_name",
]
