"""Tree-sitter parser for Elixir source text."""

from __future__ import annotations

import threading
from dataclasses import dataclass

from tree_sitter import Language, Node, Parser, Tree
from tree_sitter_elixir import language as get_elixir_language

_LANGUAGE = Language(get_elixir_language())
_LOCAL = threading.local()


def _get_parser() -> Parser:
    """Return this thread's Tree-sitter parser for Elixir.

    Parsers are not thread-safe, so each worker thread gets its own.
    """
    parser: Parser | None = getattr(_LOCAL, "parser", None)
    if parser is None:
        parser = Parser(_LANGUAGE)
        _LOCAL.parser = parser

    return parser


@dataclass(frozen=True)
class ParsedSource:
    """A syntax tree together with the bytes it was parsed from."""

    tree: Tree
    source_bytes: bytes

    @property
    def root_node(self) -> Node:
        return self.tree.root_node

    def text(self, node: Node) -> str:
        return decode_node_text(self.source_bytes, node)


@dataclass(frozen=True)
class ParseError:
    """First syntax error found in a source text (1-based line)."""

    line: int
    message: str

    def __str__(self) -> str:
        return f"line {self.line}: {self.message}"


def decode_node_text(source_bytes: bytes, node: Node) -> str:
    return source_bytes[node.start_byte : node.end_byte].decode("utf8", errors="ignore")


def _first_error_node(node: Node) -> Node | None:
    if node.is_error or node.is_missing:
        return node
    for child in node.children:
        if not child.has_error and not child.is_missing:
            continue
        found = _first_error_node(child)
        if found is not None:
            return found
    return None


def _describe_error(source_bytes: bytes, node: Node) -> str:
    if node.is_missing:
        return f"missing {node.type}"
    snippet = decode_node_text(source_bytes, node).strip().splitlines()
    if not snippet:
        return "syntax error"
    token = snippet[0]
    if len(token) > 40:
        token = f"{token[:40]}..."
    return f"syntax error before: {token}"


def parse_source(text: str) -> ParsedSource | ParseError:
    """Parse Elixir text.

    Tree-sitter always produces a tree; a tree containing ERROR or MISSING
    nodes is reported as a ParseError pointing at the first offending node.
    """
    source_bytes = text.encode("utf8")
    tree = _get_parser().parse(source_bytes)
    root_node = tree.root_node

    if not root_node.has_error:
        return ParsedSource(tree=tree, source_bytes=source_bytes)

    error_node = _first_error_node(root_node) or root_node
    return ParseError(
        line=error_node.start_point[0] + 1,
        message=_describe_error(source_bytes, error_node),
    )


__all__ = ["ParseError", "ParsedSource", "decode_node_text", "parse_source"]
