"""Parsing, alias harvesting and name resolution for"""

from parse.name_resolution import (
    AliasTable,
    ResolvedCall,
    resolve_alias,
    resolve_call,
    resolve_dotted,
)
from parse.regex_fallback import fallback_calls, parse_aliases, scan_calls
from parse.syntax import CallSite, classify
from parse.treesitter_elixir import ParsedSource, ParseError, parse_source
from parse.walker import WalkResult, walk

__all__ = [
    "AliasTable",
    "CallSite",
    "ParseError",
    "ParsedSource",
    "ResolvedCall",
    "WalkResult",
    "classify",
    "fallback_calls",
    "parse_aliases",
    "parse_source",
    "resolve_alias",
    "resolve_call",
    "resolve_dotted",
    "scan_calls",
    "walk",
]
