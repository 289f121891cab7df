"""Function-existence capabilities backed by static data."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Protocol, runtime_checkable

import orjson

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping
    from pathlib import Path

_ELIXIR_MODULE = re.compile(r"^[A-Z][A-Za-z0-9_]*(?:\.[A-Z][A-Za-z0-9_]*)*$")
_ERLANG_MODULE = re.compile(r"^:[a-z_][A-Za-z0-9_@]*$")
_SIGNATURE = re.compile(r"^(?P<name>[^/\s]+)/(?P<arity>\d+)$")

ExportsTable = dict[str, dict[str, frozenset[int]]]


@runtime_checkable
class ExportsIndex(Protocol):
    """Answers whether a module exports a function, under any arity.

    Implementations never raise: an unknown or unloadable module simply has
    no exports.
    """

    def function_exists(self, module: str, function: str) -> bool: ...


@runtime_checkable
class PreloadingExportsIndex(ExportsIndex, Protocol):
    """An index that can answer many modules in one batch up front."""

    def preload(self, modules: Iterable[str]) -> None: ...


def is_valid_module_name(module: str) -> bool:
    """Return True for ``Foo.Bar`` style or ``:erlang`` style module names.

    Examples:
        >>> is_valid_module_name("Azure.EventHubs")
        True
        >>> is_valid_module_name(":crypto")
        True
        >>> is_valid_module_name("azure.hubs")
        False
    """
    return bool(_ELIXIR_MODULE.match(module) or _ERLANG_MODULE.match(module))


def parse_signature(signature: str) -> tuple[str, int] | None:
    """Split ``"fun/2"`` into ``("fun", 2)``; None when malformed."""
    match = _SIGNATURE.match(signature.strip())
    if match is None:
        return None
    return match.group("name"), int(match.group("arity"))


class StaticExports:
    """In-memory exports table: module -> function -> arities."""

    def __init__(self, table: Mapping[str, Mapping[str, Iterable[int]]] | None = None):
        self._table: ExportsTable = {
            module: {name: frozenset(arities) for name, arities in functions.items()}
            for module, functions in (table or {}).items()
        }

    @classmethod
    def from_signatures(cls, modules: Mapping[str, Iterable[str]]) -> StaticExports:
        """Build from ``{"Module": ["fun/1"]}``, skipping malformed entries."""
        table: dict[str, dict[str, set[int]]] = {}
        for module, signatures in modules.items():
            functions = table.setdefault(module, {})
            for signature in signatures:
                parsed = parse_signature(signature)
                if parsed is None:
                    continue
                name, arity = parsed
                functions.setdefault(name, set()).add(arity)
        return cls(table)

    @property
    def modules(self) -> list[str]:
        return sorted(self._table)

    def arities(self, module: str, function: str) -> frozenset[int]:
        return self._table.get(module, {}).get(function, frozenset())

    def function_exists(self, module: str, function: str) -> bool:
        if not is_valid_module_name(module):
            return False
        return bool(self.arities(module, function))


class NullExports:
    """Backend that knows no modules; only allowed prefixes pass."""

    def function_exists(self, module: str, function: str) -> bool:
        return False


class ManifestError(Exception):
    """Raised when an exports manifest cannot be read or has the wrong shape."""


def load_manifest(path: Path) -> StaticExports:
    """Load a JSON manifest of the form ``{"Module": ["fun/arity", ...]}``."""
    try:
        data = orjson.loads(path.read_bytes())
    except OSError as exc:
        msg = f"Failed to read exports manifest {path}: {exc}"
        raise ManifestError(msg) from exc
    except orjson.JSONDecodeError as exc:
        msg = f"Invalid JSON in exports manifest {path}: {exc}"
        raise ManifestError(msg) from exc

    if not isinstance(data, dict):
        msg = f"Exports manifest {path} must be an object of module -> signatures"
        raise ManifestError(msg)

    for module, signatures in data.items():
        if not isinstance(signatures, list) or not all(
            isinstance(signature, str) for signature in signatures
        ):
            msg = f"Exports manifest {path}: '{module}' must map to a list of strings"
            raise ManifestError(msg)

    return StaticExports.from_signatures(data)


__all__ = [
    "ExportsIndex",
    "ManifestError",
    "NullExports",
    "PreloadingExportsIndex",
    "StaticExports",
    "is_valid_module_name",
    "load_manifest",
    "parse_signature",
]
