"""Alias tables and module-name resolution."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from parse.syntax import CallSite
from rules.defaults import RESERVED_NAMES


@dataclass(frozen=True)
class AliasTable:
    """Per-file alias bindings: short name -> fully-qualified module name.

    ``namespace`` is the enclosing module of the file, used to qualify bare
    single-segment names that have no explicit binding.
    """

    bindings: dict[str, str] = field(default_factory=dict)
    namespace: str | None = None

    @classmethod
    def from_bindings(
        cls,
        pairs: Iterable[tuple[str, str]],
        namespace: str | None = None,
    ) -> AliasTable:
        """Build a table from (short, full) pairs in source order; later pairs win."""
        bindings: dict[str, str] = {}
        for short_name, full_name in pairs:
            bindings[short_name] = full_name
        return cls(bindings=bindings, namespace=namespace)

    def get(self, short_name: str) -> str | None:
        return self.bindings.get(short_name)

    def __len__(self) -> int:
        return len(self.bindings)


@dataclass(frozen=True)
class ResolvedCall:
    """A call site paired with the module name it resolves to."""

    site: CallSite
    module: str

    @property
    def function(self) -> str:
        return self.site.function

    @property
    def aliased(self) -> bool:
        return self.module != self.site.module

    def render(self) -> str:
        """Render as ``Module.fun`` or ``Module.fun/arity``."""
        call = f"{self.module}.{self.site.function}"
        if self.site.arity is None:
            return call
        return f"{call}/{self.site.arity}"


def resolve_alias(module: str, table: AliasTable) -> str:
    """Resolve a literal module name through an alias table.

    Precedence: explicit alias, then the enclosing namespace for bare
    non-reserved names, then the literal name itself.

    Examples:
        >>> table = AliasTable({"EventData": "Azure.EventHubs.EventData"})
        >>> resolve_alias("EventData", table)
        'Azure.EventHubs.EventData'
        >>> resolve_alias("EventData.Body", table)
        'Azure.EventHubs.EventData.Body'
        >>> resolve_alias("UnknownModule", AliasTable())
        'UnknownModule'
        >>> resolve_alias("Helper", AliasTable(namespace="MyApp.Worker"))
        'MyApp.Worker.Helper'
        >>> resolve_alias("Enum", AliasTable(namespace="MyApp.Worker"))
        'Enum'
    """
    first, _, rest = module.partition(".")

    aliased_module = table.get(first)
    if aliased_module is not None:
        return f"{aliased_module}.{rest}" if rest else aliased_module

    if not rest and first not in RESERVED_NAMES and table.namespace:
        return f"{table.namespace}.{first}"

    return module


def resolve_call(site: CallSite, table: AliasTable) -> ResolvedCall:
    return ResolvedCall(site=site, module=resolve_alias(site.module, table))


def resolve_dotted(call: str, table: AliasTable) -> str:
    """Resolve the module part of a dotted ``Module.fun`` string.

    Examples:
        >>> resolve_dotted("Hubs.send", AliasTable({"Hubs": "Azure.EventHubs"}))
        'Azure.EventHubs.send'
    """
    module, sep, function = call.rpartition(".")
    if not sep:
        return call
    return f"{resolve_alias(module, table)}.{function}"


__all__ = [
    "AliasTable",
    "ResolvedCall",
    "resolve_alias",
    "resolve_call",
    "resolve_dotted",
]
