"""Static module-name lists shared by resolution and validation."""

from __future__ import annotations

# Module prefixes that are always accepted without an existence check.
DEFAULT_ALLOWED_MODULES: tuple[str, ...] = (
    "Enum",
    "String",
    "Map",
    "List",
    "Kernel",
    "IO",
    "File",
    "System",
    "Process",
    "Logger",
    "Stream",
    "Agent",
    "Task",
    "GenServer",
    "Supervisor",
    "Application",
    "Code",
    "Module",
    "Regex",
    "URI",
    "Path",
    "DateTime",
    "NaiveDateTime",
    "Date",
    "Time",
    "Integer",
    "Float",
    "Keyword",
    "Exception",
    "Range",
    "Mix",
    ":crypto",
    ":base64",
    ":timer",
    ":telemetry",
    "Kino",
    "Jason",
    "Req",
    "Broadway",
    "Flow",
    "ExUnit",
    "SweetXml",
    "X509",
    "Bandit",
    "Avrora",
)

# Names that must never be qualified with the enclosing namespace.
RESERVED_NAMES: frozenset[str] = frozenset(
    {
        *(name for name in DEFAULT_ALLOWED_MODULES if not name.startswith(":")),
        "Access",
        "Atom",
        "Base",
        "Bitwise",
        "Calendar",
        "Config",
        "DynamicSupervisor",
        "Enumerable",
        "Function",
        "IEx",
        "Inspect",
        "Macro",
        "MapSet",
        "Node",
        "OptionParser",
        "PartitionSupervisor",
        "Port",
        "Protocol",
        "Record",
        "Registry",
        "StringIO",
        "Tuple",
        "Version",
        "ArgumentError",
        "RuntimeError",
        "KeyError",
    }
)

__all__ = ["DEFAULT_ALLOWED_MODULES", "RESERVED_NAMES"]
