"""Function-existence capabilities for Elixir modules."""

from exports.factory import build_exports
from exports.mix import MixExports
from exports.registry import (
    ExportsIndex,
    ManifestError,
    NullExports,
    PreloadingExportsIndex,
    StaticExports,
    is_valid_module_name,
    load_manifest,
)

__all__ = [
    "ExportsIndex",
    "ManifestError",
    "MixExports",
    "NullExports",
    "PreloadingExportsIndex",
    "build_exports",
    "StaticExports",
    "is_valid_module_name",
    "load_manifest",
]
