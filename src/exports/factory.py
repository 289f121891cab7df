"""Build the configured existence-check backend."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from exports.mix import MixExports
from exports.registry import ManifestError, NullExports, load_manifest
from rules.config import ConfigError

if TYPE_CHECKING:
    from exports.registry import ExportsIndex
    from rules.config import ExportsConfig


def build_exports(config: ExportsConfig, root: Path) -> ExportsIndex:
    """Instantiate the backend named by ``config.backend``.

    Raises:
        ConfigError: If the manifest backend has no manifest or it cannot
            be loaded.
    """
    if config.backend == "none":
        return NullExports()

    if config.backend == "manifest":
        if not config.manifest:
            msg = "exports.manifest is required when exports.backend = 'manifest'"
            raise ConfigError(msg)
        manifest_path = Path(config.manifest).expanduser()
        if not manifest_path.is_absolute():
            manifest_path = root / manifest_path
        try:
            return load_manifest(manifest_path)
        except ManifestError as exc:
            raise ConfigError(str(exc)) from exc

    return MixExports(root, command=config.mix_command, timeout=config.timeout)


__all__ = ["build_exports"]
