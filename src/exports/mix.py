"""Function-existence checks answered by the compiled Mix project itself."""

from __future__ import annotations

import logging
import subprocess
import threading
from typing import TYPE_CHECKING

from exports.registry import is_valid_module_name, parse_signature

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence
    from pathlib import Path

logger = logging.getLogger(__name__)

# Prints one "Module<TAB>fun/arity" line per exported function.
_EXPORTS_SCRIPT = """
for name <- ~w(__MODULES__) do
  mod =
    case name do
      ":" <> erl -> String.to_atom(erl)
      _ -> Module.concat([name])
    end

  if Code.ensure_loaded?(mod) do
    exports =
      if function_exported?(mod, :__info__, 1),
        do: mod.__info__(:functions),
        else: mod.module_info(:exports)

    for {fun, arity} <- exports, do: IO.puts("#{name}\\t#{fun}/#{arity}")
  end
end
"""


def build_exports_script(modules: Sequence[str]) -> str:
    return _EXPORTS_SCRIPT.replace("__MODULES__", " ".join(modules))


def parse_exports_output(output: str) -> dict[str, set[str]]:
    """Parse ``Module<TAB>fun/arity`` lines into module -> function names.

    Lines that do not have this shape (compiler chatter, warnings) are ignored.
    """
    exports: dict[str, set[str]] = {}
    for line in output.splitlines():
        module, sep, signature = line.partition("\t")
        if not sep or not is_valid_module_name(module):
            continue
        parsed = parse_signature(signature)
        if parsed is None:
            continue
        exports.setdefault(module, set()).add(parsed[0])
    return exports


class MixExports:
    """Queries ``mix run`` for module exports and caches the answers.

    Modules are looked up lazily one at a time, or in a single subprocess
    through ``preload``. Any failure of the subprocess counts as "no exports".
    """

    def __init__(
        self,
        project_root: Path,
        *,
        command: Sequence[str] = ("mix",),
        timeout: float = 120.0,
    ) -> None:
        self._project_root = project_root
        self._command = list(command)
        self._timeout = timeout
        self._cache: dict[str, frozenset[str]] = {}
        self._lock = threading.Lock()

    def _query(self, modules: list[str]) -> dict[str, set[str]]:
        argv = [
            *self._command,
            "run",
            "--no-start",
            "-e",
            build_exports_script(modules),
        ]
        logger.debug("Querying exports of %d module(s) via mix", len(modules))
        try:
            completed = subprocess.run(
                argv,
                cwd=self._project_root,
                capture_output=True,
                text=True,
                timeout=self._timeout,
                check=False,
            )
        except (OSError, subprocess.TimeoutExpired) as exc:
            logger.warning("mix exports query failed: %s", exc)
            return {}

        if completed.returncode != 0:
            logger.warning(
                "mix exports query exited with %d: %s",
                completed.returncode,
                completed.stderr.strip(),
            )
            return {}

        return parse_exports_output(completed.stdout)

    def preload(self, modules: Iterable[str]) -> None:
        with self._lock:
            missing = sorted(
                {
                    module
                    for module in modules
                    if is_valid_module_name(module) and module not in self._cache
                }
            )
            if not missing:
                return

            found = self._query(missing)
            for module in missing:
                self._cache[module] = frozenset(found.get(module, ()))

    def function_exists(self, module: str, function: str) -> bool:
        if not is_valid_module_name(module):
            return False

        with self._lock:
            cached = self._cache.get(module)
        if cached is None:
            self.preload([module])
            with self._lock:
                cached = self._cache.get(module, frozenset())

        return function in cached


__all__ = ["MixExports", "build_exports_script", "parse_exports_output"]
