"""Command-line interface for apicheck."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

from contract.report import write_report
from notebook.analysis import render_analysis
from notebook.extractor import extract_notebook_code
from rules.config import ApiCheckConfig, ConfigError, build_config, load_config
from verify.summary import exit_code, print_summary
from verify.validator import validate_project


def _add_common_paths(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Project root (default: .)",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="apicheck")
    subparsers = parser.add_subparsers(dest="command", required=True)

    validate_parser = subparsers.add_parser(
        "validate", help="Check that remote calls target exported functions"
    )
    _add_common_paths(validate_parser)
    validate_parser.add_argument(
        "--allow",
        action="append",
        default=[],
        metavar="PREFIX",
        help="Module prefix accepted without an existence check (repeatable)",
    )
    validate_parser.add_argument(
        "--backend",
        choices=("mix", "manifest", "none"),
        default=None,
        help="Existence-check backend (default: config, then mix)",
    )
    validate_parser.add_argument(
        "--manifest",
        default=None,
        help="JSON exports manifest; implies --backend manifest",
    )
    validate_parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Worker threads for per-file extraction",
    )
    validate_parser.add_argument(
        "--json-out",
        default=None,
        help="Also write a JSON report to this path",
    )
    validate_parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    extract_parser = subparsers.add_parser(
        "extract", help="Print the executable code of a Livebook notebook"
    )
    extract_parser.add_argument("file", help="Notebook (.livemd) to extract")
    extract_parser.add_argument(
        "--include-analysis",
        action="store_true",
        help="Print a markdown analysis with aliases and calls",
    )

    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _apply_overrides(
    config: ApiCheckConfig, args: argparse.Namespace
) -> ApiCheckConfig:
    data: dict[str, Any] = config.model_dump()
    if args.allow:
        data["allowed_modules"] = [*data["allowed_modules"], *args.allow]
    if args.workers is not None:
        data["workers"] = args.workers
    if args.manifest is not None:
        data["exports"]["manifest"] = str(Path(args.manifest).expanduser().resolve())
        data["exports"]["backend"] = "manifest"
    if args.backend is not None:
        data["exports"]["backend"] = args.backend
    return build_config(data, source="command line")


def _handle_validate(root: Path, args: argparse.Namespace) -> int:
    try:
        config = _apply_overrides(load_config(root), args)
        report = validate_project(root, config=config)
    except ConfigError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    print_summary(report, sys.stdout)

    if args.json_out is not None:
        json_out = Path(args.json_out).expanduser().resolve()
        try:
            write_report(report, json_out)
        except OSError as exc:
            sys.stderr.write(f"error: cannot write report {json_out}: {exc}\n")
            return 1

    return exit_code(report)


def _handle_extract(file: str, include_analysis: bool) -> int:
    path = Path(file).expanduser()
    if not path.is_file():
        sys.stderr.write(f"error: file not found: {file}\n")
        return 1
    if path.suffix != ".livemd":
        sys.stderr.write("warning: file doesn't have .livemd extension\n")

    try:
        code = extract_notebook_code(path)
    except (OSError, UnicodeDecodeError) as exc:
        sys.stderr.write(f"error: cannot read {file}: {exc}\n")
        return 1

    if include_analysis:
        sys.stdout.write(render_analysis(file, code))
    else:
        sys.stdout.write(code)
    sys.stdout.write("\n")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command == "validate":
        _configure_logging(args.verbose)
        root = Path(args.root).expanduser().resolve()
        return _handle_validate(root, args)

    if args.command == "extract":
        return _handle_extract(args.file, args.include_analysis)

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
