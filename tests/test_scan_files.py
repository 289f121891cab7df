from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from scan.files import expand_braces, find_source_files

if TYPE_CHECKING:
    from pathlib import Path


def _touch(root: Path, rel_path: str) -> None:
    path = root / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("", encoding="utf-8")


@pytest.mark.parametrize(
    ("pattern", "expected"),
    [
        ("*.exs", ["*.exs"]),
        ("**/*.{exs,livemd}", ["**/*.exs", "**/*.livemd"]),
        ("{lib,test}/*.{ex,exs}", ["lib/*.ex", "lib/*.exs", "test/*.ex", "test/*.exs"]),
    ],
)
def test_expand_braces(pattern: str, expected: list[str]) -> None:
    assert expand_braces(pattern) == expected


def test_find_source_files_is_sorted_and_unique(tmp_path: Path) -> None:
    for rel_path in ("b.exs", "a/intro.livemd", "a/z.exs", "lib/app.ex"):
        _touch(tmp_path, rel_path)

    found = [
        path.relative_to(tmp_path).as_posix()
        for path in find_source_files(
            tmp_path, patterns=["**/*.{exs,livemd}", "**/*.exs"]
        )
    ]

    assert found == ["a/intro.livemd", "a/z.exs", "b.exs"]


def test_exclude_prefixes_apply_to_relative_paths(tmp_path: Path) -> None:
    for rel_path in ("deps/req/mix.exs", "_build/dev/x.exs", "scripts/run.exs"):
        _touch(tmp_path, rel_path)

    found = [
        path.relative_to(tmp_path).as_posix()
        for path in find_source_files(
            tmp_path,
            patterns=["**/*.exs"],
            exclude_prefixes=["_build/", "deps/"],
        )
    ]

    assert found == ["scripts/run.exs"]
