from __future__ import annotations

import shutil
from pathlib import Path

import pytest

from exports.registry import StaticExports
from rules.config import ConfigError
from verify.validator import (
    SourceDocument,
    Validator,
    extract_calls,
    is_allowed_module,
    validate,
    validate_project,
)

_FIXTURE = Path(__file__).parent / "fixtures" / "mini_project"


class _RecordingExports:
    def __init__(self, answer: bool) -> None:
        self.answer = answer
        self.queries: list[tuple[str, str]] = []

    def function_exists(self, module: str, function: str) -> bool:
        self.queries.append((module, function))
        return self.answer


class _PreloadingExports(StaticExports):
    def __init__(self, table: dict[str, dict[str, list[int]]]) -> None:
        super().__init__(table)
        self.preloaded: list[set[str]] = []

    def preload(self, modules: object) -> None:
        self.preloaded.append(set(modules))  # type: ignore[call-overload]


class _ExplodingExports:
    def function_exists(self, module: str, function: str) -> bool:
        raise RuntimeError("backend down")


def _write(root: Path, rel_path: str, content: str) -> Path:
    path = root / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_allowed_prefix_short_circuits_existence_check(tmp_path: Path) -> None:
    path = _write(tmp_path, "a.exs", "A.B.C.f(1)\n")
    exports = _RecordingExports(answer=False)

    report = validate([path], ["A.B"], exports, root=tmp_path)

    assert report.results[0].valid
    assert report.results[0].calls == ("A.B.C.f/1",)
    assert exports.queries == []


def test_default_modules_are_always_allowed(tmp_path: Path) -> None:
    path = _write(tmp_path, "a.exs", 'Enum.map([], & &1)\n:crypto.hash(:sha, "")\n')

    report = validate([path], [], _RecordingExports(answer=False), root=tmp_path)

    assert report.ok


def test_two_files_one_valid_one_invalid(tmp_path: Path) -> None:
    good = _write(tmp_path, "good.exs", "alias A.B.C\nC.f(1, 2)\n")
    bad = _write(tmp_path, "bad.exs", "alias A.B.C\nC.g(1)\nC.f()\n")
    exports = StaticExports({"A.B.C": {"f": [2]}})

    report = validate([bad, good], [], exports, root=tmp_path)

    assert [result.file for result in report.results] == ["bad.exs", "good.exs"]
    bad_result, good_result = report.results
    assert good_result.valid
    assert good_result.invalid == ()
    assert not bad_result.valid
    assert bad_result.invalid == ("A.B.C.g/1",)
    assert bad_result.calls == ("A.B.C.f/0", "A.B.C.g/1")
    assert not report.ok


def test_existence_check_accepts_any_arity(tmp_path: Path) -> None:
    path = _write(tmp_path, "a.exs", "Foo.bar(1, 2, 3)\n")
    exports = StaticExports({"Foo": {"bar": [1]}})

    assert validate([path], [], exports).ok


def test_notebooks_are_reduced_to_executable_code(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "intro.livemd",
        "\n".join(
            [
                "Text mentioning Prose.call(1)",
                '<!-- livebook:{"force_markdown":true} -->',
                "```elixir",
                "Hidden.call(1)",
                "```",
                "```elixir",
                "Shown.call(1)",
                "```",
            ]
        ),
    )

    report = validate([path], [], StaticExports(), root=tmp_path)

    assert report.results[0].calls == ("Shown.call/1",)


def test_unparseable_file_uses_regex_fallback(tmp_path: Path) -> None:
    path = _write(
        tmp_path,
        "broken.exs",
        "alias Azure.EventHubs.Producer\nProducer.send(pid, msg\nMissing.go(\n",
    )
    exports = StaticExports({"Azure.EventHubs.Producer": {"send": [2]}})

    report = validate([path], [], exports, root=tmp_path)

    result = report.results[0]
    assert result.fallback
    assert result.calls == ("Azure.EventHubs.Producer.send", "Missing.go")
    assert result.invalid == ("Missing.go",)


def test_unreadable_file_is_reported_without_aborting(tmp_path: Path) -> None:
    good = _write(tmp_path, "good.exs", "Enum.count([])\n")
    missing = tmp_path / "missing.exs"
    binary = tmp_path / "binary.exs"
    binary.write_bytes(b"\xff\xfe\x00bad")

    report = validate([good, missing, binary], [], StaticExports(), root=tmp_path)

    assert [result.file for result in report.results] == ["good.exs"]
    assert [error.file for error in report.errors] == ["binary.exs", "missing.exs"]
    assert all(error.message.startswith("unreadable:") for error in report.errors)
    assert not report.ok


def test_failing_backend_fails_closed(tmp_path: Path) -> None:
    path = _write(tmp_path, "a.exs", "Foo.bar()\n")

    report = validate([path], [], _ExplodingExports(), root=tmp_path)

    assert report.results[0].invalid == ("Foo.bar/0",)


def test_preloading_backend_receives_unallowed_modules(tmp_path: Path) -> None:
    one = _write(tmp_path, "one.exs", "Foo.a()\nEnum.count([])\n")
    two = _write(tmp_path, "two.exs", "alias X.Bar\nBar.b()\nAllowed.Mod.c()\n")
    exports = _PreloadingExports({"Foo": {"a": [0]}})

    report = Validator(exports, allowed_modules=["Allowed"], workers=2).validate(
        [one, two]
    )

    assert exports.preloaded == [{"Foo", "X.Bar"}]
    assert report.total == 2
    assert report.valid_count == 1


@pytest.mark.parametrize(
    "options",
    [
        {"allowed_name_prefixes": "A.B"},
        {"allowed_name_prefixes": ["A.B"], "workers": 0},
        {"allowed_name_prefixes": ["A.B"], "notebook_suffixes": ["livemd"]},
    ],
)
def test_malformed_options_raise_config_error(
    tmp_path: Path, options: dict[str, object]
) -> None:
    with pytest.raises(ConfigError):
        validate([tmp_path / "never-read.exs"], exports=StaticExports(), **options)  # type: ignore[arg-type]


def test_extract_calls_reports_parse_error() -> None:
    document = SourceDocument(path=Path("x.exs"), text="Foo.bar(", kind="plain-source")

    extracted = extract_calls(document, "x.exs")

    assert extracted.fallback
    assert extracted.parse_error is not None
    assert [call.render() for call in extracted.calls] == ["Foo.bar"]


@pytest.mark.parametrize(
    ("module", "expected"),
    [("A.B.C", True), ("A.Bee", True), ("A", False), ("Z.A.B", False)],
)
def test_is_allowed_module_uses_plain_prefixes(module: str, expected: bool) -> None:
    assert is_allowed_module(module, ["A.B"]) is expected


def test_validate_project_on_fixture(tmp_path: Path) -> None:
    project = tmp_path / "project"
    shutil.copytree(_FIXTURE, project)

    report = validate_project(project)

    assert [result.file for result in report.results] == [
        "notebooks/intro.livemd",
        "scripts/seed.exs",
    ]
    notebook, script = report.results
    assert script.valid
    assert notebook.invalid == ("Azure.EventHubs.Producer.sned/2",)
    assert "Azure.EventHubs.Producer.imaginary/1" not in notebook.calls
    assert report.errors == ()
