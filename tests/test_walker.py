from __future__ import annotations

import pytest

from parse.syntax import CallSite
from parse.treesitter_elixir import ParsedSource, ParseError, parse_source
from parse.walker import WalkResult, walk


def _walk(source: str) -> WalkResult:
    parsed = parse_source(source)
    assert isinstance(parsed, ParsedSource), parsed
    return walk(parsed)


def _triples(result: WalkResult) -> set[tuple[str, str, int | None]]:
    return {
        (call.module, call.function, call.site.arity)
        for call in result.resolved_calls()
    }


def test_single_alias_then_call_resolves() -> None:
    result = _walk("alias A.B.C\nC.f(1, 2)\n")

    assert _triples(result) == {("A.B.C", "f", 2)}
    assert result.calls == frozenset({CallSite(module="C", function="f", arity=2)})


def test_group_alias_yields_bindings_and_no_calls() -> None:
    result = _walk("alias A.B.{X, Y}\n")

    assert result.aliases.bindings == {"X": "A.B.X", "Y": "A.B.Y"}
    assert result.calls == frozenset()


def test_group_alias_member_with_segments_binds_last_segment() -> None:
    result = _walk("alias MyApp.{Accounts.User, Repo}\nUser.get(1)\n")

    assert result.aliases.bindings == {
        "User": "MyApp.Accounts.User",
        "Repo": "MyApp.Repo",
    }
    assert _triples(result) == {("MyApp.Accounts.User", "get", 1)}


def test_renamed_alias() -> None:
    result = _walk("alias Azure.EventHubs.Producer, as: P\nP.send(msg)\n")

    assert result.aliases.bindings == {"P": "Azure.EventHubs.Producer"}
    assert _triples(result) == {("Azure.EventHubs.Producer", "send", 1)}


def test_later_alias_overrides_earlier() -> None:
    result = _walk("alias First.Client\nalias Second.Client\nClient.start()\n")

    assert result.aliases.get("Client") == "Second.Client"
    assert _triples(result) == {("Second.Client", "start", 0)}


def test_alias_statement_is_not_a_call() -> None:
    result = _walk("alias Azure.EventHubs.Producer\n")

    assert result.calls == frozenset()


def test_unsupported_alias_form_is_ignored() -> None:
    result = _walk("alias __MODULE__.Helper\nHelper.run()\n")

    assert len(result.aliases) == 0
    assert _triples(result) == {("Helper", "run", 0)}


def test_bare_call_without_parentheses_has_arity_zero() -> None:
    result = _walk("x = DateTime.utc_now\n")

    assert _triples(result) == {("DateTime", "utc_now", 0)}


def test_captured_function_has_no_arity() -> None:
    result = _walk("Enum.map(list, &String.upcase/1)\n")

    assert _triples(result) == {("Enum", "map", 2), ("String", "upcase", None)}


def test_do_block_counts_as_argument() -> None:
    result = _walk("Task.async do\n  :ok\nend\n")

    assert _triples(result) == {("Task", "async", 1)}


def test_nested_calls_in_arguments_are_collected() -> None:
    result = _walk("IO.puts(Jason.encode!(Map.new()))\n")

    assert _triples(result) == {
        ("IO", "puts", 1),
        ("Jason", "encode!", 1),
        ("Map", "new", 0),
    }


def test_identical_call_sites_collapse() -> None:
    result = _walk("Foo.bar(1)\nFoo.bar(2)\nFoo.bar(1, 2)\n")

    assert result.calls == frozenset(
        {
            CallSite(module="Foo", function="bar", arity=1),
            CallSite(module="Foo", function="bar", arity=2),
        }
    )


def test_erlang_module_calls_are_not_collected() -> None:
    result = _walk(':crypto.hash(:sha256, "x")\n')

    assert result.calls == frozenset()


def test_defmodule_sets_enclosing_namespace() -> None:
    source = """
defmodule MyApp.Worker do
  def run do
    Helper.call()
    Enum.count([])
  end
end
"""
    result = _walk(source)

    assert result.aliases.namespace == "MyApp.Worker"
    assert _triples(result) == {
        ("MyApp.Worker.Helper", "call", 0),
        ("Enum", "count", 1),
    }


def test_first_defmodule_wins_as_namespace() -> None:
    result = _walk("defmodule A.One do\nend\n\ndefmodule B.Two do\nend\n")

    assert result.aliases.namespace == "A.One"


@pytest.mark.parametrize(
    "source",
    ["defmodule Broken do\n  def x do\n", "IO.puts(\n", "%{a: 1"],
)
def test_parse_errors_are_reported_with_a_line(source: str) -> None:
    outcome = parse_source(source)

    assert isinstance(outcome, ParseError)
    assert outcome.line >= 1
    assert outcome.message
    assert str(outcome).startswith(f"line {outcome.line}: ")
