from __future__ import annotations

import io
from typing import TYPE_CHECKING

import orjson
import pytest

from contract import REPORT_SCHEMA_VERSION, load_report, write_report
from contract.report import ReportError
from contract.results import FileError, ValidationReport, ValidationResult
from verify.summary import exit_code, format_summary, print_summary

if TYPE_CHECKING:
    from pathlib import Path


def _report() -> ValidationReport:
    return ValidationReport(
        results=(
            ValidationResult(file="a.exs", calls=("Foo.bar/1",)),
            ValidationResult(
                file="b.livemd",
                calls=("Foo.bar/1", "Foo.nope/0"),
                invalid=("Foo.nope/0",),
                fallback=True,
            ),
        ),
        errors=(FileError(file="c.exs", message="unreadable: denied"),),
    )


def test_report_counts() -> None:
    report = _report()

    assert report.total == 2
    assert report.valid_count == 1
    assert [result.file for result in report.invalid_results] == ["b.livemd"]
    assert not report.ok


def test_empty_report_is_ok() -> None:
    report = ValidationReport()

    assert report.ok
    assert exit_code(report) == 0


def test_write_report_is_sorted_json(tmp_path: Path) -> None:
    out = tmp_path / "reports" / "apicheck.json"

    write_report(_report(), out)

    data = orjson.loads(out.read_bytes())
    assert data["schema_version"] == REPORT_SCHEMA_VERSION
    assert data["ok"] is False
    assert (data["total"], data["valid"], data["invalid"]) == (2, 1, 1)
    assert data["results"][1]["invalid"] == ["Foo.nope/0"]
    assert data["results"][1]["fallback"] is True
    assert data["errors"] == [{"file": "c.exs", "message": "unreadable: denied"}]
    assert list(data) == sorted(data)


def test_report_round_trips_through_schema(tmp_path: Path) -> None:
    out = tmp_path / "apicheck.json"
    write_report(_report(), out)

    record = load_report(out)

    assert [result.file for result in record.results] == ["a.exs", "b.livemd"]
    assert record.results[0].valid is True


def test_load_report_rejects_wrong_types(tmp_path: Path) -> None:
    out = tmp_path / "apicheck.json"
    write_report(_report(), out)
    data = orjson.loads(out.read_bytes())
    data["total"] = "many"
    out.write_bytes(orjson.dumps(data))

    with pytest.raises(ReportError, match="Schema validation failed"):
        load_report(out)


def test_summary_lists_invalid_calls_and_errors() -> None:
    stream = io.StringIO()

    print_summary(_report(), stream)

    text = stream.getvalue()
    assert "Total files:   2" in text
    assert "Valid files:   1 (50.0%)" in text
    assert "Invalid files: 1 (50.0%)" in text
    assert "Unreadable:    1" in text
    assert "b.livemd (regex fallback)" in text
    assert "      - Foo.nope/0" in text
    assert "c.exs: unreadable: denied" in text
    assert "All files use valid public APIs!" not in text
    assert exit_code(_report()) == 1


def test_summary_of_clean_run() -> None:
    report = ValidationReport(results=(ValidationResult(file="a.exs"),))

    text = format_summary(report)

    assert "Valid files:   1 (100.0%)" in text
    assert "INVALID API CALLS FOUND" not in text
    assert text.endswith("All files use valid public APIs!")
