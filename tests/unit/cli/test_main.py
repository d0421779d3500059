"""Unit tests for CLI main command routing."""

from __future__ import annotations

import json

from cli.main import main
from tests.fixture_paths import fixture_path

CONFLICT_SOURCE = str(fixture_path("raw/conflict_events.json"))


def _unify_conflict(tmp_path) -> int:
    return main(
        [
            "--data-root",
            str(tmp_path),
            "unify",
            CONFLICT_SOURCE,
            "--category",
            "conflict",
            "--source-name",
            "acled",
            "--organization",
            "OCHA",
        ]
    )


def test_unify_command_prints_summary(tmp_path, capsys) -> None:
    """Unify command should print key=value summary lines."""
    exit_code = _unify_conflict(tmp_path)
    output_lines = capsys.readouterr().out.splitlines()

    assert (exit_code, "record_count=4" in output_lines, "ghost_count=1" in output_lines) == (
        0,
        True,
        True,
    )


def test_unify_command_writes_dataset_layout(tmp_path) -> None:
    """Unify command should write the category output under the data root."""
    _unify_conflict(tmp_path)

    assert (tmp_path / "unified" / "conflict" / "all-data.json").is_file()


def test_analyze_command_writes_report(tmp_path, capsys) -> None:
    """Analyze command should write the report under the analysis directory."""
    _unify_conflict(tmp_path)
    capsys.readouterr()

    exit_code = main(["--data-root", str(tmp_path), "analyze", "--category", "conflict"])
    report = json.loads((tmp_path / "analysis" / "conflict-analysis.json").read_text())

    assert (exit_code, report["category"]) == (0, "conflict")


def test_analyze_command_honors_skip_flags(tmp_path, capsys) -> None:
    """Skipped sections should be absent from the summary."""
    _unify_conflict(tmp_path)
    output_path = tmp_path / "report.json"

    main(
        [
            "--data-root",
            str(tmp_path),
            "analyze",
            "--category",
            "conflict",
            "--output",
            str(output_path),
            "--skip-regional",
            "--skip-temporal",
            "--skip-descriptive",
            "--skip-time-series",
        ]
    )
    report = json.loads(output_path.read_text())

    assert list(report["summary"]) == ["overview"]


def test_categories_command_lists_registered_categories(tmp_path, capsys) -> None:
    """Categories command should print one category per line."""
    exit_code = main(["--data-root", str(tmp_path), "categories"])
    output_lines = capsys.readouterr().out.splitlines()

    assert (exit_code, len(output_lines), "conflict" in output_lines) == (0, 13, True)


def test_analyze_without_dataset_reports_error(tmp_path, capsys) -> None:
    """Analyzing a category that was never unified should fail with exit code 1."""
    exit_code = main(["--data-root", str(tmp_path), "analyze", "--category", "health"])

    assert (exit_code, capsys.readouterr().err.startswith("error:")) == (1, True)
