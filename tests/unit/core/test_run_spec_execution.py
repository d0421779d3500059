"""Unit tests for shared run-spec execution."""

from __future__ import annotations

import pytest

from core.errors import MosaicRunSpecError
from core.run_spec import parse_run_spec
from core.run_spec_execution import execute_run_spec, format_unify_result
from core.types import (
    AnalysisOptions,
    AnalysisResult,
    PipelineResult,
    UnifyOptions,
    ValidationReport,
)

REPORT = ValidationReport(
    quality_score=0.8123,
    completeness=1.0,
    consistency=0.8,
    accuracy=0.6,
    meets_threshold=True,
    record_count=4,
)


class _RecordingClient:
    def __init__(self) -> None:
        self.calls: list[object] = []
        self.data_root: str | None = None

    def with_data_root(self, data_root: str) -> "_RecordingClient":
        self.data_root = data_root
        return self

    def unify(self, options: UnifyOptions) -> PipelineResult:
        self.calls.append(options)
        return PipelineResult(
            category=options.category,
            output_dir="/data/unified/conflict",
            record_count=4,
            skipped_count=0,
            ghost_count=1,
            filtered_count=0,
            duplicate_count=1,
            linked_count=0,
            report=REPORT,
            partitions=(),
        )

    def analyze(self, options: AnalysisOptions) -> AnalysisResult:
        self.calls.append(options)
        return AnalysisResult(
            category=options.category,
            output_path="/data/analysis/conflict-analysis.json",
            record_count=4,
        )


def test_execute_run_spec_applies_default_category() -> None:
    """Steps without a category should inherit the defaults category."""
    client = _RecordingClient()
    spec = parse_run_spec(
        {
            "version": 1,
            "defaults": {"category": "conflict"},
            "steps": [{"command": "unify", "source": "raw.json"}, {"command": "analyze"}],
        }
    )

    execute_run_spec(client, spec)

    assert [getattr(call, "category") for call in client.calls] == ["conflict", "conflict"]


def test_execute_run_spec_routes_data_root_override() -> None:
    """Defaults data_root should rebind the client before any step."""
    client = _RecordingClient()
    spec = parse_run_spec(
        {
            "version": 1,
            "defaults": {"data_root": "/tmp/mosaic-data"},
            "steps": [{"command": "analyze", "category": "health"}],
        }
    )

    execute_run_spec(client, spec)

    assert client.data_root == "/tmp/mosaic-data"


def test_execute_run_spec_builds_analysis_toggles() -> None:
    """Analyze step toggles should map onto analysis options."""
    client = _RecordingClient()
    spec = parse_run_spec(
        {
            "version": 1,
            "steps": [
                {
                    "command": "analyze",
                    "category": "conflict",
                    "regional": False,
                    "forecast_periods": 14,
                }
            ],
        }
    )

    execute_run_spec(client, spec)
    options = client.calls[0]

    assert isinstance(options, AnalysisOptions) and (
        options.include_regional,
        options.include_temporal,
        options.forecast_periods,
    ) == (False, True, 14)


def test_execute_run_spec_missing_category_raises_error() -> None:
    """A step with no category anywhere should fail."""
    spec = parse_run_spec({"version": 1, "steps": [{"command": "analyze"}]})

    with pytest.raises(MosaicRunSpecError):
        execute_run_spec(_RecordingClient(), spec)


def test_execute_run_spec_unify_requires_source() -> None:
    """Unify steps without a source path should fail."""
    spec = parse_run_spec({"version": 1, "steps": [{"command": "unify", "category": "water"}]})

    with pytest.raises(MosaicRunSpecError):
        execute_run_spec(_RecordingClient(), spec)


def test_format_unify_result_renders_key_value_lines() -> None:
    """Unify summaries should render stable key=value lines."""
    result = _RecordingClient().unify(UnifyOptions(category="conflict", source_path="raw.json"))

    lines = format_unify_result(result)

    assert "quality_score=0.8123" in lines and "chunks=0" in lines
