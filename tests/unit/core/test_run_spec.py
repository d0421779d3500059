"""Unit tests for run-spec parsing."""

from __future__ import annotations

import pytest

from core.errors import MosaicRunSpecError
from core.run_spec import load_run_spec, parse_run_spec
from tests.fixture_paths import fixture_path


def test_load_run_spec_valid_pipeline_parses_steps() -> None:
    """Valid run-spec should parse expected command order."""
    spec = load_run_spec(str(fixture_path("run_spec/unify_analyze.yaml")))
    assert tuple(step.command for step in spec.steps) == ("unify", "analyze")


def test_load_run_spec_reads_default_category() -> None:
    """Defaults block should carry the shared category."""
    spec = load_run_spec(str(fixture_path("run_spec/unify_analyze.yaml")))
    assert spec.defaults.category == "conflict"


def test_load_run_spec_unwraps_args_mapping() -> None:
    """Step arguments given under 'args' should be flattened."""
    spec = load_run_spec(str(fixture_path("run_spec/unify_analyze.yaml")))
    assert spec.steps[1].args == {"forecast_periods": 3, "time_series": False}


def test_load_run_spec_invalid_command_raises_error() -> None:
    """Unsupported command name should raise run-spec error."""
    with pytest.raises(MosaicRunSpecError):
        load_run_spec(str(fixture_path("run_spec/invalid_command.yaml")))


def test_load_run_spec_invalid_defaults_key_raises_error() -> None:
    """Unknown defaults field should be rejected."""
    with pytest.raises(MosaicRunSpecError):
        load_run_spec(str(fixture_path("run_spec/invalid_defaults_key.yaml")))


def test_load_run_spec_mixed_args_raises_error() -> None:
    """Inline keys next to 'args' should be rejected."""
    with pytest.raises(MosaicRunSpecError):
        load_run_spec(str(fixture_path("run_spec/mixed_args.yaml")))


def test_load_run_spec_unknown_step_key_raises_error() -> None:
    """Step keys outside the command's argument set should be rejected."""
    with pytest.raises(MosaicRunSpecError):
        load_run_spec(str(fixture_path("run_spec/unknown_step_key.yaml")))


def test_load_run_spec_missing_file_raises_error(tmp_path) -> None:
    """Missing run-spec file should raise run-spec error."""
    with pytest.raises(MosaicRunSpecError):
        load_run_spec(str(tmp_path / "absent.yaml"))


def test_parse_run_spec_rejects_wrong_version() -> None:
    """Only version 1 run-specs should be accepted."""
    with pytest.raises(MosaicRunSpecError):
        parse_run_spec({"version": 2, "steps": [{"command": "analyze"}]})


def test_parse_run_spec_rejects_empty_steps() -> None:
    """A run-spec without steps should be rejected."""
    with pytest.raises(MosaicRunSpecError):
        parse_run_spec({"version": 1, "steps": []})
