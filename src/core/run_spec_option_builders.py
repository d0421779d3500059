"""Run-spec option object builders.

This module converts raw run-spec step arguments into typed option dataclasses.
It keeps parsing logic isolated from run-spec orchestration.
"""

from __future__ import annotations

from typing import Mapping

from core.constants import DEFAULT_FORECAST_PERIODS
from core.run_spec_fields import (
    optional_bool,
    optional_string,
    positive_int_with_default,
    required_string,
)
from core.types import AnalysisOptions, UnifyOptions


def build_unify_options_for_run_spec(
    args: Mapping[str, object],
    category: str,
) -> UnifyOptions:
    """Build unify options from one run-spec unify step."""
    return UnifyOptions(
        category=category,
        source_path=required_string(args, "source"),
        source=optional_string(args, "source_name"),
        organization=optional_string(args, "organization"),
        title=optional_string(args, "title") or "",
        description=optional_string(args, "description") or "",
        url=optional_string(args, "url"),
        output_dir=optional_string(args, "output_dir"),
        field_map_path=optional_string(args, "field_map"),
        link=optional_bool(args, "link", default_value=False),
    )


def build_analysis_options_for_run_spec(
    args: Mapping[str, object],
    category: str,
) -> AnalysisOptions:
    """Build analysis options from one run-spec analyze step."""
    return AnalysisOptions(
        category=category,
        input_dir=optional_string(args, "input_dir"),
        output_path=optional_string(args, "output"),
        include_regional=optional_bool(args, "regional", default_value=True),
        include_temporal=optional_bool(args, "temporal", default_value=True),
        include_descriptive=optional_bool(args, "descriptive", default_value=True),
        include_time_series=optional_bool(args, "time_series", default_value=True),
        forecast_periods=positive_int_with_default(
            args,
            "forecast_periods",
            DEFAULT_FORECAST_PERIODS,
        ),
    )
