"""Shared run-spec execution engine for CLI and SDK workflows.

This module maps validated run-spec steps to client operations so different
entry points can execute one declarative pipeline path without drift.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from core.errors import MosaicRunSpecError
from core.run_spec import RunSpec, RunSpecStep, load_run_spec
from core.run_spec_fields import optional_string
from core.run_spec_option_builders import (
    build_analysis_options_for_run_spec,
    build_unify_options_for_run_spec,
)
from core.types import AnalysisOptions, AnalysisResult, PipelineResult, UnifyOptions


class RunSpecClient(Protocol):
    """Client API contract required by run-spec execution."""

    def with_data_root(self, data_root: str) -> Any: ...

    def unify(self, options: UnifyOptions) -> PipelineResult: ...

    def analyze(self, options: AnalysisOptions) -> AnalysisResult: ...


@dataclass(frozen=True)
class RunSpecExecutionContext:
    """In-memory context used to execute run-spec steps."""

    client: RunSpecClient
    default_category: str | None


def execute_run_spec_file(client: RunSpecClient, spec_file: str) -> tuple[str, ...]:
    """Load and execute a run-spec file, returning printable output lines."""
    spec = load_run_spec(spec_file)
    return execute_run_spec(client, spec)


def execute_run_spec(client: RunSpecClient, spec: RunSpec) -> tuple[str, ...]:
    """Execute a parsed run-spec object and return output lines."""
    execution_client = (
        client.with_data_root(spec.defaults.data_root) if spec.defaults.data_root else client
    )
    context = RunSpecExecutionContext(
        client=execution_client,
        default_category=spec.defaults.category,
    )
    output_lines: list[str] = []
    for step in spec.steps:
        output_lines.extend(_execute_step(context, step))
    return tuple(output_lines)


def format_unify_result(result: PipelineResult) -> tuple[str, ...]:
    """Render a unify summary as ``key=value`` lines."""
    return (
        f"category={result.category}",
        f"output_dir={result.output_dir}",
        f"record_count={result.record_count}",
        f"skipped_count={result.skipped_count}",
        f"ghost_count={result.ghost_count}",
        f"filtered_count={result.filtered_count}",
        f"duplicate_count={result.duplicate_count}",
        f"linked_count={result.linked_count}",
        f"quality_score={result.report.quality_score:.4f}",
        f"meets_threshold={str(result.report.meets_threshold).lower()}",
        f"partitions={len(result.partitions)}",
        f"chunks={result.chunk_index.total_chunks if result.chunk_index else 0}",
    )


def format_analysis_result(result: AnalysisResult) -> tuple[str, ...]:
    """Render an analyze summary as ``key=value`` lines."""
    return (
        f"category={result.category}",
        f"record_count={result.record_count}",
        f"output_path={result.output_path}",
    )


def _execute_step(context: RunSpecExecutionContext, step: RunSpecStep) -> tuple[str, ...]:
    category = _resolve_category(context, step)
    if step.command == "unify":
        options = build_unify_options_for_run_spec(step.args, category)
        return format_unify_result(context.client.unify(options))
    if step.command == "analyze":
        analysis_options = build_analysis_options_for_run_spec(step.args, category)
        return format_analysis_result(context.client.analyze(analysis_options))
    raise MosaicRunSpecError(f"Unsupported run-spec command '{step.command}'.")


def _resolve_category(context: RunSpecExecutionContext, step: RunSpecStep) -> str:
    category = optional_string(step.args, "category")
    if category:
        return category
    if context.default_category:
        return context.default_category
    raise MosaicRunSpecError(
        f"Run-spec command '{step.command}' requires category. "
        "Set 'category' on the step or in top-level defaults."
    )
