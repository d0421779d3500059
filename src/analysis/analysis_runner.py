"""Analyze orchestration for one unified category dataset."""

from __future__ import annotations

from pathlib import Path

from analysis.report import (
    analysis_to_payload,
    generate_summary_report,
    perform_comprehensive_analysis,
)
from core.constants import ANALYSIS_DIR_NAME
from core.run_context import RunContext
from core.types import AnalysisOptions, AnalysisResult
from store.dataset_reader import load_dataset_records
from store.dataset_writer import default_output_dir
from store.json_io import ensure_directory, write_json_document


def analyze_dataset(options: AnalysisOptions, context: RunContext) -> AnalysisResult:
    """Run the comprehensive analysis over a unified dataset and write the report.

    Args:
        options: Analyze request options.
        context: Run context of the invocation.

    Returns:
        Report location and headline figures.

    Raises:
        MosaicStoreError: If the dataset cannot be read or the report written.
    """
    category = options.category.strip().lower()
    logger = context.logger.bind(category=category)
    input_dir = (
        Path(options.input_dir).expanduser().resolve()
        if options.input_dir
        else default_output_dir(context, category)
    )
    records = load_dataset_records(input_dir)
    analysis = perform_comprehensive_analysis(
        records,
        baseline_date=context.config.baseline_date,
        analysis_date=context.timestamp,
        include_regional=options.include_regional,
        include_temporal=options.include_temporal,
        include_descriptive=options.include_descriptive,
        include_time_series=options.include_time_series,
        forecast_periods=options.forecast_periods,
    )
    summary = generate_summary_report(analysis)
    output_path = _resolve_output_path(options, context, category)
    ensure_directory(output_path.parent)
    write_json_document(
        output_path,
        {
            "category": category,
            "summary": analysis_to_payload(summary),
            "analysis": analysis_to_payload(analysis),
        },
    )
    logger.info(
        "analysis_completed",
        input_dir=str(input_dir),
        output_path=str(output_path),
        record_count=len(records),
    )
    return AnalysisResult(
        category=category,
        output_path=str(output_path),
        record_count=len(records),
        summary=summary,
    )


def _resolve_output_path(options: AnalysisOptions, context: RunContext, category: str) -> Path:
    if options.output_path:
        return Path(options.output_path).expanduser().resolve()
    return context.config.data_root / ANALYSIS_DIR_NAME / f"{category}-analysis.json"
