"""Comprehensive analysis report over canonical records.

Combines regional, temporal, descriptive, and time-series analysis into
one typed result and renders it to a JSON-safe payload. Grouped record
tuples are left out of the payload; only statistics are serialized.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, is_dataclass
from datetime import date
import math
from typing import Any, Mapping, Sequence

from analysis.descriptive import calculate_correlation, summarize, summarize_fields
from analysis.record_metrics import metric_rows, record_number
from analysis.spatial_aggregation import (
    RankedRegion,
    SpatialBucket,
    aggregate_by_governorate,
    aggregate_by_region,
    top_regions,
)
from analysis.temporal_aggregation import (
    BaselineComparison,
    CumulativePoint,
    PeriodBucket,
    PeriodComparison,
    RollingPoint,
    aggregate_by_period,
    bucket_series,
    compare_periods,
    compare_to_baseline,
    cumulative_series,
    rolling_aggregation,
)
from analysis.time_series import TimeSeriesAnalysis, analyze_time_series
from core.constants import (
    DEFAULT_DESCRIPTIVE_FIELDS,
    DEFAULT_FORECAST_PERIODS,
    DEFAULT_ROLLING_WINDOW,
    DEFAULT_TOP_REGIONS,
)
from core.types import CanonicalRecord

EXCLUDED_PAYLOAD_FIELDS = frozenset({"records"})


@dataclass(frozen=True)
class RegionalAnalysis:
    """Region and governorate aggregates with the top-N ranking."""

    by_region: Mapping[str, SpatialBucket]
    by_governorate: Mapping[str, SpatialBucket]
    top_regions: tuple[RankedRegion, ...]


@dataclass(frozen=True)
class TemporalAnalysis:
    """Period buckets, comparisons, baseline split, rolling and cumulative series."""

    daily: Mapping[str, PeriodBucket]
    weekly: Mapping[str, PeriodBucket]
    monthly: Mapping[str, PeriodBucket]
    daily_comparison: tuple[PeriodComparison, ...]
    baseline_comparison: BaselineComparison
    rolling_7day: tuple[RollingPoint, ...]
    cumulative: tuple[CumulativePoint, ...]


@dataclass(frozen=True)
class AnalysisMetadata:
    """Header of a comprehensive analysis."""

    total_records: int
    analysis_date: str
    baseline_date: str


@dataclass(frozen=True)
class ComprehensiveAnalysis:
    """Full analysis; sections disabled by options are None."""

    metadata: AnalysisMetadata
    regional: RegionalAnalysis | None = None
    temporal: TemporalAnalysis | None = None
    descriptive: Mapping[str, Mapping[str, object]] | None = None
    time_series: Mapping[str, TimeSeriesAnalysis] | None = None


def perform_comprehensive_analysis(
    records: Sequence[CanonicalRecord],
    *,
    baseline_date: date,
    analysis_date: str,
    include_regional: bool = True,
    include_temporal: bool = True,
    include_descriptive: bool = True,
    include_time_series: bool = True,
    forecast_periods: int = DEFAULT_FORECAST_PERIODS,
    descriptive_fields: Sequence[str] = DEFAULT_DESCRIPTIVE_FIELDS,
) -> ComprehensiveAnalysis:
    """Run every enabled analysis section over one dataset.

    Args:
        records: Canonical records.
        baseline_date: Cutoff for the before/after comparison.
        analysis_date: ISO timestamp stamped into the metadata.
        include_regional: Whether to aggregate by region and governorate.
        include_temporal: Whether to aggregate by day, week, and month.
        include_descriptive: Whether to summarize numeric payload fields.
        include_time_series: Whether to analyze daily incidents and casualties.
        forecast_periods: Linear forecast horizon.
        descriptive_fields: Payload fields summarized by the descriptive section.

    Returns:
        Comprehensive analysis result.
    """
    metadata = AnalysisMetadata(
        total_records=len(records),
        analysis_date=analysis_date,
        baseline_date=baseline_date.isoformat(),
    )
    daily = aggregate_by_period(records, "day") if (include_temporal or include_time_series) else {}
    regional = _regional_analysis(records) if include_regional else None
    temporal = _temporal_analysis(records, daily, baseline_date) if include_temporal else None
    descriptive = (
        summarize_fields(metric_rows(records), descriptive_fields) if include_descriptive else None
    )
    time_series = None
    if include_time_series:
        time_series = {
            metric_name: analyze_time_series(
                bucket_series(daily, metric_name), forecast_periods=forecast_periods
            )
            for metric_name in ("incidents", "casualties")
        }
    return ComprehensiveAnalysis(
        metadata=metadata,
        regional=regional,
        temporal=temporal,
        descriptive=descriptive,
        time_series=time_series,
    )


def generate_summary_report(analysis: ComprehensiveAnalysis) -> dict[str, object]:
    """Condense a comprehensive analysis into headline figures.

    Args:
        analysis: Result of ``perform_comprehensive_analysis``.

    Returns:
        JSON-safe summary with overview plus regional, temporal, and trend
        sections for whichever sections the analysis contains.
    """
    report: dict[str, object] = {
        "overview": {
            "total_records": analysis.metadata.total_records,
            "analysis_date": analysis.metadata.analysis_date,
        }
    }
    if analysis.regional is not None:
        buckets = analysis.regional.by_region.values()
        ranking = analysis.regional.top_regions
        report["regional_summary"] = {
            "most_affected_region": ranking[0].name if ranking else None,
            "total_incidents": sum(bucket.stats.incident_count for bucket in buckets),
            "total_casualties": sum(bucket.stats.casualty_total for bucket in buckets),
        }
    if analysis.temporal is not None:
        baseline = analysis.temporal.baseline_comparison
        report["temporal_summary"] = {
            "baseline_date": analysis.metadata.baseline_date,
            "incidents_before": baseline.before.incidents,
            "incidents_after": baseline.after.incidents,
            "change_percentage": baseline.changes["incidents"].percentage,
        }
    if analysis.time_series is not None:
        incidents = analysis.time_series["incidents"]
        report["trend_summary"] = {
            "direction": incidents.trend.direction,
            "strength": incidents.trend.strength,
            "has_seasonality": incidents.seasonality.has_seasonality,
        }
    return report


def compare_datasets(
    first: Sequence[CanonicalRecord],
    second: Sequence[CanonicalRecord],
    first_label: str = "Dataset 1",
    second_label: str = "Dataset 2",
    metric_name: str = "fatalities",
) -> dict[str, dict[str, object]]:
    """Summarize one metric across two datasets and report their differences."""
    first_stats = summarize(record_number(record, metric_name) for record in first)
    second_stats = summarize(record_number(record, metric_name) for record in second)
    return {
        first_label: first_stats,
        second_label: second_stats,
        "comparison": {
            "mean_difference": _stat(second_stats, "mean") - _stat(first_stats, "mean"),
            "median_difference": _stat(second_stats, "median") - _stat(first_stats, "median"),
            "std_dev_difference": _stat(second_stats, "std_dev") - _stat(first_stats, "std_dev"),
        },
    }


def calculate_correlation_matrix(
    rows: Sequence[Mapping[str, object]],
    field_names: Sequence[str],
) -> dict[str, dict[str, float]]:
    """Return pairwise Pearson correlations; missing values count as 0."""
    columns = {
        field_name: [row.get(field_name) or 0 for row in rows] for field_name in field_names
    }
    return {
        left: {right: calculate_correlation(columns[left], columns[right]) for right in field_names}
        for left in field_names
    }


def analysis_to_payload(value: Any) -> Any:
    """Render analysis objects as JSON-safe values.

    Dataclasses become dicts without their grouped ``records``; tuples become
    lists; non-finite floats become None.
    """
    if is_dataclass(value) and not isinstance(value, type):
        return {
            field.name: analysis_to_payload(getattr(value, field.name))
            for field in fields(value)
            if field.name not in EXCLUDED_PAYLOAD_FIELDS
        }
    if isinstance(value, Mapping):
        return {str(key): analysis_to_payload(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [analysis_to_payload(item) for item in value]
    if isinstance(value, float) and not math.isfinite(value):
        return None
    return value


def _regional_analysis(records: Sequence[CanonicalRecord]) -> RegionalAnalysis:
    by_region = aggregate_by_region(records)
    return RegionalAnalysis(
        by_region=by_region,
        by_governorate=aggregate_by_governorate(records),
        top_regions=tuple(top_regions(by_region, "incident_count", DEFAULT_TOP_REGIONS)),
    )


def _temporal_analysis(
    records: Sequence[CanonicalRecord],
    daily: Mapping[str, PeriodBucket],
    baseline_date: date,
) -> TemporalAnalysis:
    return TemporalAnalysis(
        daily=daily,
        weekly=aggregate_by_period(records, "week"),
        monthly=aggregate_by_period(records, "month"),
        daily_comparison=tuple(compare_periods(daily)),
        baseline_comparison=compare_to_baseline(records, baseline_date),
        rolling_7day=tuple(rolling_aggregation(daily, DEFAULT_ROLLING_WINDOW, "incidents")),
        cumulative=tuple(cumulative_series(records, "casualties")),
    )


def _stat(summary: Mapping[str, object], key: str) -> float:
    value = summary.get(key)
    return float(value) if isinstance(value, (int, float)) else 0.0
