"""Temporal aggregation of canonical records.

Records are bucketed by day, ISO week, month, quarter, or year. Buckets
feed period-over-period comparison, trailing rolling windows, cumulative
series, and the before/after baseline split. Records without a parseable
date are left out of every bucket.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Mapping, Sequence

from analysis.record_metrics import is_incident, record_number
from core.constants import DEFAULT_ROLLING_WINDOW, SUPPORTED_PERIOD_TYPES
from core.errors import MosaicAnalysisError
from core.types import CanonicalRecord
from transforms.value_parsing import parse_iso_date

COMPARED_METRICS = ("incidents", "casualties", "fatalities", "injuries", "affected_locations")
BASELINE_METRICS = ("incidents", "casualties")


@dataclass(frozen=True)
class PeriodStats:
    """Counts for one bucket of records."""

    total_records: int = 0
    incidents: int = 0
    casualties: float = 0.0
    fatalities: float = 0.0
    injuries: float = 0.0
    affected_locations: int = 0
    unique_event_types: int = 0

    def metric(self, metric_name: str) -> float:
        """Return a metric by name.

        Raises:
            MosaicAnalysisError: If the metric is unknown.
        """
        if metric_name not in self.__dataclass_fields__:
            supported = ", ".join(self.__dataclass_fields__)
            raise MosaicAnalysisError(
                f"Unsupported period metric '{metric_name}'. Use one of: {supported}."
            )
        return float(getattr(self, metric_name))


@dataclass(frozen=True)
class PeriodBucket:
    """Records that fall into one period key."""

    period: str
    period_type: str
    records: tuple[CanonicalRecord, ...]
    stats: PeriodStats


@dataclass(frozen=True)
class MetricChange:
    """Absolute and percentage change of one metric."""

    absolute: float
    percentage: float


@dataclass(frozen=True)
class PeriodComparison:
    """Change between two chronologically adjacent buckets."""

    period: str
    previous_period: str
    changes: Mapping[str, MetricChange]
    current_stats: PeriodStats
    previous_stats: PeriodStats


@dataclass(frozen=True)
class RollingPoint:
    """Trailing window aggregate ending at one bucket."""

    period: str
    window_size: int
    bucket_count: int
    total: float
    average: float


@dataclass(frozen=True)
class BaselineComparison:
    """Stats before and from the baseline date, with their change."""

    baseline_date: str
    before: PeriodStats
    after: PeriodStats
    changes: Mapping[str, MetricChange]


@dataclass(frozen=True)
class CumulativePoint:
    """One step of a cumulative series."""

    period: str
    value: float
    cumulative: float


def period_key(day: date, period_type: str) -> str:
    """Return the bucket key of a date.

    Args:
        day: Calendar date.
        period_type: One of day, week, month, quarter, year.

    Returns:
        ``YYYY-MM-DD``, ``YYYY-Www`` (ISO year and week), ``YYYY-MM``,
        ``YYYY-Qn``, or ``YYYY``.

    Raises:
        MosaicAnalysisError: If period type is unsupported.
    """
    if period_type == "day":
        return day.isoformat()
    if period_type == "week":
        iso_year, iso_week, _ = day.isocalendar()
        return f"{iso_year}-W{iso_week:02d}"
    if period_type == "month":
        return f"{day.year}-{day.month:02d}"
    if period_type == "quarter":
        return f"{day.year}-Q{(day.month - 1) // 3 + 1}"
    if period_type == "year":
        return str(day.year)
    supported = ", ".join(SUPPORTED_PERIOD_TYPES)
    raise MosaicAnalysisError(f"Unsupported period type '{period_type}'. Use one of: {supported}.")


def calculate_period_stats(records: Iterable[CanonicalRecord]) -> PeriodStats:
    """Count incidents, casualties, locations, and event types."""
    total_records = 0
    incidents = 0
    fatalities = 0.0
    injuries = 0.0
    locations: set[str] = set()
    event_types: set[str] = set()
    for record in records:
        total_records += 1
        if is_incident(record):
            incidents += 1
            event_type = record.attributes.get("event_type")
            if event_type:
                event_types.add(str(event_type))
        fatalities += record_number(record, "fatalities")
        injuries += record_number(record, "injuries")
        if record.location.name:
            locations.add(record.location.name)
    return PeriodStats(
        total_records=total_records,
        incidents=incidents,
        casualties=fatalities + injuries,
        fatalities=fatalities,
        injuries=injuries,
        affected_locations=len(locations),
        unique_event_types=len(event_types),
    )


def aggregate_by_period(
    records: Iterable[CanonicalRecord],
    period_type: str = "day",
) -> dict[str, PeriodBucket]:
    """Bucket records by period key.

    Args:
        records: Canonical records.
        period_type: One of day, week, month, quarter, year.

    Returns:
        Buckets keyed by period, in chronological key order.
    """
    grouped: dict[str, list[CanonicalRecord]] = {}
    for record in records:
        record_date = parse_iso_date(record.date)
        if record_date is None:
            continue
        grouped.setdefault(period_key(record_date, period_type), []).append(record)
    return {
        key: PeriodBucket(
            period=key,
            period_type=period_type,
            records=tuple(grouped[key]),
            stats=calculate_period_stats(grouped[key]),
        )
        for key in sorted(grouped)
    }


def aggregate_by_periods(
    records: Sequence[CanonicalRecord],
    period_types: Sequence[str] = ("day", "week", "month"),
) -> dict[str, dict[str, PeriodBucket]]:
    """Bucket the same records under several period types."""
    return {period_type: aggregate_by_period(records, period_type) for period_type in period_types}


def percentage_change(old_value: float, new_value: float) -> float:
    """Return percentage change, 100 when growing from zero and 0 when both are zero."""
    if old_value == 0:
        return 100.0 if new_value > 0 else 0.0
    return ((new_value - old_value) / old_value) * 100


def compare_periods(buckets: Mapping[str, PeriodBucket]) -> list[PeriodComparison]:
    """Compare each bucket with its chronological predecessor.

    Args:
        buckets: Buckets keyed by period.

    Returns:
        One comparison per bucket after the first.
    """
    keys = sorted(buckets)
    comparisons: list[PeriodComparison] = []
    for previous_key, current_key in zip(keys, keys[1:]):
        previous = buckets[previous_key].stats
        current = buckets[current_key].stats
        comparisons.append(
            PeriodComparison(
                period=current_key,
                previous_period=previous_key,
                changes=_metric_changes(previous, current, COMPARED_METRICS),
                current_stats=current,
                previous_stats=previous,
            )
        )
    return comparisons


def rolling_aggregation(
    buckets: Mapping[str, PeriodBucket],
    window_size: int = DEFAULT_ROLLING_WINDOW,
    metric_name: str = "incidents",
) -> list[RollingPoint]:
    """Compute a trailing N-bucket sum and average for each bucket.

    Args:
        buckets: Buckets keyed by period.
        window_size: Number of trailing buckets, including the current one.
        metric_name: PeriodStats metric to aggregate.

    Returns:
        One rolling point per bucket in chronological order.

    Raises:
        MosaicAnalysisError: If window size is below 1.
    """
    if window_size < 1:
        raise MosaicAnalysisError(
            f"Invalid rolling window {window_size}: expected a value >= 1."
        )
    keys = sorted(buckets)
    metric_values = [buckets[key].stats.metric(metric_name) for key in keys]
    points: list[RollingPoint] = []
    for index, key in enumerate(keys):
        window = metric_values[max(0, index - window_size + 1) : index + 1]
        total = sum(window)
        points.append(
            RollingPoint(
                period=key,
                window_size=window_size,
                bucket_count=len(window),
                total=total,
                average=total / len(window),
            )
        )
    return points


def compare_to_baseline(
    records: Iterable[CanonicalRecord],
    baseline_date: date,
) -> BaselineComparison:
    """Split records at the baseline date and compare the halves.

    Records dated before the baseline fall in ``before``; records on or
    after it fall in ``after``.

    Args:
        records: Canonical records.
        baseline_date: Cutoff date.

    Returns:
        Baseline comparison with incident and casualty changes.
    """
    before: list[CanonicalRecord] = []
    after: list[CanonicalRecord] = []
    for record in records:
        record_date = parse_iso_date(record.date)
        if record_date is None:
            continue
        if record_date < baseline_date:
            before.append(record)
        else:
            after.append(record)
    before_stats = calculate_period_stats(before)
    after_stats = calculate_period_stats(after)
    return BaselineComparison(
        baseline_date=baseline_date.isoformat(),
        before=before_stats,
        after=after_stats,
        changes=_metric_changes(before_stats, after_stats, BASELINE_METRICS),
    )


def cumulative_series(
    records: Iterable[CanonicalRecord],
    metric_name: str = "casualties",
    period_type: str = "day",
) -> list[CumulativePoint]:
    """Return a running total of a metric across chronological buckets."""
    buckets = aggregate_by_period(records, period_type)
    running_total = 0.0
    series: list[CumulativePoint] = []
    for key, bucket in buckets.items():
        value = bucket.stats.metric(metric_name)
        running_total += value
        series.append(CumulativePoint(period=key, value=value, cumulative=running_total))
    return series


def bucket_series(buckets: Mapping[str, PeriodBucket], metric_name: str) -> list[float]:
    """Return one metric per bucket in chronological order."""
    return [buckets[key].stats.metric(metric_name) for key in sorted(buckets)]


def _metric_changes(
    previous: PeriodStats,
    current: PeriodStats,
    metric_names: Sequence[str],
) -> dict[str, MetricChange]:
    return {
        metric_name: MetricChange(
            absolute=current.metric(metric_name) - previous.metric(metric_name),
            percentage=percentage_change(previous.metric(metric_name), current.metric(metric_name)),
        )
        for metric_name in metric_names
    }
