"""Spatial aggregation of canonical records.

Groups records by region, governorate, or any location attribute and
accumulates incident and casualty counts, average severity, date range,
and a daily series per group.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Mapping, Sequence

from analysis.record_metrics import is_incident, record_number
from core.constants import DEFAULT_TOP_REGIONS, REGION_UNKNOWN, SUPPORTED_REGIONS
from core.errors import MosaicAnalysisError
from core.types import CanonicalRecord
from enrich.spatial_context import GAZA_GOVERNORATES, WEST_BANK_GOVERNORATES
from transforms.value_parsing import parse_iso_date

UNKNOWN_GOVERNORATE = "unknown"
BOUNDARY_FIELDS = ("name", "region", "level1", "level2", "level3")


@dataclass(frozen=True)
class DailyPoint:
    """Per-day totals inside one spatial group."""

    date: str
    records: int
    incidents: int
    fatalities: float
    injuries: float


@dataclass(frozen=True)
class RegionStats:
    """Aggregated metrics for one spatial group.

    Attributes:
        total_records: Records in the group.
        incident_count: Conflict incidents in the group.
        casualty_total: Fatalities plus injuries.
        fatalities: Sum of fatalities.
        injuries: Sum of injuries.
        severity_index: Average severity per incident.
        affected_locations: Distinct location names.
        start_date: Earliest record date.
        end_date: Latest record date.
        time_series: Daily totals in date order.
    """

    total_records: int = 0
    incident_count: int = 0
    casualty_total: float = 0.0
    fatalities: float = 0.0
    injuries: float = 0.0
    severity_index: float = 0.0
    affected_locations: int = 0
    start_date: str | None = None
    end_date: str | None = None
    time_series: tuple[DailyPoint, ...] = ()

    def metric(self, metric_name: str) -> float:
        """Return a numeric metric by name.

        Raises:
            MosaicAnalysisError: If the metric is not numeric or unknown.
        """
        value = getattr(self, metric_name, None)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise MosaicAnalysisError(
                f"Unsupported region metric '{metric_name}'. "
                "Use incident_count, casualty_total, fatalities, injuries, or severity_index."
            )
        return float(value)


@dataclass(frozen=True)
class SpatialBucket:
    """Records grouped under one spatial key."""

    name: str
    records: tuple[CanonicalRecord, ...]
    stats: RegionStats


@dataclass(frozen=True)
class RankedRegion:
    """One row of a top-N ranking."""

    name: str
    value: float
    stats: RegionStats


def calculate_region_stats(records: Sequence[CanonicalRecord]) -> RegionStats:
    """Aggregate metrics for one group of records."""
    incident_count = 0
    fatalities = 0.0
    injuries = 0.0
    severity_total = 0.0
    locations: set[str] = set()
    dates: list[str] = []
    for record in records:
        if is_incident(record):
            incident_count += 1
        fatalities += record_number(record, "fatalities")
        injuries += record_number(record, "injuries")
        severity_total += record_number(record, "severity_index")
        if record.location.name:
            locations.add(record.location.name)
        record_day = parse_iso_date(record.date)
        if record_day is not None:
            dates.append(record_day.isoformat())
    return RegionStats(
        total_records=len(records),
        incident_count=incident_count,
        casualty_total=fatalities + injuries,
        fatalities=fatalities,
        injuries=injuries,
        severity_index=severity_total / incident_count if incident_count else 0.0,
        affected_locations=len(locations),
        start_date=min(dates) if dates else None,
        end_date=max(dates) if dates else None,
        time_series=_daily_series(records),
    )


def aggregate_by_region(records: Iterable[CanonicalRecord]) -> dict[str, SpatialBucket]:
    """Group records by the closed region set; unrecognized regions go to Unknown."""

    def region_key(record: CanonicalRecord) -> str:
        region = record.location.region
        return region if region in SUPPORTED_REGIONS else REGION_UNKNOWN

    return _aggregate(records, key_for=region_key, initial_keys=SUPPORTED_REGIONS)


def aggregate_by_governorate(records: Iterable[CanonicalRecord]) -> dict[str, SpatialBucket]:
    """Group records by admin level 1 over the fixed governorate list."""
    known = GAZA_GOVERNORATES + WEST_BANK_GOVERNORATES

    def governorate_key(record: CanonicalRecord) -> str:
        governorate = record.location.admin_levels.level1
        return governorate if governorate in known else UNKNOWN_GOVERNORATE

    initial_keys = known + (UNKNOWN_GOVERNORATE,)
    return _aggregate(records, key_for=governorate_key, initial_keys=initial_keys)


def aggregate_by_boundary(
    records: Iterable[CanonicalRecord],
    boundary_field: str,
) -> dict[str, SpatialBucket]:
    """Group records by an arbitrary location attribute.

    Args:
        records: Canonical records.
        boundary_field: One of name, region, level1, level2, level3.

    Returns:
        Buckets keyed by the attribute value, ``unknown`` when missing.

    Raises:
        MosaicAnalysisError: If boundary field is unsupported.
    """
    if boundary_field not in BOUNDARY_FIELDS:
        raise MosaicAnalysisError(
            f"Unsupported boundary field '{boundary_field}'. "
            f"Use one of: {', '.join(BOUNDARY_FIELDS)}."
        )

    def boundary_key(record: CanonicalRecord) -> str:
        location = record.location
        if boundary_field in ("name", "region"):
            value = getattr(location, boundary_field)
        else:
            value = getattr(location.admin_levels, boundary_field)
        return value or UNKNOWN_GOVERNORATE

    return _aggregate(records, key_for=boundary_key, initial_keys=())


def top_regions(
    buckets: Mapping[str, SpatialBucket],
    metric_name: str = "incident_count",
    limit: int = DEFAULT_TOP_REGIONS,
) -> list[RankedRegion]:
    """Rank groups by a metric, descending.

    Args:
        buckets: Spatial buckets.
        metric_name: RegionStats metric to rank by.
        limit: Maximum rows returned.

    Returns:
        Ranked rows; ties keep bucket order.
    """
    ranked = [
        RankedRegion(name=name, value=bucket.stats.metric(metric_name), stats=bucket.stats)
        for name, bucket in buckets.items()
    ]
    ranked.sort(key=lambda row: row.value, reverse=True)
    return ranked[:limit]


def compare_regions(
    buckets: Mapping[str, SpatialBucket],
    metric_names: Sequence[str] = ("incident_count", "casualty_total"),
) -> dict[str, dict[str, float]]:
    """Tabulate several metrics per group."""
    return {
        name: {metric_name: bucket.stats.metric(metric_name) for metric_name in metric_names}
        for name, bucket in buckets.items()
    }


def _aggregate(
    records: Iterable[CanonicalRecord],
    key_for: Callable[[CanonicalRecord], str],
    initial_keys: Sequence[str],
) -> dict[str, SpatialBucket]:
    grouped: dict[str, list[CanonicalRecord]] = {key: [] for key in initial_keys}
    for record in records:
        grouped.setdefault(key_for(record), []).append(record)
    return {
        key: SpatialBucket(name=key, records=tuple(rows), stats=calculate_region_stats(rows))
        for key, rows in grouped.items()
    }


def _daily_series(records: Sequence[CanonicalRecord]) -> tuple[DailyPoint, ...]:
    daily: dict[str, list[CanonicalRecord]] = {}
    for record in records:
        record_day = parse_iso_date(record.date)
        if record_day is None:
            continue
        daily.setdefault(record_day.isoformat(), []).append(record)
    return tuple(
        DailyPoint(
            date=day,
            records=len(daily[day]),
            incidents=sum(1 for record in daily[day] if is_incident(record)),
            fatalities=sum(record_number(record, "fatalities") for record in daily[day]),
            injuries=sum(record_number(record, "injuries") for record in daily[day]),
        )
        for day in sorted(daily)
    )
