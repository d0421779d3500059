"""Economic indicator category.

Indicator observations are annual. After enrichment every record gains an
``analysis`` block computed over all observations of the same indicator.
"""

from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING, Mapping, Sequence

from analysis.descriptive import calculate_std_dev
from analysis.time_series import calculate_average_growth, calculate_linear_trend
from core.errors import MosaicTransformError
from core.types import CanonicalRecord, SourceMetadata
from transforms.category_spec import (
    CategorySpec,
    RecordPayload,
    palestine_when_unknown,
    text_field,
)
from transforms.field_mapping import with_location_fields
from transforms.value_parsing import normalize_date, parse_float, parse_iso_date

if TYPE_CHECKING:
    from core.run_context import RunContext

UNKNOWN_INDICATOR_CODE = "UNKNOWN"
UNKNOWN_INDICATOR_NAME = "Unknown Indicator"

UNIT_RULES = (
    (("(% of", "(%)"), "percentage"),
    (("us$", "usd"), "currency_usd"),
    (("per 1,000",), "per_1000"),
    (("per 100,000",), "per_100000"),
    (("per 100 people",), "per_100"),
    (("kwh",), "kwh"),
    (("metric tons",), "metric_tons"),
    (("births per woman",), "births_per_woman"),
    (("years",), "years"),
)

ECONOMIC_FIELD_MAPPING = with_location_fields(
    {
        "indicator_code": ("indicator", "indicator_code", "indicatorCode", "series_code"),
        "indicator_name": ("indicator_name", "indicatorName", "series_name"),
        "value": ("value", "Value", "obs_value"),
        "date": ("year", "date", "period"),
        "location": ("country", "country_name", "location"),
    }
)


def detect_unit(indicator_name: str) -> str:
    """Infer the unit of an indicator from its display name."""
    name = indicator_name.lower()
    for markers, unit in UNIT_RULES:
        if any(marker in name for marker in markers):
            return unit
    return "number"


def build_economic_payload(
    mapped: Mapping[str, object],
    source_meta: SourceMetadata,
) -> RecordPayload | None:
    """Build an annual indicator payload; records without a value are dropped.

    Raises:
        MosaicTransformError: If the observation has no usable year.
    """
    value = parse_float(mapped.get("value"))
    if value is None:
        return None
    observed = parse_iso_date(normalize_date(mapped.get("date")))
    if observed is None:
        raise MosaicTransformError(
            f"Economic observation has no usable year: {mapped.get('date')!r}."
        )
    indicator_name = text_field(mapped, "indicator_name") or source_meta.title
    indicator_name = indicator_name or UNKNOWN_INDICATOR_NAME
    return RecordPayload(
        value=value,
        unit=detect_unit(indicator_name),
        date=f"{observed.year:04d}-01-01",
        attributes={
            "indicator_code": text_field(mapped, "indicator_code", UNKNOWN_INDICATOR_CODE),
            "indicator_name": indicator_name,
            "period": {"type": "year", "value": str(observed.year)},
        },
    )


def add_indicator_trends(
    records: Sequence[CanonicalRecord],
    context: RunContext,
) -> list[CanonicalRecord]:
    """Attach per-indicator trend analysis to every economic record.

    Records of an indicator with fewer than two observations get
    ``analysis: None``.

    Args:
        records: Enriched economic records.
        context: Run context providing the baseline date.

    Returns:
        Records in input order with an ``analysis`` attribute.
    """
    by_indicator: dict[object, list[CanonicalRecord]] = {}
    for record in records:
        by_indicator.setdefault(record.attributes.get("indicator_code"), []).append(record)
    baseline = context.config.baseline_date.isoformat()
    analyzed: list[CanonicalRecord] = []
    for record in records:
        series = by_indicator[record.attributes.get("indicator_code")]
        attributes = dict(record.attributes)
        attributes["analysis"] = _trend_analysis(series, record, baseline)
        analyzed.append(replace(record, attributes=attributes))
    return analyzed


def _trend_analysis(
    series: Sequence[CanonicalRecord],
    current: CanonicalRecord,
    baseline: str,
) -> dict[str, object] | None:
    if len(series) < 2:
        return None
    ordered = sorted(series, key=lambda record: record.date or "")
    values = [record.value or 0.0 for record in ordered]
    trend = calculate_linear_trend(values)
    position = next(
        (index for index, record in enumerate(ordered) if record.date == current.date), 0
    )
    recent_change = 0.0
    if position > 0 and values[position - 1] != 0:
        recent_change = (values[position] - values[position - 1]) / values[position - 1] * 100
    baseline_change = 0.0
    before_baseline = [record for record in ordered if (record.date or "") <= baseline]
    if before_baseline and before_baseline[-1].value:
        reference_value = before_baseline[-1].value
        baseline_change = ((current.value or 0.0) - reference_value) / reference_value * 100
    return {
        "trend": {"slope": trend.slope, "direction": trend.direction},
        "growth_rate": calculate_average_growth(values),
        "volatility": calculate_std_dev(values),
        "recent_change": recent_change,
        "baseline_comparison": baseline_change,
    }


ECONOMIC_SPEC = CategorySpec(
    category="economic",
    record_type="economic",
    id_prefix="economic",
    required_fields=("value", "unit"),
    field_mapping=ECONOMIC_FIELD_MAPPING,
    build_payload=build_economic_payload,
    enrich_dataset=add_indicator_trends,
    region_override=palestine_when_unknown,
    default_location="Palestine",
)
