"""Generic record enrichment.

Adds temporal context, fills spatial gaps, infers demographic breakdowns,
and rescores quality. Each record is enriched independently.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Mapping

from core.constants import REGION_UNKNOWN
from core.run_context import RunContext
from core.types import CanonicalRecord, Location
from enrich.demographics import infer_casualty_breakdown
from enrich.quality_scoring import score_record_quality
from enrich.spatial_context import (
    classify_region,
    classify_region_type,
    find_governorate_by_coordinates,
    find_nearest_city,
    infer_governorate,
    region_for_governorate,
)
from enrich.temporal_context import build_temporal_context


def enrich_records(
    records: Iterable[CanonicalRecord],
    required_fields: tuple[str, ...],
    context: RunContext,
) -> list[CanonicalRecord]:
    """Enrich canonical records with derived context and fresh quality scores.

    Args:
        records: Canonical records.
        required_fields: Category required-field table for completeness.
        context: Run context providing baseline date and reference time.

    Returns:
        Enriched records in input order.
    """
    return [enrich_record(record, required_fields, context) for record in records]


def enrich_record(
    record: CanonicalRecord,
    required_fields: tuple[str, ...],
    context: RunContext,
) -> CanonicalRecord:
    """Enrich one canonical record."""
    enriched = replace(
        record,
        location=enrich_location(record.location),
        attributes=_enrich_attributes(record),
        temporal_context=build_temporal_context(record.date, context.config.baseline_date),
        updated_at=context.timestamp,
    )
    quality = score_record_quality(enriched, required_fields, context.reference_time.date())
    return replace(enriched, quality=quality)


def enrich_location(location: Location) -> Location:
    """Fill governorate and region gaps on a location.

    The region is only recomputed when it is Unknown, so a region derived
    from dataset metadata during transform is preserved.

    Args:
        location: Canonical location.

    Returns:
        Location with inferred governorate and region where possible.
    """
    governorate = location.admin_levels.level1
    if not governorate:
        governorate = infer_governorate(location.name) or find_governorate_by_coordinates(
            location.coordinates
        )
    region = location.region
    if region == REGION_UNKNOWN:
        region = classify_region(location.name)
    if region == REGION_UNKNOWN and governorate:
        region = region_for_governorate(governorate)
    return replace(
        location,
        admin_levels=replace(location.admin_levels, level1=governorate),
        region=region,
    )


def _enrich_attributes(record: CanonicalRecord) -> Mapping[str, object]:
    attributes = dict(record.attributes)
    casualties = attributes.get("casualties")
    if isinstance(casualties, Mapping):
        attributes["casualties"] = infer_casualty_breakdown(casualties)
    region_type = classify_region_type(record.location.name)
    if region_type and "region_type" not in attributes:
        attributes["region_type"] = region_type
    if record.location.coordinates is not None and "nearest_city" not in attributes:
        attributes["nearest_city"] = find_nearest_city(record.location.coordinates)
    return attributes
