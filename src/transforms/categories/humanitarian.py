"""Humanitarian needs and refugee displacement categories."""

from __future__ import annotations

from typing import Mapping

from core.constants import REGION_PALESTINE, REGION_UNKNOWN
from core.types import SourceMetadata
from transforms.category_spec import UNKNOWN_LOCATION, CategorySpec, RecordPayload, text_field
from transforms.field_mapping import with_location_fields
from transforms.value_parsing import parse_float, parse_int

HUMANITARIAN_FIELD_MAPPING = with_location_fields(
    {
        "date": ("date", "reporting_date", "assessment_date", "startdate", "year"),
        "people_in_need": ("people_in_need", "pin", "affected"),
        "original_requirements": ("origrequirements",),
        "revised_requirements": ("revisedrequirements",),
        "indicator": ("indicator",),
        "sector": ("sector", "cluster", "categories"),
        "people_targeted": ("people_targeted", "target"),
        "people_reached": ("people_reached", "reached"),
        "severity": ("severity", "severity_level"),
        "priority": ("priority", "priority_level"),
        "location": ("location", "governorate", "area", "locations"),
    }
)

REFUGEE_FIELD_MAPPING = with_location_fields(
    {
        "date": ("date", "reporting_date", "timestamp", "year"),
        "refugees": ("refugees",),
        "asylum_seekers": ("asylum_seekers",),
        "idps": ("idps", "displaced", "population", "internally_displaced_persons"),
        "displacement_type": ("displacement_type", "type"),
        "origin": ("country_of_origin_name", "country_of_origin_code"),
        "asylum_country": ("country_of_asylum_name", "country_of_asylum_code"),
        "location": (
            "country_of_asylum_name",
            "country_of_asylum_code",
            "location",
            "governorate",
        ),
    }
)


def build_humanitarian_payload(
    mapped: Mapping[str, object],
    source_meta: SourceMetadata,
) -> RecordPayload:
    """Build a needs payload, valued in people or, failing that, in USD requirements."""
    people_in_need = parse_int(mapped.get("people_in_need"))
    requirements = parse_float(mapped.get("revised_requirements"))
    if requirements is None:
        requirements = parse_float(mapped.get("original_requirements"))
    if people_in_need:
        value, unit = float(people_in_need), "people"
    elif requirements:
        value, unit = requirements, "usd"
    else:
        value, unit = 0.0, "people"
    default_indicator = "funding_requirements" if unit == "usd" else "humanitarian_needs"
    indicator = text_field(mapped, "indicator") or text_field(mapped, "sector", default_indicator)
    return RecordPayload(
        value=value,
        unit=unit,
        attributes={
            "indicator": indicator,
            "sector": text_field(mapped, "sector", "multi-sector"),
            "people_in_need": people_in_need,
            "people_targeted": parse_int(mapped.get("people_targeted")),
            "people_reached": parse_int(mapped.get("people_reached")),
            "funding_requirements": requirements or 0.0,
            "severity": mapped.get("severity"),
            "priority": mapped.get("priority"),
        },
    )


def build_refugee_payload(
    mapped: Mapping[str, object],
    source_meta: SourceMetadata,
) -> RecordPayload:
    """Build a displacement payload totalling refugees, asylum seekers, and IDPs."""
    refugees = parse_int(mapped.get("refugees"))
    asylum_seekers = parse_int(mapped.get("asylum_seekers"))
    idps = parse_int(mapped.get("idps"))
    default_type = "internal" if idps > 0 else "cross-border"
    return RecordPayload(
        value=float(refugees + asylum_seekers + idps),
        unit="people",
        attributes={
            "displaced_population": idps,
            "refugees": refugees,
            "asylum_seekers": asylum_seekers,
            "displacement_type": text_field(mapped, "displacement_type", default_type),
            "origin": text_field(mapped, "origin", "Palestine"),
            "asylum_country": text_field(mapped, "asylum_country"),
        },
    )


def refugee_region(location_name: str, region: str) -> str:
    """Count Palestinian refugees hosted abroad under Palestine."""
    if region == REGION_UNKNOWN and location_name.strip().lower() != UNKNOWN_LOCATION:
        return REGION_PALESTINE
    return region


HUMANITARIAN_SPEC = CategorySpec(
    category="humanitarian",
    record_type="humanitarian",
    id_prefix="humanitarian",
    required_fields=("people_in_need",),
    field_mapping=HUMANITARIAN_FIELD_MAPPING,
    build_payload=build_humanitarian_payload,
)

REFUGEE_SPEC = CategorySpec(
    category="refugee",
    record_type="refugee",
    id_prefix="refugee",
    required_fields=("displaced_population",),
    field_mapping=REFUGEE_FIELD_MAPPING,
    build_payload=build_refugee_payload,
    region_override=refugee_region,
)
