"""Facility categories: health, education, and water."""

from __future__ import annotations

from typing import Mapping

from core.types import CanonicalRecord, SourceMetadata
from transforms.category_spec import (
    CategorySpec,
    RecordPayload,
    location_mentions,
    text_field,
)
from transforms.field_mapping import with_location_fields
from transforms.value_parsing import normalize_date, parse_float, parse_int

FOREIGN_LOCATION_KEYWORDS = ("italy", "ukraine", "sudan", "yemen", "eswatini", "africa", "turkey")
PALESTINE_LOCATION_KEYWORDS = ("palestine", "pse", "gaza", "west bank")

HEALTH_FIELD_MAPPING = with_location_fields(
    {
        "date": ("damage_date", "incident_date", "date", "assessment_date"),
        "who_year": ("year_(display)",),
        "who_value": ("numeric",),
        "who_code": ("gho_(code)",),
        "who_name": ("gho_(display)",),
        "beds": ("bed_capacity", "beds", "capacity"),
        "facility_name": ("name", "facility_name", "hospital_name"),
        "facility_type": ("type", "facility_type"),
        "status": ("status", "operational_status"),
        "damage_level": ("damage", "damage_level"),
        "staff_count": ("staff", "healthcare_workers"),
        "location": ("location", "governorate", "area", "country_(display)", "region_(display)"),
        "admin1": ("admin1", "governorate", "region_(display)"),
    }
)

EDUCATION_FIELD_MAPPING = with_location_fields(
    {
        "date": ("assessment_date", "last_updated", "date"),
        "students": ("students", "enrollment", "capacity"),
        "facility_name": ("name", "facility_name", "school_name"),
        "facility_type": ("type", "facility_type"),
        "status": ("status", "operational_status"),
        "damage_level": ("damage", "damage_level", "damage_assessment"),
        "staff": ("staff", "teachers"),
        "location": (
            "geographic_area",
            "ref_area",
            "country_id",
            "location",
            "governorate",
            "region",
        ),
    }
)

WATER_FIELD_MAPPING = with_location_fields(
    {
        "date": ("assessment_date", "last_updated", "date"),
        "capacity": ("capacity", "daily_capacity"),
        "facility_name": ("name", "facility_name"),
        "facility_type": ("type", "facility_type"),
        "status": ("status", "operational_status"),
        "population_served": ("population_served", "beneficiaries"),
        "location": ("location", "governorate", "area"),
    }
)


def build_health_payload(
    mapped: Mapping[str, object],
    source_meta: SourceMetadata,
) -> RecordPayload:
    """Build a health payload from a WHO indicator row or a facility row."""
    is_indicator = "who_code" in mapped or "who_value" in mapped
    record_date = normalize_date(mapped.get("date"))
    if record_date is None and mapped.get("who_year") is not None:
        record_date = normalize_date(f"{mapped['who_year']}-01-01")
    if is_indicator:
        value = parse_float(mapped.get("who_value")) or 0.0
        unit = "count"
        facility_name = text_field(mapped, "who_name", "Health Indicator")
        default_type = "indicator"
        bed_capacity = 0
    else:
        bed_capacity = parse_int(mapped.get("beds"))
        value = float(bed_capacity)
        unit = "beds"
        facility_name = text_field(mapped, "facility_name", "unknown")
        default_type = "health_facility"
    return RecordPayload(
        value=value,
        unit=unit,
        date=record_date,
        attributes={
            "facility_name": facility_name,
            "facility_type": text_field(mapped, "facility_type", default_type),
            "status": text_field(mapped, "status", "unknown"),
            "damage_level": text_field(mapped, "damage_level"),
            "bed_capacity": bed_capacity,
            "staff_count": parse_int(mapped.get("staff_count")),
        },
    )


def build_education_payload(
    mapped: Mapping[str, object],
    source_meta: SourceMetadata,
) -> RecordPayload:
    """Build an education payload counting enrolled students."""
    students = parse_int(mapped.get("students"))
    return RecordPayload(
        value=float(students),
        unit="students",
        attributes={
            "facility_name": text_field(mapped, "facility_name", "unknown"),
            "facility_type": text_field(mapped, "facility_type", "school"),
            "status": text_field(mapped, "status", "unknown"),
            "damage_level": text_field(mapped, "damage_level"),
            "students": students,
            "staff": parse_int(mapped.get("staff")),
        },
    )


def build_water_payload(
    mapped: Mapping[str, object],
    source_meta: SourceMetadata,
) -> RecordPayload:
    """Build a water facility payload measured in daily cubic meters."""
    capacity = parse_float(mapped.get("capacity")) or 0.0
    return RecordPayload(
        value=capacity,
        unit="cubic_meters",
        attributes={
            "facility_name": text_field(mapped, "facility_name", "unknown"),
            "facility_type": text_field(mapped, "facility_type", "water"),
            "status": text_field(mapped, "status", "unknown"),
            "capacity": capacity,
            "population_served": parse_int(mapped.get("population_served")),
        },
    )


def is_domestic_health_record(record: CanonicalRecord) -> bool:
    """Reject global-dataset rows located in unrelated countries."""
    return not location_mentions(record, FOREIGN_LOCATION_KEYWORDS)


def is_palestine_education_record(record: CanonicalRecord) -> bool:
    """Keep rows located in Palestine or with no known location."""
    name = record.location.name.strip().lower()
    return name in ("", "unknown") or location_mentions(record, PALESTINE_LOCATION_KEYWORDS)


HEALTH_SPEC = CategorySpec(
    category="health",
    record_type="health",
    id_prefix="health",
    required_fields=("facility_name",),
    field_mapping=HEALTH_FIELD_MAPPING,
    build_payload=build_health_payload,
    keep_record=is_domestic_health_record,
)

EDUCATION_SPEC = CategorySpec(
    category="education",
    record_type="education",
    id_prefix="education",
    required_fields=("facility_name",),
    field_mapping=EDUCATION_FIELD_MAPPING,
    build_payload=build_education_payload,
    keep_record=is_palestine_education_record,
)

WATER_SPEC = CategorySpec(
    category="water",
    record_type="water",
    id_prefix="water",
    required_fields=("facility_name",),
    field_mapping=WATER_FIELD_MAPPING,
    build_payload=build_water_payload,
)
