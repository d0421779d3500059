"""Infrastructure damage and shelter categories.

Shelter rows are infrastructure records with a ``shelter_type``; both
write into the infrastructure category.
"""

from __future__ import annotations

from typing import Mapping

from core.types import SourceMetadata
from transforms.category_spec import CategorySpec, RecordPayload, text_field
from transforms.field_mapping import with_location_fields
from transforms.value_parsing import parse_float, parse_int

INFRASTRUCTURE_FIELD_MAPPING = with_location_fields(
    {
        "date": ("damage_date", "incident_date", "date", "assessment_date"),
        "estimated_cost": ("estimated_cost", "damage_cost", "cost"),
        "structure_type": ("structure_type", "type", "building_type"),
        "damage_level": ("damage", "damage_level", "damage_assessment"),
        "people_affected": ("people_affected", "affected_population"),
        "status": ("status", "current_status"),
    }
)

SHELTER_FIELD_MAPPING = with_location_fields(
    {
        "date": ("damage_date", "incident_date", "date", "assessment_date"),
        "shelter_name": ("name", "shelter_name", "building_name"),
        "shelter_type": ("shelter_type", "type", "housing_type"),
        "status": ("status", "housing_status"),
        "damage_level": ("damage", "damage_level", "damage_assessment"),
        "capacity": ("capacity", "housing_units"),
        "occupancy": ("occupancy", "residents", "population"),
        "displaced_persons": ("idps", "displaced"),
        "location": ("location", "governorate", "area"),
    }
)


def build_infrastructure_payload(
    mapped: Mapping[str, object],
    source_meta: SourceMetadata,
) -> RecordPayload:
    """Build a damaged-structure payload valued by estimated cost in USD."""
    estimated_cost = parse_float(mapped.get("estimated_cost")) or 0.0
    return RecordPayload(
        value=estimated_cost,
        unit="usd",
        attributes={
            "structure_type": text_field(mapped, "structure_type", "building"),
            "damage_level": text_field(mapped, "damage_level", "unknown"),
            "estimated_cost": estimated_cost,
            "people_affected": parse_int(mapped.get("people_affected")),
            "status": text_field(mapped, "status", "damaged"),
        },
    )


def build_shelter_payload(
    mapped: Mapping[str, object],
    source_meta: SourceMetadata,
) -> RecordPayload:
    """Build a shelter payload valued by housing capacity."""
    capacity = parse_int(mapped.get("capacity"))
    shelter_type = text_field(mapped, "shelter_type", "housing")
    return RecordPayload(
        value=float(capacity),
        unit="units",
        attributes={
            "structure_type": "shelter",
            "shelter_name": text_field(mapped, "shelter_name", "unknown"),
            "shelter_type": shelter_type,
            "status": text_field(mapped, "status", "unknown"),
            "damage_level": text_field(mapped, "damage_level"),
            "capacity": capacity,
            "occupancy": parse_int(mapped.get("occupancy")),
            "displaced_persons": parse_int(mapped.get("displaced_persons")),
        },
    )


INFRASTRUCTURE_SPEC = CategorySpec(
    category="infrastructure",
    record_type="infrastructure",
    id_prefix="infrastructure",
    required_fields=("structure_type",),
    field_mapping=INFRASTRUCTURE_FIELD_MAPPING,
    build_payload=build_infrastructure_payload,
)

SHELTER_SPEC = CategorySpec(
    category="infrastructure",
    record_type="infrastructure",
    id_prefix="shelter",
    required_fields=("structure_type",),
    field_mapping=SHELTER_FIELD_MAPPING,
    build_payload=build_shelter_payload,
)
