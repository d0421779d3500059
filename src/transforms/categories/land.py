"""Land category: settlements, checkpoints, demolitions, barrier, confiscations."""

from __future__ import annotations

from typing import Mapping

from core.types import SourceMetadata
from transforms.category_spec import CategorySpec, RecordPayload, text_field
from transforms.field_mapping import with_location_fields
from transforms.value_parsing import parse_float, parse_int, parse_optional_int

LAND_TYPE_RULES = (
    ("settlement", ("settlement",)),
    ("checkpoint", ("checkpoint", "barrier")),
    ("demolition", ("demolition", "destruction")),
    ("wall", ("wall", "barrier", "fence")),
    ("confiscation", ("confiscation", "seizure")),
)

STATUS_RULES = {
    "settlement": (
        (("unauthorized", "illegal"), "Unauthorized"),
        (("authorized", "legal"), "Authorized"),
        (("outpost",), "Outpost"),
        (("expanding",), "Expanding"),
    ),
    "checkpoint": (
        (("inactive",), "Closed"),
        (("active", "operational"), "Active"),
        (("partial",), "Partial"),
        (("closed",), "Closed"),
    ),
    "demolition": (
        (("complete",), "Completed"),
        (("partial",), "Partial"),
        (("pending", "planned"), "Pending"),
    ),
}

LAND_FIELD_MAPPING = with_location_fields(
    {
        "date": ("date", "last_updated"),
        "name": ("name",),
        "land_type": ("type", "land_type"),
        "status": ("status", "legal_status"),
        "population": ("population", "settlers"),
        "established_year": ("established_year", "year_established"),
        "area_dunums": ("area_dunums", "area", "area_confiscated"),
        "housing_units": ("housing_units", "units"),
        "checkpoint_type": ("checkpoint_type",),
        "structures_demolished": ("structures_demolished", "count"),
        "people_displaced": ("people_displaced", "displaced"),
        "structure_type": ("structure_type", "building_type"),
        "reason": ("reason", "demolition_reason"),
        "segment_length": ("segment_length", "length"),
        "wall_type": ("wall_type",),
        "description": ("description",),
        "legal_basis": ("legal_basis", "military_order"),
        "affected_families": ("affected_families",),
        "location": ("location", "name"),
        "admin2": ("governorate", "district"),
        "admin3": ("locality", "village"),
    }
)


def determine_land_type(record_type: str | None, source_meta: SourceMetadata) -> str:
    """Classify a land record from its own type label and the dataset title."""
    labels = (record_type or "").lower(), f"{source_meta.title} {source_meta.source}".lower()
    for land_type, markers in LAND_TYPE_RULES:
        if any(marker in label for marker in markers for label in labels):
            return land_type
    return "other"


def normalize_land_status(status: str | None, land_type: str) -> str:
    """Map a provider status onto the vocabulary of the land type."""
    if not status:
        return "Unknown"
    lowered = status.lower()
    for markers, normalized in STATUS_RULES.get(land_type, ()):
        if any(marker in lowered for marker in markers):
            return normalized
    return status


def classify_checkpoint_type(name: str | None, record_type: str | None) -> str:
    """Return the checkpoint kind named in the record's name or type."""
    text = f"{name or ''} {record_type or ''}".lower()
    for marker, label in (
        ("terminal", "Terminal"),
        ("partial", "Partial Checkpoint"),
        ("roadblock", "Roadblock"),
        ("gate", "Gate"),
    ):
        if marker in text:
            return label
    return "Checkpoint"


def classify_wall_type(description: str | None, record_type: str | None) -> str:
    """Return the barrier construction named in the description or type."""
    text = f"{description or ''} {record_type or ''}".lower()
    for marker, label in (("concrete", "Concrete Wall"), ("fence", "Fence"), ("trench", "Trench")):
        if marker in text:
            return label
    return "Barrier"


def build_land_payload(
    mapped: Mapping[str, object],
    source_meta: SourceMetadata,
) -> RecordPayload | None:
    """Build a land payload with the detail block of its land type.

    The value measures the type: settler population, demolished structures,
    barrier length, or confiscated area. Rows naming neither a site nor a
    location are dropped.
    """
    name = text_field(mapped, "name") or text_field(mapped, "location")
    if name is None:
        return None
    raw_type = text_field(mapped, "land_type")
    land_type = determine_land_type(raw_type, source_meta)
    status = normalize_land_status(text_field(mapped, "status"), land_type)
    details, value, unit = _land_details(mapped, land_type, name, raw_type)
    attributes: dict[str, object] = {"land_type": land_type, "name": name, "status": status}
    if details:
        attributes[land_type] = details
    return RecordPayload(value=value, unit=unit, attributes=attributes)


def _land_details(
    mapped: Mapping[str, object],
    land_type: str,
    name: str,
    raw_type: str | None,
) -> tuple[dict[str, object], float | None, str]:
    if land_type == "settlement":
        population = parse_float(mapped.get("population"))
        details = {
            "population": population,
            "established_year": parse_optional_int(mapped.get("established_year")),
            "area_dunums": parse_float(mapped.get("area_dunums")),
            "housing_units": parse_float(mapped.get("housing_units")),
        }
        return details, population, "settlers"
    if land_type == "checkpoint":
        checkpoint_type = text_field(mapped, "checkpoint_type")
        details = {"checkpoint_type": checkpoint_type or classify_checkpoint_type(name, raw_type)}
        return details, 1.0, "sites"
    if land_type == "demolition":
        structures = parse_int(mapped.get("structures_demolished"), default=1)
        details = {
            "structures_demolished": structures,
            "people_displaced": parse_int(mapped.get("people_displaced")),
            "structure_type": text_field(mapped, "structure_type"),
            "reason": text_field(mapped, "reason"),
        }
        return details, float(structures), "structures"
    if land_type == "wall":
        length = parse_float(mapped.get("segment_length"))
        wall_type = text_field(mapped, "wall_type") or classify_wall_type(
            text_field(mapped, "description"), raw_type
        )
        details = {
            "segment_length": length,
            "wall_type": wall_type,
        }
        return details, length, "km"
    if land_type == "confiscation":
        area = parse_float(mapped.get("area_dunums"))
        details = {
            "area_confiscated": area,
            "legal_basis": text_field(mapped, "legal_basis"),
            "affected_families": parse_int(mapped.get("affected_families")),
        }
        return details, area, "dunums"
    return {}, None, "sites"


LAND_SPEC = CategorySpec(
    category="land",
    record_type="land",
    id_prefix="land",
    required_fields=("name", "status"),
    field_mapping=LAND_FIELD_MAPPING,
    build_payload=build_land_payload,
    default_location="Palestine",
)
