"""Cultural heritage and historical event categories."""

from __future__ import annotations

from typing import Mapping

from core.types import SourceMetadata
from transforms.category_spec import (
    CategorySpec,
    RecordPayload,
    palestine_when_unknown,
    text_field,
)
from transforms.field_mapping import with_location_fields
from transforms.value_parsing import normalize_date, parse_float, parse_int

SITE_TYPE_RULES = (
    (("mosque", "church", "monastery", "shrine", "religious"), "Religious"),
    (("archaeological", "ruins", "ancient", "tell"), "Archaeological"),
    (("palace", "fortress", "castle", "building"), "Historical Building"),
    (("museum", "library", "cultural center"), "Cultural Center"),
    (("natural", "landscape", "garden"), "Natural Heritage"),
)

SITE_STATUS_RULES = (
    (("destroyed", "demolished"), "Destroyed"),
    (("severe", "heavily damaged"), "Severely Damaged"),
    (("damaged", "partial"), "Damaged"),
    (("at risk", "threatened"), "At Risk"),
    (("intact", "good", "preserved"), "Intact"),
)

DAMAGE_SEVERITY_RULES = (
    ("destroyed", "total"),
    ("severe", "severe"),
    ("damaged", "moderate"),
    ("minor", "minor"),
)

CONFLICT_EVENT_TYPES = ("war", "uprising", "political")
DEPOPULATION_EVENT = "depopulation"
NAKBA_DAY = "05-15"

CULTURE_FIELD_MAPPING = with_location_fields(
    {
        "date": ("date", "last_updated"),
        "name": ("name", "site_name"),
        "site_type": ("site_type", "type"),
        "status": ("status",),
        "historical_period": ("historical_period", "period"),
        "significance": ("significance", "importance"),
        "description": ("description", "summary"),
        "unesco_status": ("unesco_status", "world_heritage_status"),
        "protection_level": ("protection_level",),
        "damage": ("damage",),
        "damage_date": ("damage_date",),
        "location": ("location", "city"),
        "admin2": ("city", "location"),
    }
)

HISTORICAL_FIELD_MAPPING = with_location_fields(
    {
        "date": ("date",),
        "depopulation_date": ("depopulation_date",),
        "year": ("year",),
        "name": ("name",),
        "event_type": ("event_type",),
        "district": ("district",),
        "population_1948": ("population_1948",),
        "fatalities": ("fatalities",),
        "value": ("value", "population"),
        "description": ("description",),
        "source_detail": ("source_detail",),
        "coordinates": ("coord", "coordinates"),
        "location": ("location", "name"),
        "admin2": ("district",),
    }
)


def normalize_site_type(site_type: str | None) -> str:
    """Group provider site labels into heritage site types."""
    if not site_type:
        return "Unknown"
    lowered = site_type.lower()
    for markers, label in SITE_TYPE_RULES:
        if any(marker in lowered for marker in markers):
            return label
    return site_type


def normalize_site_status(status: str | None) -> str:
    """Map provider condition labels onto the heritage status scale."""
    if not status:
        return "Unknown"
    lowered = status.lower()
    for markers, label in SITE_STATUS_RULES:
        if any(marker in lowered for marker in markers):
            return label
    return status


def assess_damage_severity(status: str | None) -> str | None:
    """Return total, severe, moderate, or minor damage implied by a status."""
    if not status:
        return None
    lowered = status.lower()
    for marker, severity in DAMAGE_SEVERITY_RULES:
        if marker in lowered:
            return severity
    return None


def build_culture_payload(
    mapped: Mapping[str, object],
    source_meta: SourceMetadata,
) -> RecordPayload | None:
    """Build a heritage site payload; unnamed sites are dropped."""
    name = text_field(mapped, "name")
    if name is None:
        return None
    raw_status = text_field(mapped, "status")
    status = normalize_site_status(raw_status)
    attributes: dict[str, object] = {
        "name": name,
        "site_type": normalize_site_type(text_field(mapped, "site_type")),
        "status": status,
        "historical_period": text_field(mapped, "historical_period", "Unknown"),
        "significance": text_field(mapped, "significance"),
        "description": text_field(mapped, "description"),
        "unesco_status": text_field(mapped, "unesco_status"),
        "protection_level": text_field(mapped, "protection_level", "Unknown"),
    }
    damage = mapped.get("damage")
    if isinstance(damage, Mapping):
        damage_status = damage.get("status") if isinstance(damage.get("status"), str) else None
        attributes["damage"] = {
            "status": normalize_site_status(damage_status or raw_status),
            "severity": damage.get("severity") or assess_damage_severity(raw_status),
            "date_damaged": normalize_date(damage.get("date") or mapped.get("damage_date")),
            "description": damage.get("description"),
        }
    damaged = status in ("Destroyed", "Severely Damaged", "Damaged")
    return RecordPayload(value=1.0 if damaged else 0.0, unit="sites_damaged", attributes=attributes)


def build_historical_payload(
    mapped: Mapping[str, object],
    source_meta: SourceMetadata,
) -> RecordPayload:
    """Build a historical payload for a depopulation, conflict, or population row.

    Depopulated villages without a precise date are dated to Nakba day of
    their year; other events default to January 1st.
    """
    event_type = text_field(mapped, "event_type")
    year = parse_int(mapped.get("year"))
    name = text_field(mapped, "name", "Unknown")
    if event_type == DEPOPULATION_EVENT:
        population = parse_float(mapped.get("population_1948"))
        district = text_field(mapped, "district")
        return RecordPayload(
            value=population,
            unit="people",
            date=_event_date(mapped, "depopulation_date", year, NAKBA_DAY),
            location_name=name,
            attributes={
                "event_type": DEPOPULATION_EVENT,
                "year": year or None,
                "population_affected": population,
                "district": district,
                "description": (
                    f"Depopulation of {name} ({district or 'unknown district'}) during the Nakba."
                ),
                "tags": ["nakba", "depopulation", "displacement"],
            },
        )
    if event_type in CONFLICT_EVENT_TYPES:
        fatalities = parse_int(mapped.get("fatalities"))
        return RecordPayload(
            value=float(fatalities),
            unit="fatalities",
            date=_event_date(mapped, "date", year, "01-01"),
            attributes={
                "event_type": event_type,
                "year": year or None,
                "name": name,
                "fatalities": fatalities,
                "description": text_field(mapped, "description", f"{name} ({year})"),
                "tags": ["historical", event_type, "conflict"],
            },
        )
    population = parse_float(mapped.get("value"))
    return RecordPayload(
        value=population,
        unit="people",
        date=_event_date(mapped, "date", year, "01-01"),
        attributes={
            "event_type": "population_estimate",
            "year": year or None,
            "population": population,
            "source_detail": text_field(mapped, "source_detail"),
            "tags": ["population", "historical", "demographics"],
        },
    )


def _event_date(
    mapped: Mapping[str, object],
    date_field: str,
    year: int,
    month_day: str,
) -> str | None:
    explicit = normalize_date(mapped.get(date_field))
    if explicit is not None:
        return explicit
    if year:
        return normalize_date(f"{year:04d}-{month_day}")
    return None


CULTURE_SPEC = CategorySpec(
    category="culture",
    record_type="culture",
    id_prefix="culture",
    required_fields=("name", "site_type"),
    field_mapping=CULTURE_FIELD_MAPPING,
    build_payload=build_culture_payload,
    drop_ghosts=False,
    default_location="Palestine",
)

HISTORICAL_SPEC = CategorySpec(
    category="historical",
    record_type="historical",
    id_prefix="historical",
    required_fields=("event_type",),
    field_mapping=HISTORICAL_FIELD_MAPPING,
    build_payload=build_historical_payload,
    region_override=palestine_when_unknown,
    default_location="Palestine",
)
