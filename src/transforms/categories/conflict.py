"""Conflict incident category."""

from __future__ import annotations

import math
from typing import Mapping

from core.types import SourceMetadata
from transforms.category_spec import CategorySpec, RecordPayload, text_field
from transforms.field_mapping import with_location_fields
from transforms.value_parsing import parse_float, parse_int

UNKNOWN_EVENT_TYPE = "unknown"
MAX_SEVERITY = 10

EVENT_TYPE_ALIASES = {
    "airstrike": "airstrike",
    "air strike": "airstrike",
    "aerial bombardment": "airstrike",
    "bombing": "airstrike",
    "artillery": "artillery",
    "shelling": "artillery",
    "mortar": "artillery",
    "shooting": "shooting",
    "gunfire": "shooting",
    "small arms": "shooting",
    "raid": "raid",
    "incursion": "raid",
    "military operation": "raid",
    "explosion": "explosion",
    "blast": "explosion",
    "ied": "explosion",
    "clash": "armed clash",
    "armed clash": "armed clash",
    "firefight": "armed clash",
    "protest": "protest",
    "demonstration": "protest",
}

SEVERITY_MULTIPLIERS = {
    "airstrike": 1.5,
    "explosion": 1.4,
    "artillery": 1.3,
    "armed clash": 1.2,
    "shooting": 1.0,
    "raid": 0.8,
    "protest": 0.5,
}

CONFLICT_FIELD_MAPPING = with_location_fields(
    {
        "date": ("event_date", "date", "timestamp", "year"),
        "event_type": ("event_type", "eventType", "type", "incident_type", "incidentType"),
        "fatalities": ("fatalities", "killed", "deaths", "casualties", "dead"),
        "injuries": ("injuries", "injured", "wounded"),
        "actor1": ("actor1", "perpetrator", "attacker"),
        "actor2": ("actor2", "target", "victim"),
        "description": ("notes", "description", "event_description", "details"),
        "casualty_breakdown": ("casualties",),
        "killed": ("killed",),
        "children_killed": ("children_killed", "killed_children"),
        "women_killed": ("women_killed", "killed_women"),
        "men_killed": ("men_killed", "killed_men"),
        "location": ("location", "admin1", "region", "governorate"),
    }
)

BREAKDOWN_FIELDS = ("killed", "children_killed", "women_killed", "men_killed")


def normalize_event_type(event_type: str | None) -> str:
    """Map provider event labels onto the standard event types.

    Unrecognized labels are kept as given; missing labels become ``unknown``.
    """
    if not event_type:
        return UNKNOWN_EVENT_TYPE
    return EVENT_TYPE_ALIASES.get(event_type.strip().lower(), event_type)


def calculate_severity_index(fatalities: float, injuries: float, event_type: str) -> int:
    """Return a 0-10 severity score weighting fatalities three times injuries.

    Args:
        fatalities: Number killed.
        injuries: Number injured.
        event_type: Normalized event type.

    Returns:
        ``min(10, round((3 * fatalities + injuries) * multiplier / 10))``
        with halves rounded up.
    """
    multiplier = SEVERITY_MULTIPLIERS.get(event_type, 1.0)
    severity = (fatalities * 3 + injuries) * multiplier
    return min(MAX_SEVERITY, math.floor(severity / 10 + 0.5))


def build_conflict_payload(
    mapped: Mapping[str, object],
    source_meta: SourceMetadata,
) -> RecordPayload:
    """Build the conflict payload from a mapped record."""
    event_type = normalize_event_type(text_field(mapped, "event_type"))
    breakdown = _casualty_breakdown(mapped)
    fatalities = parse_int(mapped.get("fatalities"))
    if not fatalities and isinstance(breakdown.get("killed"), float):
        fatalities = int(breakdown["killed"])
    injuries = parse_int(mapped.get("injuries"))
    attributes: dict[str, object] = {
        "event_type": event_type,
        "fatalities": fatalities,
        "injuries": injuries,
        "actors": {
            "actor1": text_field(mapped, "actor1"),
            "actor2": text_field(mapped, "actor2"),
        },
        "description": text_field(mapped, "description", ""),
        "severity_index": calculate_severity_index(fatalities, injuries, event_type),
    }
    if breakdown:
        attributes["casualties"] = breakdown
    return RecordPayload(
        value=float(fatalities + injuries), unit="casualties", attributes=attributes
    )


def _casualty_breakdown(mapped: Mapping[str, object]) -> dict[str, object]:
    nested = mapped.get("casualty_breakdown")
    if isinstance(nested, Mapping):
        return {key: parse_float(value) for key, value in nested.items()}
    breakdown = {
        field_name: parse_float(mapped.get(field_name))
        for field_name in BREAKDOWN_FIELDS
        if mapped.get(field_name) is not None
    }
    if "children_killed" not in breakdown and "women_killed" not in breakdown:
        return {}
    return breakdown


CONFLICT_SPEC = CategorySpec(
    category="conflict",
    record_type="conflict",
    id_prefix="conflict",
    required_fields=("type", "location"),
    field_mapping=CONFLICT_FIELD_MAPPING,
    build_payload=build_conflict_payload,
)
