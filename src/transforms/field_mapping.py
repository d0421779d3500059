"""Field-mapping tables applied at the ingestion boundary.

Each category declares ``canonical_field -> (alias, ...)``. Mapping runs
once per raw record so downstream logic only ever reads canonical names.
Per-source alias overrides can be loaded from YAML.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, cast

import yaml

from core.errors import MosaicIngestError

FieldMapping = Mapping[str, tuple[str, ...]]

LOCATION_FIELD_MAPPING: dict[str, tuple[str, ...]] = {
    "location": (
        "location",
        "location_name",
        "locationName",
        "admin1",
        "region",
        "governorate",
        "area",
        "city",
        "country",
    ),
    "admin1": ("admin1", "governorate", "admin_1"),
    "admin2": ("admin2", "district", "admin_2"),
    "admin3": ("admin3", "locality", "admin_3"),
    "latitude": ("latitude", "lat", "Latitude"),
    "longitude": ("longitude", "lon", "lng", "long", "Longitude"),
    "coordinates": ("coordinates", "coords", "geometry"),
}


def apply_field_mapping(raw: Mapping[str, object], mapping: FieldMapping) -> dict[str, object]:
    """Map a raw provider record onto canonical field names.

    The first alias holding a value other than None or an empty string wins.
    Numeric zero counts as a real value.

    Args:
        raw: Raw provider record.
        mapping: Canonical field to alias table.

    Returns:
        Dictionary keyed only by canonical field names.
    """
    mapped: dict[str, object] = {}
    for canonical_field, aliases in mapping.items():
        for alias in aliases:
            value = raw.get(alias)
            if value is None:
                continue
            if isinstance(value, str) and not value.strip():
                continue
            mapped[canonical_field] = value
            break
    return mapped


def merge_field_mappings(*mappings: FieldMapping) -> dict[str, tuple[str, ...]]:
    """Merge mapping tables, giving earlier tables alias precedence.

    Args:
        *mappings: Mapping tables in precedence order.

    Returns:
        Combined mapping with de-duplicated aliases.
    """
    merged: dict[str, tuple[str, ...]] = {}
    for mapping in mappings:
        for canonical_field, aliases in mapping.items():
            existing = merged.get(canonical_field, ())
            additions = tuple(alias for alias in aliases if alias not in existing)
            merged[canonical_field] = existing + additions
    return merged


def with_location_fields(mapping: FieldMapping) -> dict[str, tuple[str, ...]]:
    """Extend a category mapping with the shared location aliases."""
    return merge_field_mappings(mapping, LOCATION_FIELD_MAPPING)


def load_field_mapping(mapping_path: str) -> dict[str, tuple[str, ...]]:
    """Load per-source alias overrides from a YAML file.

    The file maps canonical field names to one alias or a list of aliases::

        fatalities: [killed_total, deaths]
        location: place

    Args:
        mapping_path: YAML file path.

    Returns:
        Parsed alias table.

    Raises:
        MosaicIngestError: If file is missing, unreadable, or malformed.
    """
    mapping_file = Path(mapping_path).expanduser().resolve()
    if not mapping_file.exists():
        raise MosaicIngestError(
            f"Field mapping file does not exist at {mapping_file}. "
            "Provide a valid YAML alias table."
        )
    try:
        payload = cast(object, yaml.safe_load(mapping_file.read_text(encoding="utf-8")))
    except OSError as error:
        raise MosaicIngestError(
            f"Failed to read field mapping at {mapping_file}: {error}. Check file permissions."
        ) from error
    except yaml.YAMLError as error:
        raise MosaicIngestError(
            f"Failed to parse field mapping at {mapping_file}: {error}. Fix YAML syntax."
        ) from error
    return parse_field_mapping(payload, str(mapping_file))


def parse_field_mapping(payload: object, context: str) -> dict[str, tuple[str, ...]]:
    """Validate an alias table loaded from YAML or a run-spec.

    Args:
        payload: Decoded mapping payload.
        context: Description used in error messages.

    Returns:
        Parsed alias table.

    Raises:
        MosaicIngestError: If payload shape is invalid.
    """
    if payload is None:
        return {}
    if not isinstance(payload, Mapping):
        raise MosaicIngestError(
            f"Invalid field mapping in {context}: expected mapping of field to aliases."
        )
    parsed: dict[str, tuple[str, ...]] = {}
    for canonical_field, aliases in payload.items():
        if isinstance(aliases, str):
            parsed[str(canonical_field)] = (aliases,)
            continue
        if isinstance(aliases, list) and all(isinstance(alias, str) for alias in aliases):
            parsed[str(canonical_field)] = tuple(aliases)
            continue
        raise MosaicIngestError(
            f"Invalid aliases for '{canonical_field}' in {context}: "
            "expected a string or list of strings."
        )
    return parsed
