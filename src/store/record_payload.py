"""JSON payload codec for canonical records.

This module centralizes CanonicalRecord serialization logic.
Category attributes are flattened next to the reserved record keys, which
is the shape dashboards and downstream consumers read.
"""

from __future__ import annotations

from typing import Any, Mapping

from core.constants import RECORD_SCHEMA_VERSION, REGION_UNKNOWN
from core.types import (
    AdminLevels,
    CanonicalRecord,
    Location,
    QualityMetrics,
    SourceReference,
    TemporalContext,
)

RESERVED_KEYS = frozenset(
    {
        "id",
        "type",
        "category",
        "date",
        "location",
        "value",
        "unit",
        "quality",
        "sources",
        "temporal_context",
        "related_data",
        "created_at",
        "updated_at",
        "version",
    }
)


def record_to_payload(record: CanonicalRecord) -> dict[str, object]:
    """Serialize CanonicalRecord into JSON-safe payload.

    Args:
        record: Canonical record instance.

    Returns:
        Dictionary payload for JSON encoding.
    """
    location = record.location
    quality = record.quality
    payload: dict[str, object] = {
        "id": record.record_id,
        "type": record.record_type,
        "category": record.category,
        "date": record.date,
        "location": {
            "name": location.name,
            "coordinates": list(location.coordinates) if location.coordinates else None,
            "admin_levels": {
                "level1": location.admin_levels.level1,
                "level2": location.admin_levels.level2,
                "level3": location.admin_levels.level3,
            },
            "region": location.region,
        },
        "value": record.value,
        "unit": record.unit,
        "quality": {
            "score": quality.score,
            "completeness": quality.completeness,
            "consistency": quality.consistency,
            "accuracy": quality.accuracy,
            "confidence": quality.confidence,
            "verified": quality.verified,
        },
        "sources": [
            {
                "name": source.name,
                "organization": source.organization,
                "fetched_at": source.fetched_at,
                "url": source.url,
            }
            for source in record.sources
        ],
        "created_at": record.created_at,
        "updated_at": record.updated_at,
        "version": record.version,
    }
    for key, value in record.attributes.items():
        if key not in RESERVED_KEYS:
            payload[key] = value
    if record.temporal_context is not None:
        context = record.temporal_context
        payload["temporal_context"] = {
            "days_since_baseline": context.days_since_baseline,
            "baseline_period": context.baseline_period,
            "conflict_phase": context.conflict_phase,
            "season": context.season,
        }
    if record.related_data:
        payload["related_data"] = {
            category: list(record_ids) for category, record_ids in record.related_data.items()
        }
    return payload


def record_from_payload(payload: Mapping[str, Any]) -> CanonicalRecord:
    """Deserialize JSON payload into CanonicalRecord.

    Keys outside the reserved record keys are returned as attributes.

    Args:
        payload: Serialized record payload.

    Returns:
        Parsed CanonicalRecord.

    Raises:
        ValueError: If the payload has no record id.
    """
    record_id = payload.get("id")
    if not record_id:
        raise ValueError("Record payload has no 'id' field.")
    return CanonicalRecord(
        record_id=str(record_id),
        record_type=str(payload.get("type", "")),
        category=str(payload.get("category", "")),
        date=_optional_text(payload.get("date")),
        location=_location_from_payload(payload.get("location")),
        value=_optional_float(payload.get("value")),
        unit=str(payload.get("unit", "")),
        quality=_quality_from_payload(payload.get("quality")),
        sources=_sources_from_payload(payload.get("sources")),
        attributes={key: value for key, value in payload.items() if key not in RESERVED_KEYS},
        temporal_context=_temporal_context_from_payload(payload.get("temporal_context")),
        related_data=_related_data_from_payload(payload.get("related_data")),
        created_at=str(payload.get("created_at", "")),
        updated_at=str(payload.get("updated_at", "")),
        version=int(payload.get("version", RECORD_SCHEMA_VERSION)),
    )


def _location_from_payload(payload: object) -> Location:
    location = payload if isinstance(payload, Mapping) else {}
    admin_payload = location.get("admin_levels")
    admin = admin_payload if isinstance(admin_payload, Mapping) else {}
    coordinates = location.get("coordinates")
    pair = None
    if isinstance(coordinates, (list, tuple)) and len(coordinates) == 2:
        pair = (float(coordinates[0]), float(coordinates[1]))
    return Location(
        name=str(location.get("name") or "unknown"),
        coordinates=pair,
        admin_levels=AdminLevels(
            level1=_optional_text(admin.get("level1")),
            level2=_optional_text(admin.get("level2")),
            level3=_optional_text(admin.get("level3")),
        ),
        region=str(location.get("region") or REGION_UNKNOWN),
    )


def _quality_from_payload(payload: object) -> QualityMetrics:
    quality = payload if isinstance(payload, Mapping) else {}
    return QualityMetrics(
        score=float(quality.get("score", 0.0)),
        completeness=float(quality.get("completeness", 0.0)),
        consistency=float(quality.get("consistency", 0.0)),
        accuracy=float(quality.get("accuracy", 0.0)),
        confidence=float(quality.get("confidence", 0.0)),
        verified=bool(quality.get("verified", False)),
    )


def _sources_from_payload(payload: object) -> tuple[SourceReference, ...]:
    if not isinstance(payload, list):
        return ()
    return tuple(
        SourceReference(
            name=str(item.get("name", "")),
            organization=str(item.get("organization", "")),
            fetched_at=str(item.get("fetched_at", "")),
            url=_optional_text(item.get("url")),
        )
        for item in payload
        if isinstance(item, Mapping)
    )


def _temporal_context_from_payload(payload: object) -> TemporalContext | None:
    if not isinstance(payload, Mapping):
        return None
    return TemporalContext(
        days_since_baseline=int(payload.get("days_since_baseline", 0)),
        baseline_period=str(payload.get("baseline_period", "")),
        conflict_phase=str(payload.get("conflict_phase", "")),
        season=str(payload.get("season", "")),
    )


def _related_data_from_payload(payload: object) -> dict[str, tuple[str, ...]]:
    if not isinstance(payload, Mapping):
        return {}
    return {
        str(category): tuple(str(record_id) for record_id in record_ids)
        for category, record_ids in payload.items()
        if isinstance(record_ids, list)
    }


def _optional_text(value: object) -> str | None:
    return None if value is None else str(value)


def _optional_float(value: object) -> float | None:
    return None if value is None else float(value)
