"""Shared canonical record builders for tests."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping

from core.config import MosaicConfig
from core.constants import REGION_GAZA
from core.run_context import RunContext
from core.types import (
    AdminLevels,
    CanonicalRecord,
    Location,
    QualityMetrics,
    SourceMetadata,
    SourceReference,
)

REFERENCE_TIME = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


def make_context(data_root: Path, **config_overrides: object) -> RunContext:
    """Build a run context with a fixed clock under a temporary data root.

    Args:
        data_root: Temporary data root.
        **config_overrides: MosaicConfig fields to override.

    Returns:
        Run context with a stable run id.
    """
    config = replace(MosaicConfig.from_env(), data_root=data_root, **config_overrides)
    return RunContext.create(config, reference_time=REFERENCE_TIME, run_id="run-test")


def make_source_meta(category: str = "conflict", **overrides: object) -> SourceMetadata:
    """Build dataset metadata for transformer tests."""
    meta = SourceMetadata(source="test-feed", organization="Test Org", category=category)
    return replace(meta, **overrides)


def make_record(
    record_id: str = "rec-1",
    *,
    category: str = "conflict",
    record_type: str | None = None,
    date: str | None = "2023-10-10",
    location_name: str = "Gaza City",
    region: str = REGION_GAZA,
    coordinates: tuple[float, float] | None = None,
    level1: str | None = None,
    value: float | None = 1.0,
    unit: str = "casualties",
    attributes: Mapping[str, object] | None = None,
    quality_score: float = 0.9,
) -> CanonicalRecord:
    """Build a canonical record with test defaults."""
    return CanonicalRecord(
        record_id=record_id,
        record_type=record_type or category,
        category=category,
        date=date,
        location=Location(
            name=location_name,
            coordinates=coordinates,
            admin_levels=AdminLevels(level1=level1),
            region=region,
        ),
        value=value,
        unit=unit,
        quality=QualityMetrics(
            score=quality_score,
            completeness=quality_score,
            consistency=quality_score,
            accuracy=quality_score,
            confidence=0.8,
        ),
        sources=(
            SourceReference(
                name="test-feed",
                organization="Test Org",
                fetched_at=REFERENCE_TIME.isoformat(),
            ),
        ),
        attributes=dict(attributes or {}),
        created_at=REFERENCE_TIME.isoformat(),
        updated_at=REFERENCE_TIME.isoformat(),
    )


def make_incident(
    record_id: str,
    date: str | None,
    *,
    fatalities: int = 1,
    injuries: int = 0,
    location_name: str = "Gaza City",
    region: str = REGION_GAZA,
    coordinates: tuple[float, float] | None = None,
) -> CanonicalRecord:
    """Build a conflict incident with casualty attributes."""
    attributes = {
        "event_type": "airstrike",
        "fatalities": fatalities,
        "injuries": injuries,
        "severity_index": 1,
    }
    return make_record(
        record_id,
        date=date,
        value=float(fatalities + injuries),
        attributes=attributes,
        location_name=location_name,
        region=region,
        coordinates=coordinates,
    )
