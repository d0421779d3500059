"""Shared typed models.

This module defines immutable data models used by transforms, enrichment,
storage, analysis, and linking layers to keep interfaces explicit and stable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from core.constants import (
    DEFAULT_FORECAST_PERIODS,
    RECORD_SCHEMA_VERSION,
    REGION_UNKNOWN,
)


@dataclass(frozen=True)
class AdminLevels:
    """Administrative hierarchy for a location.

    Attributes:
        level1: Governorate or first-level division.
        level2: District or second-level division.
        level3: Locality or third-level division.
    """

    level1: str | None = None
    level2: str | None = None
    level3: str | None = None


@dataclass(frozen=True)
class Location:
    """Canonical location block.

    Attributes:
        name: Free-text location name from the provider.
        coordinates: Optional ``(longitude, latitude)`` pair.
        admin_levels: Administrative hierarchy.
        region: One of the supported territorial regions.
    """

    name: str
    coordinates: tuple[float, float] | None = None
    admin_levels: AdminLevels = field(default_factory=AdminLevels)
    region: str = REGION_UNKNOWN


@dataclass(frozen=True)
class QualityMetrics:
    """Per-record quality scores, each in [0, 1].

    Attributes:
        score: Mean of completeness, consistency, and accuracy.
        completeness: Share of required fields present.
        consistency: Penalized plausibility of date, coordinates, and value.
        accuracy: Source authority and recency signal.
        confidence: Source confidence from the known-source table.
        verified: Whether a human reviewer confirmed the record.
    """

    score: float = 0.0
    completeness: float = 0.0
    consistency: float = 0.0
    accuracy: float = 0.0
    confidence: float = 0.0
    verified: bool = False


@dataclass(frozen=True)
class SourceReference:
    """Provenance entry for one canonical record."""

    name: str
    organization: str
    fetched_at: str
    url: str | None = None


@dataclass(frozen=True)
class TemporalContext:
    """Derived temporal fields relative to the baseline date."""

    days_since_baseline: int
    baseline_period: str
    conflict_phase: str
    season: str


@dataclass(frozen=True)
class CanonicalRecord:
    """Unified record emitted by every category transformer.

    Attributes:
        record_id: Deterministic content-derived identifier.
        record_type: Record type within the category.
        category: Category name from the transformer registry.
        date: ISO date, raw unparseable text, or None when absent.
        location: Canonical location block.
        value: Primary numeric value, if any.
        unit: Unit of ``value``.
        quality: Quality metrics.
        sources: Provenance entries.
        attributes: Category-specific payload fields.
        temporal_context: Derived temporal context, None when date is unusable.
        related_data: Linked record ids keyed by related category.
        created_at: UTC creation timestamp.
        updated_at: UTC update timestamp.
        version: Record schema version.
    """

    record_id: str
    record_type: str
    category: str
    date: str | None
    location: Location
    value: float | None
    unit: str
    quality: QualityMetrics
    sources: tuple[SourceReference, ...]
    attributes: Mapping[str, object] = field(default_factory=dict)
    temporal_context: TemporalContext | None = None
    related_data: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    created_at: str = ""
    updated_at: str = ""
    version: int = RECORD_SCHEMA_VERSION


@dataclass(frozen=True)
class SourceMetadata:
    """Metadata supplied alongside a raw provider dataset.

    Attributes:
        source: Provider or feed name.
        organization: Publishing organization.
        category: Target category for the dataset.
        title: Optional dataset title used for region fallback.
        description: Optional dataset description used for region fallback.
        url: Optional provider URL.
    """

    source: str
    organization: str
    category: str
    title: str = ""
    description: str = ""
    url: str | None = None


@dataclass(frozen=True)
class TransformResult:
    """Outcome of one transformer batch.

    Attributes:
        records: Canonical records that survived filters.
        skipped_count: Records that raised during conversion.
        ghost_count: Records dropped as ghosts.
        filtered_count: Records dropped by category filters.
    """

    records: tuple[CanonicalRecord, ...]
    skipped_count: int = 0
    ghost_count: int = 0
    filtered_count: int = 0


@dataclass(frozen=True)
class ValidationReport:
    """Dataset-level quality report."""

    quality_score: float
    completeness: float
    consistency: float
    accuracy: float
    meets_threshold: bool
    record_count: int
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class PartitionDescriptor:
    """One quarter partition file.

    Attributes:
        quarter: ``YYYY-Qn`` or ``undated``.
        file_name: Partition file name inside the output directory.
        record_count: Number of records in the partition.
        start_date: Earliest record date in the partition.
        end_date: Latest record date in the partition.
    """

    quarter: str
    file_name: str
    record_count: int
    start_date: str | None = None
    end_date: str | None = None


@dataclass(frozen=True)
class ChunkDescriptor:
    """One chunk file with its inclusive record range."""

    chunk_number: int
    file_name: str
    record_count: int
    record_start: int
    record_end: int


@dataclass(frozen=True)
class ChunkIndex:
    """Chunk directory index."""

    total_records: int
    total_chunks: int
    chunk_size: int
    chunks: tuple[ChunkDescriptor, ...]
    created_at: str
    fingerprint: str = ""


@dataclass(frozen=True)
class UnifyOptions:
    """Unify command options.

    Attributes:
        category: Target category name.
        source_path: Input JSON file or directory.
        source: Provider name written to provenance.
        organization: Publishing organization written to provenance.
        title: Optional dataset title for region fallback.
        description: Optional dataset description for region fallback.
        url: Optional provider URL.
        output_dir: Optional output directory, defaults under data root.
        field_map_path: Optional YAML file with extra field aliases.
        link: Link against sibling category outputs under the data root.
    """

    category: str
    source_path: str
    source: str | None = None
    organization: str | None = None
    title: str = ""
    description: str = ""
    url: str | None = None
    output_dir: str | None = None
    field_map_path: str | None = None
    link: bool = False


@dataclass(frozen=True)
class PipelineResult:
    """Summary of one unify run."""

    category: str
    output_dir: str
    record_count: int
    skipped_count: int
    ghost_count: int
    filtered_count: int
    duplicate_count: int
    linked_count: int
    report: ValidationReport
    partitions: tuple[PartitionDescriptor, ...]
    chunk_index: ChunkIndex | None = None


@dataclass(frozen=True)
class AnalysisOptions:
    """Analyze command options.

    Attributes:
        category: Category whose unified output is analyzed.
        input_dir: Optional unified output directory, defaults under data root.
        output_path: Optional report path, defaults under data root.
        include_regional: Include spatial aggregation.
        include_temporal: Include temporal aggregation.
        include_descriptive: Include descriptive statistics.
        include_time_series: Include time-series analysis.
        forecast_periods: Forecast horizon in daily buckets.
    """

    category: str
    input_dir: str | None = None
    output_path: str | None = None
    include_regional: bool = True
    include_temporal: bool = True
    include_descriptive: bool = True
    include_time_series: bool = True
    forecast_periods: int = DEFAULT_FORECAST_PERIODS


@dataclass(frozen=True)
class AnalysisResult:
    """Summary of one analyze run.

    Attributes:
        category: Analyzed category.
        output_path: Written report file.
        record_count: Number of analyzed records.
        summary: Headline figures of the report.
    """

    category: str
    output_path: str
    record_count: int
    summary: Mapping[str, object] = field(default_factory=dict)
