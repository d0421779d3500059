"""Canonical transformer driven by a category strategy record.

One transformer class serves every category. Category behavior comes from
the ``CategorySpec`` it is built with, so adding a category means adding a
registry entry, not a subclass.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, Mapping

from core.errors import MosaicTransformError
from core.run_context import RunContext
from core.types import (
    AdminLevels,
    CanonicalRecord,
    Location,
    QualityMetrics,
    SourceMetadata,
    SourceReference,
    TransformResult,
    ValidationReport,
)
from enrich.enrichment import enrich_records
from enrich.quality_scoring import score_record_quality
from enrich.spatial_context import classify_region_with_fallback, infer_governorate
from enrich.validation import validate_records
from transforms.category_spec import CategorySpec, is_ghost_record, text_field
from transforms.field_mapping import FieldMapping, apply_field_mapping, merge_field_mappings
from transforms.record_ids import build_record_id
from transforms.value_parsing import extract_coordinates, normalize_date

UNKNOWN_SOURCE = "Unknown"
POSITION_KEY = "__position__"


class CategoryTransformer:
    """Convert raw provider records of one category into canonical records."""

    def __init__(
        self,
        spec: CategorySpec,
        context: RunContext,
        extra_aliases: FieldMapping | None = None,
    ) -> None:
        self.spec = spec
        self._context = context
        self._field_mapping = merge_field_mappings(extra_aliases or {}, spec.field_mapping)
        self._logger = context.logger.bind(category=spec.category)

    def transform(
        self,
        raw_records: Iterable[object],
        source_meta: SourceMetadata,
    ) -> TransformResult:
        """Transform a batch of raw records.

        Non-mapping and empty entries are ignored. A record that fails to
        convert is logged and counted, and never aborts the batch.

        Args:
            raw_records: Raw provider records.
            source_meta: Metadata of the source dataset.

        Returns:
            Surviving canonical records with skip, ghost, and filter counts.
        """
        records: list[CanonicalRecord] = []
        skipped_count = 0
        ghost_count = 0
        filtered_count = 0
        for position, raw in enumerate(raw_records):
            if not isinstance(raw, Mapping) or not raw:
                continue
            try:
                record = self._transform_record(raw, source_meta, position)
            except (ValueError, TypeError, KeyError, MosaicTransformError) as error:
                skipped_count += 1
                self._logger.warning("record_skipped", position=position, error=str(error))
                continue
            if record is None:
                filtered_count += 1
                continue
            if self.spec.drop_ghosts and is_ghost_record(record):
                ghost_count += 1
                continue
            if self.spec.keep_record is not None and not self.spec.keep_record(record):
                filtered_count += 1
                continue
            records.append(record)
        self._logger.info(
            "transform_completed",
            record_count=len(records),
            skipped_count=skipped_count,
            ghost_count=ghost_count,
            filtered_count=filtered_count,
        )
        return TransformResult(
            records=tuple(records),
            skipped_count=skipped_count,
            ghost_count=ghost_count,
            filtered_count=filtered_count,
        )

    def enrich(self, records: Iterable[CanonicalRecord]) -> list[CanonicalRecord]:
        """Apply generic enrichment, then the category's dataset hook."""
        enriched = enrich_records(records, self.spec.required_fields, self._context)
        if self.spec.enrich_dataset is not None:
            enriched = self.spec.enrich_dataset(enriched, self._context)
        return enriched

    def validate(self, records: object) -> ValidationReport:
        """Build the dataset quality report; never raises."""
        report = validate_records(
            records,
            self.spec.required_fields,
            self._context.config.quality_threshold,
        )
        if not report.meets_threshold:
            self._logger.warning(
                "validation_below_threshold",
                quality_score=report.quality_score,
                threshold=self._context.config.quality_threshold,
            )
        return report

    def _transform_record(
        self,
        raw: Mapping[str, object],
        source_meta: SourceMetadata,
        position: int,
    ) -> CanonicalRecord | None:
        mapped = apply_field_mapping(raw, self._field_mapping)
        payload = self.spec.build_payload(mapped, source_meta)
        if payload is None:
            return None
        record_date = payload.date if payload.date is not None else normalize_date(
            mapped.get("date")
        )
        location = self._build_location(mapped, source_meta, payload.location_name)
        id_seed = dict(raw, **{POSITION_KEY: position}) if self.spec.index_in_id else raw
        timestamp = self._context.timestamp
        record = CanonicalRecord(
            record_id=build_record_id(self.spec.id_prefix, record_date, location.name, id_seed),
            record_type=payload.record_type or self.spec.record_type,
            category=self.spec.category,
            date=record_date,
            location=location,
            value=payload.value,
            unit=payload.unit,
            quality=QualityMetrics(),
            sources=(
                SourceReference(
                    name=source_meta.source or UNKNOWN_SOURCE,
                    organization=source_meta.organization or UNKNOWN_SOURCE,
                    fetched_at=timestamp,
                    url=source_meta.url,
                ),
            ),
            attributes=dict(payload.attributes),
            created_at=timestamp,
            updated_at=timestamp,
        )
        quality = score_record_quality(
            record, self.spec.required_fields, self._context.reference_time.date()
        )
        return replace(record, quality=quality)

    def _build_location(
        self,
        mapped: Mapping[str, object],
        source_meta: SourceMetadata,
        name_override: str | None,
    ) -> Location:
        name = name_override or text_field(mapped, "location", self.spec.default_location)
        location_name = name or self.spec.default_location
        region = classify_region_with_fallback(location_name, source_meta)
        if self.spec.region_override is not None:
            region = self.spec.region_override(location_name, region)
        return Location(
            name=location_name,
            coordinates=extract_coordinates(mapped),
            admin_levels=AdminLevels(
                level1=text_field(mapped, "admin1") or infer_governorate(location_name),
                level2=text_field(mapped, "admin2"),
                level3=text_field(mapped, "admin3"),
            ),
            region=region,
        )
