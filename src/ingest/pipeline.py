"""Unify orchestration for one category dataset.

This module coordinates source loading, transformation, within-run
deduplication, enrichment, validation, optional linking, and output
writes for a single unify invocation.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from core.run_context import RunContext
from core.types import CanonicalRecord, PipelineResult, SourceMetadata, UnifyOptions
from ingest.input_reader import read_raw_dataset
from linking.cross_dataset import DataLinker, count_linked, link_targets
from store.dataset_reader import dataset_exists, load_dataset_records
from store.dataset_writer import default_output_dir, write_dataset_outputs
from transforms.field_mapping import load_field_mapping
from transforms.record_ids import remove_duplicate_records
from transforms.registry import get_category_spec, get_transformer

UNKNOWN_ORGANIZATION = "Unknown"


class UnificationPipelineRunner:
    """Runner for one unify invocation."""

    def __init__(self, options: UnifyOptions, context: RunContext) -> None:
        self._options = options
        self._context = context
        self._category = options.category.strip().lower()
        self._spec = get_category_spec(self._category)
        self._logger = context.logger.bind(category=self._category)

    def run(self) -> PipelineResult:
        """Execute the unify pipeline and return its summary."""
        source_meta = self._build_source_metadata()
        extra_aliases = (
            load_field_mapping(self._options.field_map_path)
            if self._options.field_map_path
            else None
        )
        transformer = get_transformer(self._category, self._context, extra_aliases)
        raw_dataset = read_raw_dataset(self._options.source_path, self._logger)
        transform_result = transformer.transform(raw_dataset.records, source_meta)
        unique_records = remove_duplicate_records(transform_result.records)
        duplicate_count = len(transform_result.records) - len(unique_records)
        enriched_records = transformer.enrich(unique_records)
        report = transformer.validate(enriched_records)
        final_records = self._link_if_requested(enriched_records)
        output_dir = self._resolve_output_dir()
        outputs = write_dataset_outputs(
            final_records,
            report,
            output_dir,
            source_meta=source_meta,
            context=self._context,
        )
        result = PipelineResult(
            category=self._category,
            output_dir=str(outputs.output_dir),
            record_count=len(final_records),
            skipped_count=transform_result.skipped_count,
            ghost_count=transform_result.ghost_count,
            filtered_count=transform_result.filtered_count,
            duplicate_count=duplicate_count,
            linked_count=count_linked(final_records),
            report=report,
            partitions=outputs.partitions,
            chunk_index=outputs.chunk_index,
        )
        _log_unify_completion(self._logger, self._options, len(raw_dataset.records), result)
        return result

    def _build_source_metadata(self) -> SourceMetadata:
        source_name = self._options.source or Path(self._options.source_path).stem
        return SourceMetadata(
            source=source_name,
            organization=self._options.organization or UNKNOWN_ORGANIZATION,
            category=self._category,
            title=self._options.title,
            description=self._options.description,
            url=self._options.url,
        )

    def _resolve_output_dir(self) -> Path:
        if self._options.output_dir:
            return Path(self._options.output_dir).expanduser().resolve()
        return default_output_dir(self._context, self._category)

    def _link_if_requested(self, records: list[CanonicalRecord]) -> list[CanonicalRecord]:
        if not self._options.link:
            return records
        datasets: dict[str, list[CanonicalRecord]] = {}
        for target in link_targets(self._spec.category):
            target_dir = default_output_dir(self._context, target)
            if not dataset_exists(target_dir):
                self._logger.info("link_target_missing", target=target, path=str(target_dir))
                continue
            datasets[target] = load_dataset_records(target_dir)
        if not datasets:
            return records
        linker = DataLinker.from_config(self._context.config)
        linked = linker.link_related_data(records, datasets)
        self._logger.info(
            "records_linked",
            targets=sorted(datasets),
            linked_count=count_linked(linked),
        )
        return linked


def unify_dataset(options: UnifyOptions, context: RunContext) -> PipelineResult:
    """Run the unify pipeline for one category source.

    Args:
        options: Unify request options.
        context: Run context of the invocation.

    Returns:
        Summary of the written dataset.

    Raises:
        MosaicTransformError: If the category is not registered.
        MosaicIngestError: If the field mapping file is invalid.
        MosaicStoreError: If outputs cannot be written.
    """
    runner = UnificationPipelineRunner(options, context)
    return runner.run()


def _log_unify_completion(
    logger: Any,
    options: UnifyOptions,
    input_count: int,
    result: PipelineResult,
) -> None:
    """Log pipeline completion with contextual metadata."""
    logger.info(
        "unify_completed",
        source_path=options.source_path,
        input_count=input_count,
        output_count=result.record_count,
        skipped_count=result.skipped_count,
        ghost_count=result.ghost_count,
        filtered_count=result.filtered_count,
        duplicate_count=result.duplicate_count,
        linked_count=result.linked_count,
        quality_score=result.report.quality_score,
        output_dir=result.output_dir,
    )
