"""Dataset output directory writer.

This module owns the file layout of one unified category directory:
``all-data.json``, ``metadata.json``, ``validation.json``, quarter
partitions, ``recent.json``, ``chunks/`` and finally ``index.json``.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

from core.constants import (
    ALL_DATA_FILE_NAME,
    METADATA_FILE_NAME,
    UNIFIED_DIR_NAME,
    VALIDATION_FILE_NAME,
)
from core.run_context import RunContext
from core.types import (
    CanonicalRecord,
    ChunkIndex,
    PartitionDescriptor,
    SourceMetadata,
    ValidationReport,
)
from enrich.validation import report_to_payload
from store.chunk_store import remove_chunks, should_chunk, write_chunks
from store.json_io import ensure_directory, write_json_document
from store.partition_store import (
    date_range,
    partition_to_payload,
    write_dataset_index,
    write_partition_files,
)
from store.record_payload import record_to_payload


@dataclass(frozen=True)
class DatasetOutputs:
    """Descriptors of a written dataset directory."""

    output_dir: Path
    partitions: tuple[PartitionDescriptor, ...]
    chunk_index: ChunkIndex | None


def default_output_dir(context: RunContext, category: str) -> Path:
    """Return the unified output directory for a category under the data root."""
    return context.config.data_root / UNIFIED_DIR_NAME / category


def write_dataset_outputs(
    records: Sequence[CanonicalRecord],
    report: ValidationReport,
    output_dir: Path,
    *,
    source_meta: SourceMetadata,
    context: RunContext,
) -> DatasetOutputs:
    """Persist a unified dataset and its derived files.

    Args:
        records: Final records of the run, in output order.
        report: Dataset validation report.
        output_dir: Target directory, created when missing.
        source_meta: Metadata of the source dataset.
        context: Run context of the invocation.

    Returns:
        Partition and chunk descriptors of the written directory.

    Raises:
        MosaicStoreError: If the directory or any file cannot be written.
    """
    ensure_directory(output_dir)
    dataset = source_meta.category
    partitions = write_partition_files(
        records,
        output_dir,
        dataset=dataset,
        source=source_meta.source,
        context=context,
    )
    chunk_index = None
    if should_chunk(len(records), context):
        chunk_index = write_chunks(records, output_dir, context)
    else:
        remove_chunks(output_dir)
    write_json_document(
        output_dir / ALL_DATA_FILE_NAME,
        {
            "metadata": _dataset_metadata(records, report, source_meta, context),
            "data": [record_to_payload(record) for record in records],
        },
    )
    write_json_document(
        output_dir / METADATA_FILE_NAME,
        {
            **_dataset_metadata(records, report, source_meta, context),
            "partitions": [partition_to_payload(partition) for partition in partitions],
            "chunked": chunk_index is not None,
            "total_chunks": chunk_index.total_chunks if chunk_index else 0,
        },
    )
    write_json_document(output_dir / VALIDATION_FILE_NAME, report_to_payload(report))
    write_dataset_index(
        output_dir,
        dataset=dataset,
        source=source_meta.source,
        records=records,
        partitions=partitions,
        chunk_index=chunk_index,
        context=context,
    )
    context.logger.info(
        "dataset_written",
        output_dir=str(output_dir),
        record_count=len(records),
        partition_count=len(partitions),
        chunked=chunk_index is not None,
    )
    return DatasetOutputs(output_dir=output_dir, partitions=partitions, chunk_index=chunk_index)


def _dataset_metadata(
    records: Sequence[CanonicalRecord],
    report: ValidationReport,
    source_meta: SourceMetadata,
    context: RunContext,
) -> dict[str, object]:
    start, end = date_range(records)
    regions = Counter(record.location.region for record in records)
    return {
        "category": source_meta.category,
        "source": source_meta.source,
        "organization": source_meta.organization,
        "title": source_meta.title,
        "url": source_meta.url,
        "record_count": len(records),
        "date_range": {"start": start, "end": end},
        "regions": dict(sorted(regions.items())),
        "quality": {
            "score": report.quality_score,
            "meets_threshold": report.meets_threshold,
        },
        "baseline_date": context.config.baseline_date.isoformat(),
        "run_id": context.run_id,
        "last_updated": context.timestamp,
    }
