"""Quarter partition files, recent window, and dataset index.

Every record lands in exactly one partition file: dated records in their
``YYYY-Qn`` quarter and unparseable or missing dates in ``undated``. The
index is removed before any file is written and written after all of
them, so an interrupted run leaves no index behind.
"""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import Iterable, Mapping, Sequence

from core.constants import INDEX_FILE_NAME, RECENT_FILE_NAME, UNDATED_PARTITION_KEY
from core.run_context import RunContext
from core.types import CanonicalRecord, ChunkIndex, PartitionDescriptor
from store.json_io import remove_file, write_json_document
from store.record_payload import record_to_payload
from transforms.value_parsing import parse_iso_date


def quarter_key(record: CanonicalRecord) -> str:
    """Return the ``YYYY-Qn`` partition key, or ``undated``."""
    record_date = parse_iso_date(record.date)
    if record_date is None:
        return UNDATED_PARTITION_KEY
    return f"{record_date.year:04d}-Q{(record_date.month - 1) // 3 + 1}"


def partition_by_quarter(
    records: Iterable[CanonicalRecord],
) -> dict[str, list[CanonicalRecord]]:
    """Group records by quarter key, keeping input order inside each group.

    Keys are returned in chronological order with ``undated`` last.
    """
    partitions: dict[str, list[CanonicalRecord]] = {}
    for record in records:
        partitions.setdefault(quarter_key(record), []).append(record)
    ordered_keys = sorted(key for key in partitions if key != UNDATED_PARTITION_KEY)
    if UNDATED_PARTITION_KEY in partitions:
        ordered_keys.append(UNDATED_PARTITION_KEY)
    return {key: partitions[key] for key in ordered_keys}


def date_range(records: Iterable[CanonicalRecord]) -> tuple[str | None, str | None]:
    """Return the earliest and latest parseable record dates."""
    dates = sorted(
        parsed for parsed in (parse_iso_date(record.date) for record in records) if parsed
    )
    if not dates:
        return None, None
    return dates[0].isoformat(), dates[-1].isoformat()


def select_recent(
    records: Iterable[CanonicalRecord],
    context: RunContext,
) -> list[CanonicalRecord]:
    """Return records dated within the configured recent window."""
    cutoff = context.reference_time.date() - timedelta(days=context.config.recent_days)
    recent: list[CanonicalRecord] = []
    for record in records:
        record_date = parse_iso_date(record.date)
        if record_date is not None and record_date >= cutoff:
            recent.append(record)
    return recent


def partition_file_name(quarter: str) -> str:
    return f"{quarter}.json"


def write_partition_files(
    records: Sequence[CanonicalRecord],
    output_dir: Path,
    *,
    dataset: str,
    source: str,
    context: RunContext,
) -> tuple[PartitionDescriptor, ...]:
    """Write quarter partition files and ``recent.json``.

    The dataset index is removed first. Partition files of earlier runs
    that no longer have records are deleted.

    Args:
        records: Records to persist.
        output_dir: Existing dataset output directory.
        dataset: Dataset name written to partition metadata.
        source: Source name written to partition metadata.
        context: Run context providing the clock and recent window.

    Returns:
        Descriptors of the written partitions.

    Raises:
        MosaicStoreError: If a file cannot be written.
    """
    remove_file(output_dir / INDEX_FILE_NAME)
    partitions = partition_by_quarter(records)
    _remove_stale_partitions(output_dir, set(partitions))
    descriptors: list[PartitionDescriptor] = []
    for quarter, quarter_records in partitions.items():
        file_name = partition_file_name(quarter)
        write_json_document(
            output_dir / file_name,
            {
                "metadata": {
                    "source": source,
                    "dataset": dataset,
                    "quarter": quarter,
                    "record_count": len(quarter_records),
                    "last_updated": context.timestamp,
                },
                "data": [record_to_payload(record) for record in quarter_records],
            },
        )
        start, end = date_range(quarter_records)
        descriptors.append(
            PartitionDescriptor(
                quarter=quarter,
                file_name=file_name,
                record_count=len(quarter_records),
                start_date=start,
                end_date=end,
            )
        )
    recent_records = select_recent(records, context)
    recent_start, recent_end = date_range(recent_records)
    write_json_document(
        output_dir / RECENT_FILE_NAME,
        {
            "metadata": {
                "source": source,
                "dataset": dataset,
                "days": context.config.recent_days,
                "record_count": len(recent_records),
                "date_range": {"start": recent_start, "end": recent_end},
                "last_updated": context.timestamp,
            },
            "data": [record_to_payload(record) for record in recent_records],
        },
    )
    context.logger.info(
        "partitions_written",
        dataset=dataset,
        partition_count=len(descriptors),
        recent_count=len(recent_records),
    )
    return tuple(descriptors)


def write_dataset_index(
    output_dir: Path,
    *,
    dataset: str,
    source: str,
    records: Sequence[CanonicalRecord],
    partitions: Sequence[PartitionDescriptor],
    chunk_index: ChunkIndex | None,
    context: RunContext,
) -> dict[str, object]:
    """Write ``index.json`` describing every file of the output directory.

    Returns:
        The index payload that was written.
    """
    start, end = date_range(records)
    recent_count = len(select_recent(records, context))
    index: dict[str, object] = {
        "dataset": dataset,
        "source": source,
        "date_range": {
            "start": start,
            "end": end,
            "baseline_date": context.config.baseline_date.isoformat(),
        },
        "total_records": len(records),
        "total_partitions": len(partitions),
        "files": [partition_to_payload(partition) for partition in partitions],
        "recent": {
            "file": RECENT_FILE_NAME,
            "days": context.config.recent_days,
            "record_count": recent_count,
        },
        "chunks": _chunk_summary(chunk_index),
        "last_updated": context.timestamp,
    }
    write_json_document(output_dir / INDEX_FILE_NAME, index)
    return index


def partition_to_payload(partition: PartitionDescriptor) -> dict[str, object]:
    return {
        "quarter": partition.quarter,
        "file": partition.file_name,
        "record_count": partition.record_count,
        "date_range": {"start": partition.start_date, "end": partition.end_date},
    }


def partition_from_payload(payload: Mapping[str, object]) -> PartitionDescriptor:
    range_payload = payload.get("date_range")
    bounds = range_payload if isinstance(range_payload, Mapping) else {}
    return PartitionDescriptor(
        quarter=str(payload["quarter"]),
        file_name=str(payload["file"]),
        record_count=int(str(payload["record_count"])),
        start_date=bounds.get("start"),
        end_date=bounds.get("end"),
    )


def _chunk_summary(chunk_index: ChunkIndex | None) -> dict[str, object] | None:
    if chunk_index is None:
        return None
    return {
        "directory": "chunks",
        "total_chunks": chunk_index.total_chunks,
        "chunk_size": chunk_index.chunk_size,
        "total_records": chunk_index.total_records,
    }


def _remove_stale_partitions(output_dir: Path, current_quarters: set[str]) -> None:
    stale_files = [
        path
        for path in output_dir.glob("*-Q[1-4].json")
        if path.stem not in current_quarters
    ]
    undated_path = output_dir / partition_file_name(UNDATED_PARTITION_KEY)
    if UNDATED_PARTITION_KEY not in current_quarters:
        stale_files.append(undated_path)
    for stale_path in stale_files:
        remove_file(stale_path)
