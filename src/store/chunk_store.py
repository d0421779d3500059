"""Fixed-size chunk files for large datasets.

Chunks preserve the original record order. ``chunks/index.json`` lists
every chunk with its inclusive, zero-based record range so dashboards can
page through a dataset without reading ``all-data.json``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Iterator, Mapping, Sequence

from core.constants import CHUNK_FILE_PATTERN, CHUNKS_DIR_NAME, INDEX_FILE_NAME
from core.errors import MosaicStoreError
from core.run_context import RunContext
from core.types import CanonicalRecord, ChunkDescriptor, ChunkIndex
from store.json_io import ensure_directory, read_json_document, remove_file, write_json_document
from store.record_payload import record_from_payload, record_to_payload


def chunk_file_name(chunk_number: int) -> str:
    return CHUNK_FILE_PATTERN.format(number=chunk_number)


def should_chunk(record_count: int, context: RunContext) -> bool:
    """Return whether a dataset is large enough to be chunked."""
    return record_count > context.config.chunk_threshold


def write_chunks(
    records: Sequence[CanonicalRecord],
    output_dir: Path,
    context: RunContext,
) -> ChunkIndex:
    """Write records into ``chunks/chunk-{n}.json`` files and a chunk index.

    An existing chunk set is reused when its index reports the same chunk
    size and content fingerprint and all of its chunk files are present.

    Args:
        records: Records to chunk, in output order.
        output_dir: Dataset output directory.
        context: Run context providing chunk size and clock.

    Returns:
        Index of the chunk set on disk.

    Raises:
        MosaicStoreError: If chunk files cannot be written.
    """
    chunks_dir = ensure_directory(output_dir / CHUNKS_DIR_NAME)
    chunk_size = context.config.chunk_size
    fingerprint = records_fingerprint(records)
    existing = _reusable_index(chunks_dir, len(records), chunk_size, fingerprint)
    if existing is not None:
        context.logger.info(
            "chunks_reused",
            chunks_dir=str(chunks_dir),
            total_chunks=existing.total_chunks,
        )
        return existing
    remove_file(chunks_dir / INDEX_FILE_NAME)
    for stale_path in chunks_dir.glob("chunk-*.json"):
        remove_file(stale_path)
    total_chunks = (len(records) + chunk_size - 1) // chunk_size
    descriptors: list[ChunkDescriptor] = []
    for chunk_number in range(1, total_chunks + 1):
        start = (chunk_number - 1) * chunk_size
        chunk_records = records[start : start + chunk_size]
        descriptor = ChunkDescriptor(
            chunk_number=chunk_number,
            file_name=chunk_file_name(chunk_number),
            record_count=len(chunk_records),
            record_start=start,
            record_end=start + len(chunk_records) - 1,
        )
        write_json_document(
            chunks_dir / descriptor.file_name,
            {
                "metadata": {
                    "chunk_number": chunk_number,
                    "total_chunks": total_chunks,
                    "record_count": descriptor.record_count,
                    "record_range": {
                        "start": descriptor.record_start,
                        "end": descriptor.record_end,
                    },
                    "created_at": context.timestamp,
                },
                "data": [record_to_payload(record) for record in chunk_records],
            },
        )
        descriptors.append(descriptor)
    index = ChunkIndex(
        total_records=len(records),
        total_chunks=total_chunks,
        chunk_size=chunk_size,
        chunks=tuple(descriptors),
        created_at=context.timestamp,
        fingerprint=fingerprint,
    )
    write_json_document(chunks_dir / INDEX_FILE_NAME, chunk_index_to_payload(index))
    context.logger.info(
        "chunks_written",
        chunks_dir=str(chunks_dir),
        total_chunks=total_chunks,
        chunk_size=chunk_size,
    )
    return index


def records_fingerprint(records: Sequence[CanonicalRecord]) -> str:
    """Return a SHA-256 digest over the ordered serialized records."""
    digest = hashlib.sha256()
    for record in records:
        digest.update(json.dumps(record_to_payload(record), sort_keys=True).encode("utf-8"))
        digest.update(b"\n")
    return digest.hexdigest()


def remove_chunks(output_dir: Path) -> None:
    """Delete a chunk set left by an earlier, larger run."""
    chunks_dir = output_dir / CHUNKS_DIR_NAME
    if not chunks_dir.is_dir():
        return
    remove_file(chunks_dir / INDEX_FILE_NAME)
    for stale_path in chunks_dir.glob("chunk-*.json"):
        remove_file(stale_path)


def has_chunks(dataset_dir: Path) -> bool:
    """Return whether a dataset directory holds a chunk index."""
    return (dataset_dir / CHUNKS_DIR_NAME / INDEX_FILE_NAME).is_file()


def load_chunk_index(chunks_dir: Path) -> ChunkIndex:
    """Load the chunk index of a chunks directory.

    Raises:
        MosaicStoreError: If the index is missing or malformed.
    """
    payload = read_json_document(chunks_dir / INDEX_FILE_NAME)
    try:
        return chunk_index_from_payload(payload)
    except (KeyError, TypeError, ValueError) as error:
        raise MosaicStoreError(
            f"Invalid chunk index at {chunks_dir / INDEX_FILE_NAME}: {error}. "
            "Re-run unify to regenerate chunks."
        ) from error


def load_chunk(chunks_dir: Path, chunk_number: int) -> list[CanonicalRecord]:
    """Load the records of one chunk (1-based number).

    Raises:
        MosaicStoreError: If the chunk file is missing or malformed.
    """
    chunk_path = chunks_dir / chunk_file_name(chunk_number)
    payload = read_json_document(chunk_path)
    data = payload.get("data", [])
    if not isinstance(data, list):
        raise MosaicStoreError(f"Invalid chunk file {chunk_path}: 'data' must be a list.")
    try:
        return [record_from_payload(item) for item in data if isinstance(item, Mapping)]
    except (TypeError, ValueError) as error:
        raise MosaicStoreError(f"Invalid record in chunk file {chunk_path}: {error}.") from error


def iter_chunks(chunks_dir: Path) -> Iterator[list[CanonicalRecord]]:
    """Yield chunk record lists in order, one chunk in memory at a time."""
    index = load_chunk_index(chunks_dir)
    for chunk_number in range(1, index.total_chunks + 1):
        yield load_chunk(chunks_dir, chunk_number)


def load_all_chunks(chunks_dir: Path) -> list[CanonicalRecord]:
    """Load every chunk and concatenate the records in original order."""
    records: list[CanonicalRecord] = []
    for chunk_records in iter_chunks(chunks_dir):
        records.extend(chunk_records)
    return records


def load_chunk_range(
    chunks_dir: Path,
    start_chunk: int,
    end_chunk: int,
) -> list[CanonicalRecord]:
    """Load an inclusive range of chunks.

    Raises:
        MosaicStoreError: If the range falls outside the chunk set.
    """
    index = load_chunk_index(chunks_dir)
    if start_chunk < 1 or end_chunk > index.total_chunks or start_chunk > end_chunk:
        raise MosaicStoreError(
            f"Invalid chunk range {start_chunk}-{end_chunk}: "
            f"expected 1 <= start <= end <= {index.total_chunks}."
        )
    records: list[CanonicalRecord] = []
    for chunk_number in range(start_chunk, end_chunk + 1):
        records.extend(load_chunk(chunks_dir, chunk_number))
    return records


def chunk_index_to_payload(index: ChunkIndex) -> dict[str, object]:
    return {
        "total_records": index.total_records,
        "total_chunks": index.total_chunks,
        "chunk_size": index.chunk_size,
        "chunks": [
            {
                "chunk_number": chunk.chunk_number,
                "file": chunk.file_name,
                "record_count": chunk.record_count,
                "record_range": {"start": chunk.record_start, "end": chunk.record_end},
            }
            for chunk in index.chunks
        ],
        "created_at": index.created_at,
        "fingerprint": index.fingerprint,
    }


def chunk_index_from_payload(payload: Mapping[str, object]) -> ChunkIndex:
    chunks_payload = payload["chunks"]
    if not isinstance(chunks_payload, list):
        raise ValueError("'chunks' must be a list")
    chunks = tuple(
        ChunkDescriptor(
            chunk_number=int(item["chunk_number"]),
            file_name=str(item["file"]),
            record_count=int(item["record_count"]),
            record_start=int(item["record_range"]["start"]),
            record_end=int(item["record_range"]["end"]),
        )
        for item in chunks_payload
    )
    return ChunkIndex(
        total_records=int(str(payload["total_records"])),
        total_chunks=int(str(payload["total_chunks"])),
        chunk_size=int(str(payload["chunk_size"])),
        chunks=chunks,
        created_at=str(payload.get("created_at", "")),
        fingerprint=str(payload.get("fingerprint", "")),
    )


def _reusable_index(
    chunks_dir: Path,
    record_count: int,
    chunk_size: int,
    fingerprint: str,
) -> ChunkIndex | None:
    if not (chunks_dir / INDEX_FILE_NAME).is_file():
        return None
    try:
        index = load_chunk_index(chunks_dir)
    except MosaicStoreError:
        return None
    if index.total_records != record_count or index.chunk_size != chunk_size:
        return None
    if index.fingerprint != fingerprint:
        return None
    if not all((chunks_dir / chunk.file_name).is_file() for chunk in index.chunks):
        return None
    return index
