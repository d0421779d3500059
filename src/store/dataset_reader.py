"""Unified dataset loader.

Reads canonical records back from a unified output directory, preferring
the chunk set when one exists.
"""

from __future__ import annotations

from pathlib import Path

from core.constants import ALL_DATA_FILE_NAME, CHUNKS_DIR_NAME
from core.errors import MosaicStoreError
from core.types import CanonicalRecord
from store.chunk_store import has_chunks, load_all_chunks
from store.json_io import read_json_document
from store.record_payload import record_from_payload


def load_dataset_records(dataset_dir: Path) -> list[CanonicalRecord]:
    """Load every record of a unified dataset directory.

    Args:
        dataset_dir: Unified output directory of one category.

    Returns:
        Records in output order.

    Raises:
        MosaicStoreError: If the directory holds no readable dataset.
    """
    if has_chunks(dataset_dir):
        return load_all_chunks(dataset_dir / CHUNKS_DIR_NAME)
    document_path = dataset_dir / ALL_DATA_FILE_NAME
    payload = read_json_document(document_path)
    data = payload.get("data")
    if not isinstance(data, list):
        raise MosaicStoreError(
            f"Invalid dataset file {document_path}: 'data' must be a list. "
            "Re-run unify to regenerate the output directory."
        )
    try:
        return [record_from_payload(item) for item in data if isinstance(item, dict)]
    except (TypeError, ValueError) as error:
        raise MosaicStoreError(f"Invalid record in {document_path}: {error}.") from error


def dataset_exists(dataset_dir: Path) -> bool:
    """Return whether a unified dataset has been written to a directory."""
    return (dataset_dir / ALL_DATA_FILE_NAME).is_file() or has_chunks(dataset_dir)
