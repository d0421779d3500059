"""JSON document persistence helpers.

This module isolates JSON file IO for partition, chunk, and index files.
It keeps the store orchestration focused on layout decisions.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from core.errors import MosaicStoreError


def ensure_directory(directory: Path) -> Path:
    """Create a directory tree when missing.

    Raises:
        MosaicStoreError: If the directory cannot be created.
    """
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as error:
        raise MosaicStoreError(
            f"Failed to create output directory {directory}: {error}. "
            "Check permissions and the configured data root."
        ) from error
    return directory


def write_json_document(document_path: Path, payload: object) -> None:
    """Write one JSON document with stable indentation.

    Args:
        document_path: Target file path.
        payload: JSON-serializable payload.

    Raises:
        MosaicStoreError: If the document cannot be written.
    """
    try:
        document_path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
    except (OSError, TypeError, ValueError) as error:
        raise MosaicStoreError(
            f"Failed to write {document_path}: {error}. "
            "Check free disk space and directory permissions."
        ) from error


def read_json_document(document_path: Path) -> dict[str, Any]:
    """Read and validate a JSON object document.

    Args:
        document_path: Source file path.

    Returns:
        Parsed JSON object.

    Raises:
        MosaicStoreError: If the document is missing or invalid.
    """
    if not document_path.exists():
        raise MosaicStoreError(
            f"Document not found at {document_path}. "
            "Run unify for this category before loading it."
        )
    try:
        payload = json.loads(document_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as error:
        raise MosaicStoreError(
            f"Failed to parse {document_path}: {error.msg}. "
            "Re-run unify to regenerate the output directory."
        ) from error
    if not isinstance(payload, dict):
        raise MosaicStoreError(
            f"Failed to parse {document_path}: expected JSON object at top level. "
            "Re-run unify to regenerate the output directory."
        )
    return payload


def remove_file(document_path: Path) -> None:
    """Delete a file if present.

    Raises:
        MosaicStoreError: If an existing file cannot be removed.
    """
    try:
        document_path.unlink(missing_ok=True)
    except OSError as error:
        raise MosaicStoreError(f"Failed to remove stale file {document_path}: {error}.") from error
