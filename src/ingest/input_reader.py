"""Raw dataset readers for ingestion.

This module loads loosely-typed provider records from local JSON files or
directories of JSON files. A missing or malformed file degrades to an
empty contribution with a warning so one bad file never stops a run.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from core.constants import SUPPORTED_INPUT_EXTENSIONS

RECORD_CONTAINER_KEYS = ("data", "records", "sites")


@dataclass(frozen=True)
class RawDataset:
    """Raw provider records loaded from one source path.

    Attributes:
        records: Raw records in file order.
        files: Files that contributed records.
        warnings: Human-readable read problems.
    """

    records: tuple[object, ...]
    files: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


def read_raw_dataset(source_path: str, logger: Any) -> RawDataset:
    """Load raw records from a JSON file or a directory tree of JSON files.

    Args:
        source_path: Input file or directory.
        logger: Bound structured logger of the current run.

    Returns:
        Loaded records with the files read and any warnings.
    """
    path = Path(source_path).expanduser()
    if not path.exists():
        warning = f"Source path {path} does not exist; continuing with an empty dataset."
        logger.warning("source_missing", source_path=str(path))
        return RawDataset(records=(), warnings=(warning,))
    file_paths = [path] if path.is_file() else discover_input_files(path)
    records: list[object] = []
    files: list[str] = []
    warnings: list[str] = []
    for file_path in file_paths:
        file_records, warning = read_json_records(file_path)
        if warning is not None:
            warnings.append(warning)
            logger.warning("source_file_unreadable", file_path=str(file_path), reason=warning)
            continue
        records.extend(file_records)
        files.append(str(file_path))
    logger.info("source_loaded", source_path=str(path), files=len(files), records=len(records))
    return RawDataset(records=tuple(records), files=tuple(files), warnings=tuple(warnings))


def discover_input_files(root: Path) -> list[Path]:
    """Return supported input files under a directory in sorted order.

    Directories are walked with an explicit work stack. Each directory is
    visited once by its resolved path, so symlink cycles terminate.
    """
    found: list[Path] = []
    visited: set[Path] = set()
    pending = [root]
    while pending:
        directory = pending.pop()
        resolved = directory.resolve()
        if resolved in visited:
            continue
        visited.add(resolved)
        for entry in sorted(directory.iterdir()):
            if entry.is_dir():
                pending.append(entry)
            elif entry.is_file() and entry.suffix.lower() in SUPPORTED_INPUT_EXTENSIONS:
                found.append(entry)
    return sorted(found)


def read_json_records(file_path: Path) -> tuple[list[object], str | None]:
    """Read the record array of one JSON file.

    Accepts a top-level array or an object holding the array under
    ``data``, ``records``, or ``sites``.

    Returns:
        Records and None, or an empty list and a warning message.
    """
    try:
        payload = json.loads(file_path.read_text(encoding="utf-8"))
    except OSError as error:
        return [], f"Failed to read {file_path}: {error}."
    except UnicodeDecodeError as error:
        return [], f"Failed to decode {file_path} as UTF-8: {error.reason} at byte {error.start}."
    except json.JSONDecodeError as error:
        return [], f"Failed to parse {file_path}: {error.msg} at line {error.lineno}."
    records = extract_record_list(payload)
    if records is None:
        return [], (
            f"Unsupported JSON shape in {file_path}: expected an array or an object "
            f"with one of {', '.join(RECORD_CONTAINER_KEYS)}."
        )
    return records, None


def extract_record_list(payload: object) -> list[object] | None:
    """Return the record array of a decoded JSON document, or None."""
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in RECORD_CONTAINER_KEYS:
            value = payload.get(key)
            if isinstance(value, list):
                return value
    return None
