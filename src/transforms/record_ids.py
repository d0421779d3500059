"""Deterministic record ids and within-run deduplication.

Ids hash the record date, location, and canonical JSON of the raw record,
so re-running on unchanged input yields identical ids.
"""

from __future__ import annotations

import hashlib
import json
from typing import Iterable, Mapping

from core.constants import HASH_ALGORITHM, RECORD_ID_HEX_LENGTH
from core.types import CanonicalRecord


def build_record_id(
    prefix: str,
    record_date: str | None,
    location_name: str,
    raw: Mapping[str, object],
) -> str:
    """Build a stable content-addressed record id.

    Args:
        prefix: Category id prefix.
        record_date: Normalized record date.
        location_name: Canonical location name.
        raw: Raw provider record.

    Returns:
        Id of the form ``{prefix}-{hex digest}``.
    """
    serialized = json.dumps(raw, sort_keys=True, default=str, ensure_ascii=False)
    seed = f"{record_date or ''}-{location_name}-{serialized}"
    return f"{prefix}-{_hash_text(seed)[:RECORD_ID_HEX_LENGTH]}"


def remove_duplicate_records(records: Iterable[CanonicalRecord]) -> list[CanonicalRecord]:
    """Remove records sharing an id, keeping the first occurrence.

    Args:
        records: Canonical records in input order.

    Returns:
        Ordered records with duplicates removed.
    """
    unique_records: list[CanonicalRecord] = []
    seen_ids: set[str] = set()
    for record in records:
        if record.record_id in seen_ids:
            continue
        seen_ids.add(record.record_id)
        unique_records.append(record)
    return unique_records


def _hash_text(text: str) -> str:
    hasher = hashlib.new(HASH_ALGORITHM)
    hasher.update(text.encode("utf-8"))
    return hasher.hexdigest()
