"""Metric accessors shared by the aggregation modules."""

from __future__ import annotations

from typing import Iterable

from core.types import CanonicalRecord
from transforms.value_parsing import parse_float


def is_incident(record: CanonicalRecord) -> bool:
    """Return whether a record counts as a conflict incident."""
    return record.record_type == "conflict" or record.category == "conflict"


def record_number(record: CanonicalRecord, field_name: str) -> float:
    """Read a numeric payload field, 0 when absent or invalid."""
    if field_name == "value":
        return record.value or 0.0
    return parse_float(record.attributes.get(field_name)) or 0.0


def metric_rows(records: Iterable[CanonicalRecord]) -> list[dict[str, object]]:
    """Flatten records into rows of numeric payload fields for summaries."""
    rows: list[dict[str, object]] = []
    for record in records:
        row: dict[str, object] = {"value": record.value}
        for field_name, raw_value in record.attributes.items():
            number = parse_float(raw_value)
            if number is not None and not isinstance(raw_value, bool):
                row[field_name] = number
        rows.append(row)
    return rows
