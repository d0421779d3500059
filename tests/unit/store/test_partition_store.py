"""Unit tests for quarter partitions, the recent window, and the dataset index."""

from __future__ import annotations

import json

from store.partition_store import (
    partition_by_quarter,
    select_recent,
    write_dataset_index,
    write_partition_files,
)
from store.record_payload import record_from_payload
from tests.record_factory import make_context, make_record

QUARTER_DATES = ("2023-08-15", "2023-11-20", "2024-01-05")


def _records(count: int = 500):
    return [
        make_record(f"rec-{index}", date=QUARTER_DATES[index % len(QUARTER_DATES)])
        for index in range(count)
    ]


def _load_partition(path):
    payload = json.loads(path.read_text(encoding="utf-8"))
    return [record_from_payload(item) for item in payload["data"]]


def test_partition_by_quarter_orders_keys_with_undated_last() -> None:
    """Quarter keys should be chronological with undated records last."""
    records = [
        make_record("a", date="2024-02-01"),
        make_record("b", date=None),
        make_record("c", date="2023-10-10"),
        make_record("d", date="spring"),
    ]

    partitions = partition_by_quarter(records)

    assert {key: [r.record_id for r in rows] for key, rows in partitions.items()} == {
        "2023-Q4": ["c"],
        "2024-Q1": ["a"],
        "undated": ["b", "d"],
    }


def test_partitions_hold_every_record_exactly_once(tmp_path) -> None:
    """The union of partition files should equal the input records."""
    records = _records()

    descriptors = write_partition_files(
        records, tmp_path, dataset="conflict", source="test-feed", context=make_context(tmp_path)
    )
    reloaded = [
        record
        for descriptor in descriptors
        for record in _load_partition(tmp_path / descriptor.file_name)
    ]

    assert sorted(reloaded, key=lambda r: r.record_id) == sorted(records, key=lambda r: r.record_id)


def test_partition_descriptors_report_counts(tmp_path) -> None:
    """Descriptors should name each quarter file with its record count."""
    descriptors = write_partition_files(
        _records(9), tmp_path, dataset="conflict", source="s", context=make_context(tmp_path)
    )

    assert [(d.quarter, d.file_name, d.record_count) for d in descriptors] == [
        ("2023-Q3", "2023-Q3.json", 3),
        ("2023-Q4", "2023-Q4.json", 3),
        ("2024-Q1", "2024-Q1.json", 3),
    ]


def test_stale_partitions_are_removed(tmp_path) -> None:
    """Quarters that no longer hold records should be deleted on rewrite."""
    context = make_context(tmp_path)
    write_partition_files(_records(9), tmp_path, dataset="d", source="s", context=context)

    write_partition_files(
        [make_record("only", date="2024-01-05")], tmp_path, dataset="d", source="s", context=context
    )

    assert sorted(path.name for path in tmp_path.glob("*-Q*.json")) == ["2024-Q1.json"]


def test_select_recent_uses_configured_window(tmp_path) -> None:
    """Only records within the recent window of the reference date are kept."""
    records = [
        make_record("old", date="2023-10-01"),
        make_record("new", date="2023-12-01"),
        make_record("none", date=None),
    ]

    recent = select_recent(records, make_context(tmp_path, recent_days=60))

    assert [record.record_id for record in recent] == ["new"]


def test_recent_file_is_written_even_when_empty(tmp_path) -> None:
    """recent.json should exist even if no record is recent."""
    context = make_context(tmp_path)
    write_partition_files(
        [make_record(date="2001-01-01")], tmp_path, dataset="d", source="s", context=context
    )

    payload = json.loads((tmp_path / "recent.json").read_text(encoding="utf-8"))

    assert (payload["metadata"]["record_count"], payload["data"]) == (0, [])


def test_dataset_index_lists_partitions(tmp_path) -> None:
    """index.json should describe partitions, totals, and the baseline."""
    context = make_context(tmp_path)
    records = _records(9)
    partitions = write_partition_files(records, tmp_path, dataset="d", source="s", context=context)

    index = write_dataset_index(
        tmp_path,
        dataset="d",
        source="s",
        records=records,
        partitions=partitions,
        chunk_index=None,
        context=context,
    )

    assert (
        index["total_records"],
        index["total_partitions"],
        index["date_range"]["baseline_date"],
        index["chunks"],
    ) == (9, 3, "2023-10-07", None)
