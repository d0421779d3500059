"""Unit tests for the dataset output writer and reader."""

from __future__ import annotations

import json

import pytest

from core.errors import MosaicStoreError
from enrich.validation import validate_records
from store.dataset_reader import dataset_exists, load_dataset_records
from store.dataset_writer import default_output_dir, write_dataset_outputs
from tests.record_factory import make_context, make_record, make_source_meta


def _records(count: int):
    return [make_record(f"rec-{index}", date="2023-10-10") for index in range(count)]


def _write(tmp_path, records, **config_overrides):
    context = make_context(tmp_path, **config_overrides)
    output_dir = default_output_dir(context, "conflict")
    outputs = write_dataset_outputs(
        records,
        validate_records(records, ()),
        output_dir,
        source_meta=make_source_meta(),
        context=context,
    )
    return output_dir, outputs


def test_write_dataset_outputs_creates_layout(tmp_path) -> None:
    """The output directory should hold every dataset file."""
    output_dir, _ = _write(tmp_path, _records(3))

    assert sorted(path.name for path in output_dir.iterdir()) == [
        "2023-Q4.json",
        "all-data.json",
        "index.json",
        "metadata.json",
        "recent.json",
        "validation.json",
    ]


def test_default_output_dir_is_under_unified(tmp_path) -> None:
    """Category outputs should live under data_root/unified."""
    assert default_output_dir(make_context(tmp_path), "health") == tmp_path / "unified" / "health"


def test_metadata_reports_regions_and_quality(tmp_path) -> None:
    """metadata.json should summarize regions, quality, and run id."""
    output_dir, _ = _write(tmp_path, _records(2))

    metadata = json.loads((output_dir / "metadata.json").read_text(encoding="utf-8"))

    assert (metadata["regions"], metadata["quality"]["meets_threshold"], metadata["run_id"]) == (
        {"Gaza Strip": 2},
        True,
        "run-test",
    )


def test_large_datasets_are_chunked(tmp_path) -> None:
    """Datasets above the threshold should get a chunk set."""
    output_dir, outputs = _write(tmp_path, _records(7), chunk_threshold=5, chunk_size=3)

    assert (outputs.chunk_index.total_chunks, dataset_exists(output_dir)) == (3, True)


def test_shrinking_dataset_drops_old_chunks(tmp_path) -> None:
    """A rerun below the threshold should remove the previous chunk set."""
    _write(tmp_path, _records(7), chunk_threshold=5, chunk_size=3)

    output_dir, outputs = _write(tmp_path, _records(2), chunk_threshold=5, chunk_size=3)

    assert (outputs.chunk_index, len(load_dataset_records(output_dir))) == (None, 2)


def test_load_dataset_records_prefers_chunks(tmp_path) -> None:
    """Chunked datasets should load back in output order."""
    records = _records(7)
    output_dir, _ = _write(tmp_path, records, chunk_threshold=5, chunk_size=3)

    assert load_dataset_records(output_dir) == records


def test_load_dataset_records_requires_output(tmp_path) -> None:
    """Loading a category that was never unified should raise."""
    with pytest.raises(MosaicStoreError):
        load_dataset_records(tmp_path / "unified" / "missing")
