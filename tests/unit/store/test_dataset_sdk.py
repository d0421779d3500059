"""Unit tests for the SDK client and dataset handle."""

from __future__ import annotations

from dataclasses import replace

import pytest

from core.config import MosaicConfig
from core.errors import MosaicTransformError
from core.types import AnalysisOptions, UnifyOptions
from store.dataset_sdk import MosaicClient
from tests.fixture_paths import fixture_path
from tests.record_factory import REFERENCE_TIME


def _client(tmp_path, **config_overrides) -> MosaicClient:
    config = replace(MosaicConfig.from_env(), data_root=tmp_path, **config_overrides)
    return MosaicClient(config, reference_time=REFERENCE_TIME)


def _unify_conflict(client: MosaicClient):
    return client.unify(
        UnifyOptions(
            category="conflict",
            source_path=str(fixture_path("raw/conflict_events.json")),
            source="acled",
            organization="OCHA",
        )
    )


def test_unify_reports_counts(tmp_path) -> None:
    """Unify should report surviving, ghost, and duplicate counts."""
    result = _unify_conflict(_client(tmp_path))

    assert (result.record_count, result.ghost_count, result.duplicate_count) == (4, 1, 1)


def test_unify_writes_quarter_partitions(tmp_path) -> None:
    """Unify should write one partition per quarter plus undated."""
    result = _unify_conflict(_client(tmp_path))

    assert [partition.quarter for partition in result.partitions] == [
        "2023-Q3",
        "2023-Q4",
        "undated",
    ]


def test_dataset_handle_loads_unified_records(tmp_path) -> None:
    """The dataset handle should read back what unify wrote."""
    client = _client(tmp_path)
    _unify_conflict(client)

    records = client.dataset("Conflict").load_records()

    assert {record.category for record in records} == {"conflict"}


def test_dataset_handle_reads_index(tmp_path) -> None:
    """The dataset index should report total records."""
    client = _client(tmp_path)
    _unify_conflict(client)

    assert client.dataset("conflict").index()["total_records"] == 4


def test_dataset_handle_pages_through_chunks(tmp_path) -> None:
    """Chunked datasets should be readable one chunk range at a time."""
    client = _client(tmp_path, chunk_threshold=2, chunk_size=3)
    _unify_conflict(client)
    dataset = client.dataset("conflict")

    assert (dataset.is_chunked(), len(dataset.load_chunk_range(2, 2))) == (True, 1)


def test_dataset_handle_iterates_chunks(tmp_path) -> None:
    """Chunk iteration should yield every chunk in order."""
    client = _client(tmp_path, chunk_threshold=2, chunk_size=3)
    _unify_conflict(client)

    sizes = [len(chunk) for chunk in client.dataset("conflict").iter_chunks()]

    assert sizes == [3, 1]


def test_analyze_writes_report(tmp_path) -> None:
    """Analyze should write the report under data_root/analysis."""
    client = _client(tmp_path)
    _unify_conflict(client)

    result = client.analyze(AnalysisOptions(category="conflict"))

    assert (result.output_path, result.record_count) == (
        str(tmp_path / "analysis" / "conflict-analysis.json"),
        4,
    )


def test_with_data_root_clones_client(tmp_path) -> None:
    """A cloned client should use the new data root."""
    client = _client(tmp_path).with_data_root(str(tmp_path / "other"))

    assert client.config.data_root == (tmp_path / "other").resolve()


def test_unify_rejects_unknown_category(tmp_path) -> None:
    """Unknown categories should raise a transform error."""
    with pytest.raises(MosaicTransformError):
        _client(tmp_path).unify(UnifyOptions(category="weather", source_path="x.json"))


def test_categories_lists_registered_categories(tmp_path) -> None:
    """The client should list every registered category."""
    assert len(_client(tmp_path).categories()) == 13
