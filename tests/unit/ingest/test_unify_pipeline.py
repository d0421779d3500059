"""Unit tests for the unify pipeline."""

from __future__ import annotations

import json

import pytest

from core.errors import MosaicIngestError
from core.types import UnifyOptions
from ingest.pipeline import unify_dataset
from tests.fixture_paths import fixture_path
from tests.record_factory import make_context

CONFLICT_SOURCE = str(fixture_path("raw/conflict_events.json"))


def _options(**overrides) -> UnifyOptions:
    values = {
        "category": "conflict",
        "source_path": CONFLICT_SOURCE,
        "source": "acled",
        "organization": "OCHA",
    }
    values.update(overrides)
    return UnifyOptions(**values)


def test_unify_dataset_counts_every_stage(tmp_path) -> None:
    """The result should account for ghosts, duplicates, and survivors."""
    result = unify_dataset(_options(), make_context(tmp_path))

    assert (
        result.record_count,
        result.ghost_count,
        result.duplicate_count,
        result.skipped_count,
        result.linked_count,
    ) == (4, 1, 1, 0, 0)


def test_unify_dataset_records_are_enriched(tmp_path) -> None:
    """Written records should carry temporal context when dated."""
    result = unify_dataset(_options(), make_context(tmp_path))

    payload = json.loads((tmp_path / "unified" / "conflict" / "all-data.json").read_text())
    phases = [item.get("temporal_context", {}).get("conflict_phase") for item in payload["data"]]

    assert (result.output_dir, phases) == (
        str(tmp_path / "unified" / "conflict"),
        ["active-conflict", "active-conflict", "pre-escalation", None],
    )


def test_unify_dataset_uses_explicit_output_dir(tmp_path) -> None:
    """An explicit output directory should override the data root layout."""
    target = tmp_path / "custom"

    result = unify_dataset(_options(output_dir=str(target)), make_context(tmp_path))

    assert (result.output_dir, (target / "index.json").is_file()) == (str(target.resolve()), True)


def test_unify_dataset_applies_field_map(tmp_path) -> None:
    """Provider aliases from a field map should feed the canonical fields."""
    source = tmp_path / "feed.json"
    source.write_text(
        json.dumps([{"event_date": "2023-10-20", "place": "Rafah", "killed_total": 6}]),
        encoding="utf-8",
    )
    options = _options(
        source_path=str(source),
        field_map_path=str(fixture_path("field_maps/conflict_aliases.yaml")),
    )

    unify_dataset(options, make_context(tmp_path))
    payload = json.loads((tmp_path / "unified" / "conflict" / "all-data.json").read_text())

    assert (payload["data"][0]["fatalities"], payload["data"][0]["location"]["name"]) == (
        6,
        "Rafah",
    )


def test_unify_dataset_rejects_missing_field_map(tmp_path) -> None:
    """A missing field map should fail the run."""
    with pytest.raises(MosaicIngestError):
        unify_dataset(_options(field_map_path=str(tmp_path / "none.yaml")), make_context(tmp_path))


def test_unify_dataset_with_missing_source_writes_empty_dataset(tmp_path) -> None:
    """A missing source should produce an empty, failing dataset rather than an error."""
    result = unify_dataset(
        _options(source_path=str(tmp_path / "missing.json")), make_context(tmp_path)
    )

    assert (result.record_count, result.report.meets_threshold) == (0, False)


def test_unify_dataset_falls_back_to_file_stem_for_source(tmp_path) -> None:
    """Without a source name the input file stem should be used."""
    unify_dataset(_options(source=None), make_context(tmp_path))

    index = json.loads((tmp_path / "unified" / "conflict" / "index.json").read_text())

    assert index["source"] == "conflict_events"
