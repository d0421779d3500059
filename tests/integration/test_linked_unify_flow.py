"""Integration tests for cross-dataset linking during unify."""

from __future__ import annotations

from dataclasses import replace

from core.config import MosaicConfig
from core.types import UnifyOptions
from store.dataset_sdk import MosaicClient
from tests.fixture_paths import fixture_path
from tests.record_factory import REFERENCE_TIME


def test_conflict_events_link_to_nearby_damage(tmp_path) -> None:
    """Conflict records should reference damage reports close in space and time."""
    config = replace(MosaicConfig.from_env(), data_root=tmp_path)
    client = MosaicClient(config, reference_time=REFERENCE_TIME)
    client.unify(
        UnifyOptions(
            category="infrastructure",
            source_path=str(fixture_path("raw/infrastructure_damage.json")),
            source="unosat",
        )
    )

    result = client.unify(
        UnifyOptions(
            category="conflict",
            source_path=str(fixture_path("raw/conflict_events.json")),
            source="acled",
            link=True,
        )
    )
    linked = [
        record
        for record in client.dataset("conflict").load_records()
        if record.related_data
    ]

    assert (
        result.linked_count,
        [record.location.name for record in linked],
        list(linked[0].related_data),
    ) == (1, ["Gaza City"], ["infrastructure"])
