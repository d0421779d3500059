"""Integration tests for the unify then analyze workflow."""

from __future__ import annotations

import json
from dataclasses import replace

from core.config import MosaicConfig
from core.types import AnalysisOptions, UnifyOptions
from store.dataset_sdk import MosaicClient
from tests.fixture_paths import fixture_path
from tests.record_factory import REFERENCE_TIME


def test_unify_then_analyze_conflict_flow(tmp_path) -> None:
    """End-to-end flow should unify, reload, and analyze one category."""
    config = replace(MosaicConfig.from_env(), data_root=tmp_path)
    client = MosaicClient(config, reference_time=REFERENCE_TIME)

    unify_result = client.unify(
        UnifyOptions(
            category="conflict",
            source_path=str(fixture_path("raw/conflict_events.json")),
            source="acled",
            organization="OCHA",
        )
    )
    reloaded = client.dataset("conflict").load_records()
    analysis_result = client.analyze(AnalysisOptions(category="conflict", forecast_periods=3))
    report = json.loads((tmp_path / "analysis" / "conflict-analysis.json").read_text())

    assert (
        unify_result.record_count,
        len(reloaded),
        analysis_result.record_count,
        report["summary"]["overview"]["total_records"],
    ) == (4, 4, 4, 4)
