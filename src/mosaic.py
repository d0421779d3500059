"""Public SDK surface for Mosaic.

This module provides a stable import path for SDK users.
It re-exports the primary client, typed option models, and the
analysis and linking entry points.
"""

from __future__ import annotations

from analysis.report import (
    analysis_to_payload,
    compare_datasets,
    generate_summary_report,
    perform_comprehensive_analysis,
)
from core.config import MosaicConfig
from core.run_context import RunContext
from core.types import (
    AnalysisOptions,
    AnalysisResult,
    CanonicalRecord,
    PipelineResult,
    SourceMetadata,
    UnifyOptions,
)
from linking.cross_dataset import DataLinker
from store.dataset_sdk import Dataset, MosaicClient
from transforms.registry import get_transformer, supported_categories

__all__ = [
    "AnalysisOptions",
    "AnalysisResult",
    "CanonicalRecord",
    "DataLinker",
    "Dataset",
    "MosaicClient",
    "MosaicConfig",
    "PipelineResult",
    "RunContext",
    "SourceMetadata",
    "UnifyOptions",
    "analysis_to_payload",
    "compare_datasets",
    "generate_summary_report",
    "get_transformer",
    "perform_comprehensive_analysis",
    "supported_categories",
]
