"""Python SDK for unify and analysis operations.

This module exposes high-level APIs for unifying provider datasets,
analyzing unified outputs, and loading records back from disk.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Iterator

from analysis.analysis_runner import analyze_dataset
from core.config import MosaicConfig
from core.constants import CHUNKS_DIR_NAME, INDEX_FILE_NAME
from core.run_context import RunContext
from core.run_spec_execution import execute_run_spec_file
from core.types import (
    AnalysisOptions,
    AnalysisResult,
    CanonicalRecord,
    ChunkIndex,
    PipelineResult,
    UnifyOptions,
)
from ingest.pipeline import unify_dataset
from store.chunk_store import has_chunks, iter_chunks, load_chunk_index, load_chunk_range
from store.dataset_reader import load_dataset_records
from store.dataset_writer import default_output_dir
from store.json_io import read_json_document
from transforms.registry import supported_categories


class MosaicClient:
    """Primary SDK entry point for unify and analysis workflows."""

    def __init__(
        self,
        config: MosaicConfig | None = None,
        reference_time: datetime | None = None,
    ) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
            reference_time: Optional fixed clock for every run of this client.
        """
        self._config = config or MosaicConfig.from_env()
        self._reference_time = reference_time

    @property
    def config(self) -> MosaicConfig:
        """Return the runtime configuration of this client."""
        return self._config

    def unify(self, options: UnifyOptions) -> PipelineResult:
        """Unify one provider dataset into its category output directory.

        Args:
            options: Unify options.

        Returns:
            Summary of the written dataset.

        Raises:
            MosaicTransformError: If the category is not registered.
            MosaicStoreError: If outputs cannot be written.
        """
        return unify_dataset(options, self._new_context())

    def analyze(self, options: AnalysisOptions) -> AnalysisResult:
        """Analyze a unified category dataset and write the report.

        Args:
            options: Analysis options.

        Returns:
            Report location and headline figures.
        """
        return analyze_dataset(options, self._new_context())

    def dataset(self, category: str) -> "Dataset":
        """Get a handle on the unified output of a category.

        Args:
            category: Category name.

        Returns:
            Dataset handle.
        """
        normalized = category.strip().lower()
        return Dataset(normalized, default_output_dir(self._new_context(), normalized))

    def categories(self) -> tuple[str, ...]:
        """Return the categories a dataset can be unified into."""
        return supported_categories()

    def with_data_root(self, data_root: str) -> "MosaicClient":
        """Clone the client with a different local data root.

        Args:
            data_root: New data root path.

        Returns:
            New SDK client instance.
        """
        resolved_root = Path(data_root).expanduser().resolve()
        updated_config = replace(self._config, data_root=resolved_root)
        return MosaicClient(updated_config, self._reference_time)

    def run_spec(self, spec_file: str) -> tuple[str, ...]:
        """Execute a YAML run-spec through the shared execution engine.

        Args:
            spec_file: Path to YAML run-spec file.

        Returns:
            Ordered command output lines.
        """
        return execute_run_spec_file(self, spec_file)

    def _new_context(self) -> RunContext:
        return RunContext.create(self._config, reference_time=self._reference_time)


class Dataset:
    """SDK handle for one unified output directory."""

    def __init__(self, category: str, output_dir: Path) -> None:
        self._category = category
        self._output_dir = output_dir

    @property
    def name(self) -> str:
        """Return the category name."""
        return self._category

    @property
    def output_dir(self) -> Path:
        return self._output_dir

    def load_records(self) -> list[CanonicalRecord]:
        """Load every record, from chunks when the dataset is chunked.

        Raises:
            MosaicStoreError: If the dataset has not been unified.
        """
        return load_dataset_records(self._output_dir)

    def index(self) -> dict[str, object]:
        """Load the dataset ``index.json``."""
        return read_json_document(self._output_dir / INDEX_FILE_NAME)

    def is_chunked(self) -> bool:
        return has_chunks(self._output_dir)

    def chunk_index(self) -> ChunkIndex:
        """Load the chunk index of a chunked dataset."""
        return load_chunk_index(self._output_dir / CHUNKS_DIR_NAME)

    def iter_chunks(self) -> Iterator[list[CanonicalRecord]]:
        """Yield the records of a chunked dataset one chunk at a time."""
        return iter_chunks(self._output_dir / CHUNKS_DIR_NAME)

    def load_chunk_range(self, start_chunk: int, end_chunk: int) -> list[CanonicalRecord]:
        """Load an inclusive 1-based range of chunks."""
        return load_chunk_range(self._output_dir / CHUNKS_DIR_NAME, start_chunk, end_chunk)
