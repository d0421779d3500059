"""Mosaic exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each subsystem raises a specific error type for debuggability.
"""

from __future__ import annotations


class MosaicError(Exception):
    """Base exception for all Mosaic failures."""


class MosaicConfigError(MosaicError):
    """Raised for invalid runtime configuration."""


class MosaicIngestError(MosaicError):
    """Raised when an input source cannot be located or decoded."""


class MosaicTransformError(MosaicError):
    """Raised when a raw record cannot be mapped to the canonical schema."""


class MosaicStoreError(MosaicError):
    """Raised for output directory, partition, and chunk persistence failures."""


class MosaicAnalysisError(MosaicError):
    """Raised for invalid statistical analysis inputs."""


class MosaicRunSpecError(MosaicError):
    """Raised for invalid or unsupported run-spec configuration."""
