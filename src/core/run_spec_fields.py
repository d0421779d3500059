"""Type-safe field parsing helpers for run-spec execution.

This module centralizes primitive parsing so run-spec executors can stay
concise and report consistent validation errors.
"""

from __future__ import annotations

from typing import Mapping

from core.errors import MosaicRunSpecError


def required_string(args: Mapping[str, object], field_name: str) -> str:
    """Read a required string field from a run-spec step."""
    value = optional_string(args, field_name)
    if value is None:
        raise MosaicRunSpecError(f"Run-spec step is missing required field '{field_name}'.")
    return value


def optional_string(args: Mapping[str, object], field_name: str) -> str | None:
    """Read an optional string field from a run-spec step."""
    value = args.get(field_name)
    if value is None:
        return None
    if isinstance(value, str):
        return value.strip() or None
    raise MosaicRunSpecError(f"Run-spec field '{field_name}' must be a string when provided.")


def positive_int_with_default(
    args: Mapping[str, object],
    field_name: str,
    default_value: int,
) -> int:
    """Read an integer field that must be at least 1."""
    value = args.get(field_name)
    if value is None:
        return default_value
    if isinstance(value, bool) or not isinstance(value, int):
        raise MosaicRunSpecError(f"Run-spec field '{field_name}' must be an integer.")
    if value < 1:
        raise MosaicRunSpecError(f"Run-spec field '{field_name}' must be >= 1, got {value}.")
    return value


def optional_bool(
    args: Mapping[str, object],
    field_name: str,
    default_value: bool,
) -> bool:
    """Read an optional boolean field from a run-spec step."""
    value = args.get(field_name)
    if value is None:
        return default_value
    if isinstance(value, bool):
        return value
    raise MosaicRunSpecError(f"Run-spec field '{field_name}' must be true/false.")
