"""Mosaic CLI entry points.
This module exposes unify, analyze, and run-spec commands.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from cli.run_spec_command import add_run_spec_command, run_run_spec_command
from core.config import MosaicConfig
from core.constants import DEFAULT_FORECAST_PERIODS
from core.errors import MosaicError
from core.run_spec_execution import format_analysis_result, format_unify_result
from core.types import AnalysisOptions, UnifyOptions
from store.dataset_sdk import MosaicClient
from transforms.registry import supported_categories


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="mosaic",
        description="Humanitarian data unification and analysis",
    )
    parser.add_argument("--data-root", help="Override MOSAIC_DATA_ROOT for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_unify_command(subparsers)
    _add_analyze_command(subparsers)
    _add_categories_command(subparsers)
    add_run_spec_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Mosaic CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        client = _build_client(args.data_root)
        if args.command == "unify":
            return _run_unify_command(client, args)
        if args.command == "analyze":
            return _run_analyze_command(client, args)
        if args.command == "categories":
            return _run_categories_command(client)
        if args.command == "run-spec":
            return run_run_spec_command(client, args)
    except MosaicError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(data_root: str | None) -> MosaicClient:
    """Build SDK client with optional data-root override.

    Args:
        data_root: Optional override path.

    Returns:
        Configured SDK client.
    """
    config = MosaicConfig.from_env()
    if data_root:
        config = replace(config, data_root=Path(data_root).expanduser().resolve())
    return MosaicClient(config)


def _run_unify_command(client: MosaicClient, args: argparse.Namespace) -> int:
    """Handle unify command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    options = UnifyOptions(
        category=args.category,
        source_path=args.source,
        source=args.source_name,
        organization=args.organization,
        title=args.title or "",
        description=args.description or "",
        url=args.url,
        output_dir=args.output_dir,
        field_map_path=args.field_map,
        link=args.link,
    )
    for line in format_unify_result(client.unify(options)):
        print(line)
    return 0


def _run_analyze_command(client: MosaicClient, args: argparse.Namespace) -> int:
    """Handle analyze command."""
    options = AnalysisOptions(
        category=args.category,
        input_dir=args.input_dir,
        output_path=args.output,
        include_regional=not args.skip_regional,
        include_temporal=not args.skip_temporal,
        include_descriptive=not args.skip_descriptive,
        include_time_series=not args.skip_time_series,
        forecast_periods=args.forecast_periods,
    )
    for line in format_analysis_result(client.analyze(options)):
        print(line)
    return 0


def _run_categories_command(client: MosaicClient) -> int:
    for category in client.categories():
        print(category)
    return 0


def _add_unify_command(subparsers: Any) -> None:
    """Register unify subcommand."""
    parser = subparsers.add_parser("unify", help="Unify a raw provider dataset")
    parser.add_argument("source", help="Source JSON file or directory of JSON files")
    parser.add_argument(
        "--category",
        required=True,
        choices=supported_categories(),
        help="Target category",
    )
    parser.add_argument("--source-name", help="Provider name written to provenance")
    parser.add_argument("--organization", help="Publishing organization")
    parser.add_argument("--title", help="Dataset title, used for region fallback")
    parser.add_argument("--description", help="Dataset description, used for region fallback")
    parser.add_argument("--url", help="Provider URL")
    parser.add_argument("--output-dir", help="Output directory, defaults under the data root")
    parser.add_argument("--field-map", help="YAML file with extra field aliases")
    parser.add_argument(
        "--link",
        action="store_true",
        help="Link records against sibling category outputs under the data root",
    )


def _add_analyze_command(subparsers: Any) -> None:
    """Register analyze subcommand."""
    parser = subparsers.add_parser("analyze", help="Analyze a unified category dataset")
    parser.add_argument("--category", required=True, help="Category to analyze")
    parser.add_argument("--input-dir", help="Unified output directory, defaults under data root")
    parser.add_argument("--output", help="Report path, defaults under the data root")
    parser.add_argument("--skip-regional", action="store_true", help="Skip spatial aggregation")
    parser.add_argument("--skip-temporal", action="store_true", help="Skip temporal aggregation")
    parser.add_argument(
        "--skip-descriptive",
        action="store_true",
        help="Skip descriptive statistics",
    )
    parser.add_argument(
        "--skip-time-series",
        action="store_true",
        help="Skip trend, seasonality, and forecast analysis",
    )
    parser.add_argument(
        "--forecast-periods",
        type=int,
        default=DEFAULT_FORECAST_PERIODS,
        help="Forecast horizon in days",
    )


def _add_categories_command(subparsers: Any) -> None:
    subparsers.add_parser("categories", help="List supported categories")
