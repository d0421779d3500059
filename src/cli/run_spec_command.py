"""Run-spec CLI command wiring.

Registers the ``run-spec`` subcommand. ``--check`` validates the YAML file
and lists its steps without touching any dataset.
"""

from __future__ import annotations

import argparse
from typing import Any

from core.run_spec import load_run_spec
from store.dataset_sdk import MosaicClient


def add_run_spec_command(subparsers: Any) -> None:
    """Register run-spec subcommand."""
    parser = subparsers.add_parser(
        "run-spec",
        help="Run a declarative YAML unify/analyze pipeline",
    )
    parser.add_argument("spec_file", help="Path to YAML run-spec file")
    parser.add_argument(
        "--check",
        action="store_true",
        help="Validate the spec and list its steps without running them",
    )


def run_run_spec_command(client: MosaicClient, args: argparse.Namespace) -> int:
    """Handle run-spec command invocation."""
    if args.check:
        spec = load_run_spec(args.spec_file)
        for index, step in enumerate(spec.steps, 1):
            category = step.args.get("category") or spec.defaults.category or "-"
            print(f"{index}\t{step.command}\t{category}")
        return 0
    for line in client.run_spec(args.spec_file):
        print(line)
    return 0
