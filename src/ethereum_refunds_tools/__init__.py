"""
Tools for exercising the refundable token extensions.
"""

import argparse
import sys
from typing import Optional, Sequence, Text, TextIO

from ethereum_refunds import __version__

from .config import RunnerConfig
from .scenario import ScenarioTool, scenario_arguments

DESCRIPTION = """
Runs refund scenarios described in JSON fixture files against a fresh
ledger and prints one JSON result per scenario. The exit status is non-zero
when any scenario fails or a fixture cannot be read.
"""


def create_parser() -> argparse.ArgumentParser:
    """
    Create a command-line argument parser for the scenario runner.
    """
    new_parser = argparse.ArgumentParser(
        prog="refund-scenario",
        description=DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    new_parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
        help="Show the version of the tool.",
    )
    scenario_arguments(new_parser)
    return new_parser


def main(
    args: Optional[Sequence[Text]] = None,
    out_file: Optional[TextIO] = None,
) -> int:
    """Run the scenarios named on the command line."""
    parser = create_parser()
    options = parser.parse_args(args)

    if out_file is None:
        out_file = sys.stdout

    config = RunnerConfig(
        fixtures=options.fixtures,
        trace=options.trace,
        fail_fast=options.fail_fast,
        log_level=options.log_level,
    )
    return ScenarioTool(config, out_file).run()
