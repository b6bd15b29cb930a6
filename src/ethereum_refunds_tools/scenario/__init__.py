"""
Run refund scenarios from JSON fixture files.
"""

import argparse
import json
import logging
from typing import Iterable, TextIO

from ethereum_refunds.trace import set_evm_trace

from ..config import LOG_LEVELS, RunnerConfig
from ..utils import LoggingTracer, get_stream_logger
from .models import Scenario, ScenarioFile
from .runner import CaseResult, FixtureError, ScenarioRun, run_scenarios

__all__ = (
    "CaseResult",
    "FixtureError",
    "Scenario",
    "ScenarioFile",
    "ScenarioRun",
    "ScenarioTool",
    "load_fixture",
    "run_scenarios",
    "scenario_arguments",
)


def scenario_arguments(parser: argparse.ArgumentParser) -> None:
    """
    Adds the arguments of the scenario runner to `parser`.
    """
    parser.add_argument("fixtures", nargs="+", help="JSON fixture files.")
    parser.add_argument(
        "--trace",
        action="store_true",
        default=False,
        help="Log every message and event while scenarios run.",
    )
    parser.add_argument(
        "--fail-fast",
        dest="fail_fast",
        action="store_true",
        default=False,
        help="Stop after the first failing scenario.",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default="WARNING",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Level of the log written to stderr.",
    )


def load_fixture(path: str) -> ScenarioFile:
    """
    Read and validate a fixture file.
    """
    with open(path) as fixture_file:
        return ScenarioFile.model_validate(json.load(fixture_file))


class ScenarioTool:
    """
    Run every scenario of one or more fixture files.
    """

    def __init__(self, config: RunnerConfig, out_file: TextIO) -> None:
        self.config = config
        self.out_file = out_file
        level = getattr(logging, config.log_level)
        self.logger = get_stream_logger("ethereum_refunds_tools", level)
        get_stream_logger("ethereum_refunds", level)

    def report(self, results: Iterable[CaseResult]) -> bool:
        """
        Write one JSON line per result, returning whether all passed.
        """
        all_passed = True
        for result in results:
            self.out_file.write(result.model_dump_json(by_alias=True))
            self.out_file.write("\n")
            if not result.passed:
                all_passed = False
                if self.config.fail_fast:
                    break
        return all_passed

    def run(self) -> int:
        """
        Execute the scenarios, returning the exit status.
        """
        previous = None
        if self.config.trace:
            tracer_logger = logging.getLogger("ethereum_refunds_tools.trace")
            tracer_logger.setLevel(logging.INFO)
            previous = set_evm_trace(LoggingTracer(tracer_logger))

        try:
            status = 0
            for path in self.config.fixtures:
                try:
                    fixture = load_fixture(str(path))
                except (OSError, ValueError) as error:
                    self.logger.error("cannot load %s: %s", path, error)
                    status = 1
                    if self.config.fail_fast:
                        break
                    continue
                self.logger.info(
                    "loaded %d case(s) from %s", len(fixture.root), path
                )
                if not self.report(run_scenarios(fixture.root)):
                    status = 1
                    if self.config.fail_fast:
                        break
            return status
        finally:
            if previous is not None:
                set_evm_trace(previous)
