"""
Configuration of the scenario runner.
"""

from pathlib import Path
from typing import List

from pydantic import BaseModel, Field, field_validator

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class RunnerConfig(BaseModel):
    """
    Options controlling how scenario fixtures are run.
    """

    fixtures: List[Path] = Field(default_factory=list)
    trace: bool = False
    fail_fast: bool = False
    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Accept level names in any case."""
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level {value!r}")
        return level
