"""Failure types for the storm events analysis.

The CLI logs ``error_code`` on the STAGE_FAIL line and exits hard. Any
exception outside this hierarchy is reported as UNEXPECTED_ERROR.
"""

from __future__ import annotations


class PipelineError(Exception):
    error_code = "PIPELINE_ERROR"


class ConfigError(PipelineError):
    """analysis.yml is missing, unparseable or out of range."""

    error_code = "CONFIG_ERROR"


class StageError(PipelineError):
    """A stage could not produce its output, so later stages never run."""

    error_code = "STAGE_ERROR"


class SourceFormatError(StageError):
    """The StormData file cannot be read as the expected CSV."""

    error_code = "SOURCE_FORMAT_ERROR"

    def __init__(self, message: str, *, column: str | None = None, line: int | None = None) -> None:
        if line is not None:
            message = f"{message} on line {line}"
        super().__init__(message)
        self.column = column
        self.line = line
