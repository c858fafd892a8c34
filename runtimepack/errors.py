"""Error taxonomy for packaging pipeline failures."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

# sysexits.h codes for failures that are not a child process exit status.
EX_IOERR = 74
EX_CONFIG = 78


class PipelineError(RuntimeError):
    """Base class for every failure surfaced by the packaging pipeline."""

    exit_code: int = 1


class ConfigurationError(PipelineError):
    """Raised when a required resource or setting is missing or invalid.

    These are fatal and never retried. They are raised before any
    subprocess is started.
    """

    exit_code = EX_CONFIG

    def __init__(
        self,
        message: str,
        *,
        resource: Optional[str] = None,
        path: Optional[Path] = None,
    ) -> None:
        super().__init__(message)
        self.resource = resource
        self.path = path

    @classmethod
    def missing(cls, resource: str, path: Path) -> "ConfigurationError":
        return cls(f"{resource} not found: {path}", resource=resource, path=path)


class UnsupportedPlatformError(ConfigurationError):
    """Raised when a Windows-only step is invoked on another host."""

    def __init__(self, step: str, host: str) -> None:
        super().__init__(
            f"{step} is Windows-only; current host platform is '{host}'.",
            resource="platform",
        )
        self.step = step
        self.host = host


class StagingError(PipelineError):
    """Raised when copying an artifact into the staging directory fails."""

    exit_code = EX_IOERR


class SubprocessFailure(PipelineError):
    """Raised when an external tool exits with a non-zero status."""

    def __init__(self, tool: str, exit_code: int, command: Sequence[str]) -> None:
        super().__init__(f"{tool} failed with exit code {exit_code}")
        self.tool = tool
        self.exit_code = exit_code
        self.command = list(command)


class PipelineFailure(PipelineError):
    """Raised by the orchestrator when a step fails; wraps the step's error."""

    def __init__(self, step: str, cause: PipelineError) -> None:
        super().__init__(f"{step} failed: {cause}")
        self.step = step
        self.cause = cause
        self.exit_code = cause.exit_code


__all__ = [
    "EX_CONFIG",
    "EX_IOERR",
    "ConfigurationError",
    "PipelineError",
    "PipelineFailure",
    "StagingError",
    "SubprocessFailure",
    "UnsupportedPlatformError",
]
