"""Spawn native tools, stream their merged output, and map exit codes."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Mapping, Optional

from ..errors import ConfigurationError, SubprocessFailure
from ..logging import get_logger

Spawner = Callable[..., "subprocess.Popen[str]"]


@dataclass
class ProcessResult:
    """Exit status and captured output lines of a finished process."""

    args: List[str]
    returncode: int
    output: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def format_command(args: Iterable[str]) -> str:
    """Render an argument vector as a Windows command line for reproduction."""
    return subprocess.list2cmdline(list(args))


class ProcessRunner:
    """Runs one external process at a time and streams its output to the log.

    stdout and stderr are merged into a single pipe which is drained line by
    line while the child runs. The exit code is read only after the pipe has
    been fully consumed, so a verbose child never blocks on a full buffer.
    There is no timeout: a hung child blocks the caller.
    """

    def __init__(self, spawner: Spawner | None = None) -> None:
        self._spawn = spawner or subprocess.Popen
        self.logger = get_logger("process")

    def run(
        self,
        args: Iterable[str],
        *,
        env: Optional[Mapping[str, str]] = None,
        cwd: Optional[Path] = None,
    ) -> ProcessResult:
        argv = [str(arg) for arg in args]
        self.logger.info("%s", format_command(argv))
        try:
            process = self._spawn(
                argv,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                encoding="utf-8",
                errors="replace",
                env=dict(env) if env is not None else None,
                cwd=str(cwd) if cwd is not None else None,
            )
        except FileNotFoundError as exc:
            raise ConfigurationError.missing("executable", Path(argv[0])) from exc

        output: List[str] = []
        with process:
            for line in process.stdout or ():
                text = line.rstrip("\r\n")
                output.append(text)
                self.logger.info("%s", text)
            returncode = process.wait()

        self.logger.debug("%s exited with code %d", Path(argv[0]).name, returncode)
        return ProcessResult(args=argv, returncode=returncode, output=output)

    def run_checked(
        self,
        tool: str,
        args: Iterable[str],
        *,
        env: Optional[Mapping[str, str]] = None,
        cwd: Optional[Path] = None,
    ) -> ProcessResult:
        """Run ``args`` and raise ``SubprocessFailure`` on a non-zero exit."""
        result = self.run(args, env=env, cwd=cwd)
        if not result.ok:
            raise SubprocessFailure(tool, result.returncode, result.args)
        return result


__all__ = ["ProcessResult", "ProcessRunner", "format_command"]
