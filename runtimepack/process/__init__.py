"""Subprocess execution with streamed output."""

from .runner import ProcessResult, ProcessRunner, format_command

__all__ = ["ProcessResult", "ProcessRunner", "format_command"]
