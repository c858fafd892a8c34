"""Host platform capability checks for Windows-only steps."""

from __future__ import annotations

import sys

from .errors import UnsupportedPlatformError

WINDOWS = "win32"


def is_windows(host: str | None = None) -> bool:
    return (host or sys.platform) == WINDOWS


def require_windows(step: str, host: str | None = None) -> None:
    """Raise ``UnsupportedPlatformError`` unless the host is Windows."""
    resolved = host or sys.platform
    if not is_windows(resolved):
        raise UnsupportedPlatformError(step, resolved)


__all__ = ["WINDOWS", "is_windows", "require_windows"]
