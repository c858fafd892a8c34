"""Toolchain home resolution and tool locations."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Sequence

from .errors import ConfigurationError

ENV_HOME_KEYS: Sequence[str] = ("RUNTIMEPACK_JAVA_HOME", "JAVA_HOME")


@dataclass(frozen=True)
class Toolchain:
    """A JDK installation providing jlink, jpackage and the jmods repository."""

    home: Path

    @property
    def jlink(self) -> Path:
        return self.home / "bin" / "jlink.exe"

    @property
    def jpackage(self) -> Path:
        return self.home / "bin" / "jpackage.exe"

    @property
    def module_repository(self) -> Path:
        return self.home / "jmods"

    def require_jlink(self) -> Path:
        if not self.jlink.is_file():
            raise ConfigurationError.missing("jlink.exe", self.jlink)
        return self.jlink

    def require_module_repository(self) -> Path:
        if not self.module_repository.is_dir():
            raise ConfigurationError.missing("JDK jmods folder", self.module_repository)
        return self.module_repository

    def require_jpackage(self) -> Path:
        if not self.jpackage.is_file():
            raise ConfigurationError.missing("jpackage.exe", self.jpackage)
        return self.jpackage


def resolve_toolchain(
    configured: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Toolchain:
    """Return the toolchain from config, falling back to environment variables."""
    if configured is not None:
        return Toolchain(home=configured)
    env = os.environ if environ is None else environ
    for key in ENV_HOME_KEYS:
        value = env.get(key)
        if value:
            return Toolchain(home=Path(value).expanduser())
    raise ConfigurationError(
        "Toolchain home is not configured. Set toolchain.home in .runtimepack.yml "
        f"or one of: {', '.join(ENV_HOME_KEYS)}",
        resource="toolchain home",
    )


__all__ = ["ENV_HOME_KEYS", "Toolchain", "resolve_toolchain"]
