"""Directory layout persisted under the build root."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List


@dataclass(frozen=True)
class BuildLayout:
    """Paths the pipeline owns; safe to delete, unsafe to hand-edit."""

    root: Path

    @property
    def staging_dir(self) -> Path:
        return self.root / "jpackage" / "input"

    @property
    def runtime_root(self) -> Path:
        return self.root / "runtime"

    def runtime_image(self, version: str) -> Path:
        """Return the version-qualified runtime image directory."""
        return self.runtime_root / version

    @property
    def installer_dir(self) -> Path:
        return self.root / "installer"

    def owned_dirs(self) -> List[Path]:
        return [self.root / "jpackage", self.runtime_root, self.installer_dir]


__all__ = ["BuildLayout"]
