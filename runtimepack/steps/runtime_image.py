"""Synthesizes a minimal runtime image with jlink."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from ..capabilities import require_windows
from ..config import RuntimeConfig
from ..errors import ConfigurationError
from ..logging import get_logger
from ..models import ArtifactSet, ModuleSet, Step
from ..process import ProcessRunner
from ..toolchain import Toolchain


@dataclass
class SynthesisResult:
    """Outcome of a synthesis request; ``skipped`` marks an existing image."""

    output_dir: Path
    skipped: bool
    modules: Optional[ModuleSet] = None
    command: List[str] = field(default_factory=list)


def module_name_for(file_name: str, separator: str = ".") -> str:
    """Derive a module name from a framework JAR name.

    The version and platform classifier tail is dropped, so
    ``javafx-controls-21-win.jar`` becomes ``javafx.controls``.
    """
    stem = file_name[:-4] if file_name.lower().endswith(".jar") else file_name
    parts: List[str] = []
    for part in stem.split("-"):
        if part[:1].isdigit():
            break
        parts.append(part)
    return separator.join(parts or [stem])


class RuntimeImageSynthesizer:
    """Builds the runtime image once per version; an existing image is left untouched."""

    def __init__(
        self,
        settings: RuntimeConfig | None = None,
        *,
        runner: ProcessRunner | None = None,
        host: str | None = None,
    ) -> None:
        self.settings = settings or RuntimeConfig()
        self.runner = runner or ProcessRunner()
        self.host = host
        self.logger = get_logger("runtime_image")

    def synthesize(
        self, toolchain: Toolchain, staged: ArtifactSet, output_dir: Path
    ) -> SynthesisResult:
        require_windows(Step.SYNTHESIZE_RUNTIME.value, self.host)
        jlink = toolchain.require_jlink()
        jmods = toolchain.require_module_repository()

        framework_jars = staged.matching(self.settings.framework_pattern)
        if not framework_jars:
            raise ConfigurationError(
                f"No framework artifacts matching '{self.settings.framework_pattern}' "
                f"found in {staged.main.parent}",
                resource="framework artifacts",
                path=staged.main.parent,
            )

        # jlink refuses to write into an existing directory.
        if output_dir.exists():
            self.logger.info("Runtime image already exists, skipping: %s", output_dir)
            return SynthesisResult(output_dir=output_dir, skipped=True)

        modules = self.module_set(framework_jars)
        module_path = os.pathsep.join([str(jmods)] + [str(jar) for jar in framework_jars])
        command = self.build_command(jlink, module_path, modules, output_dir)

        self.logger.info("Framework artifacts: %s", ", ".join(jar.name for jar in framework_jars))
        output_dir.parent.mkdir(parents=True, exist_ok=True)
        self.runner.run_checked("jlink", command)
        self.logger.info("Runtime image created at %s", output_dir)
        return SynthesisResult(
            output_dir=output_dir, skipped=False, modules=modules, command=command
        )

    def module_set(self, framework_jars: Sequence[Path]) -> ModuleSet:
        """Return the configured superset followed by modules discovered from JAR names."""
        separator = self.settings.framework_module_separator
        discovered = [module_name_for(jar.name, separator) for jar in framework_jars]
        return ModuleSet.build(self.settings.modules, discovered).require(
            self.settings.base_module
        )

    @staticmethod
    def build_command(
        jlink: Path, module_path: str, modules: ModuleSet, output_dir: Path
    ) -> List[str]:
        return [
            str(jlink),
            "--strip-debug",
            "--no-header-files",
            "--no-man-pages",
            "--compress=2",
            "--module-path",
            module_path,
            "--add-modules",
            modules.as_argument(),
            "--output",
            str(output_dir),
        ]


__all__ = ["RuntimeImageSynthesizer", "SynthesisResult", "module_name_for"]
