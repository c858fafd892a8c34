"""Builds the native MSI installer with jpackage."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional

from ..capabilities import require_windows
from ..config import InstallerConfig
from ..errors import ConfigurationError
from ..logging import get_logger
from ..models import ArtifactSet, PackagingMetadata, Step
from ..process import ProcessRunner
from ..toolchain import Toolchain

INSTALLER_TYPE = "msi"


@dataclass
class InstallerResult:
    destination: Path
    command: List[str] = field(default_factory=list)


class InstallerBuilder:
    """Invokes jpackage with the staged payload and the bundled runtime image."""

    def __init__(
        self,
        settings: InstallerConfig | None = None,
        *,
        tool_path: Optional[Path] = None,
        runner: ProcessRunner | None = None,
        host: str | None = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.settings = settings or InstallerConfig()
        self.tool_path = tool_path
        self.runner = runner or ProcessRunner()
        self.host = host
        self._environ = environ
        self.logger = get_logger("installer")

    def build(
        self,
        toolchain: Toolchain,
        staged: ArtifactSet,
        runtime_image: Path,
        metadata: PackagingMetadata,
        destination: Path,
    ) -> InstallerResult:
        require_windows(Step.BUILD_INSTALLER.value, self.host)
        if not metadata.icon.is_file():
            raise ConfigurationError.missing("Icon", metadata.icon)
        jpackage = toolchain.require_jpackage()

        destination.mkdir(parents=True, exist_ok=True)

        command = self.build_command(jpackage, staged, runtime_image, metadata, destination)
        self.runner.run_checked("jpackage", command, env=self.build_environment())
        self.logger.info("Installer written to %s", destination)
        return InstallerResult(destination=destination, command=command)

    def build_command(
        self,
        jpackage: Path,
        staged: ArtifactSet,
        runtime_image: Path,
        metadata: PackagingMetadata,
        destination: Path,
    ) -> List[str]:
        # fmt: off
        command = [
            str(jpackage),
            "--type", INSTALLER_TYPE,
            "--name", metadata.name,
            "--vendor", metadata.vendor,
            "--app-version", metadata.version,
            "--input", str(staged.main.parent),
            "--main-jar", staged.main.name,
            "--main-class", metadata.main_class,
            "--runtime-image", str(runtime_image),
            "--icon", str(metadata.icon),
        ]
        # fmt: on

        if self.settings.menu:
            command.append("--win-menu")
        if self.settings.shortcut:
            command.append("--win-shortcut")
        if self.settings.dir_chooser:
            command.append("--win-dir-chooser")
        if self.settings.per_user_install:
            command.append("--win-per-user-install")
        command.extend(["--win-upgrade-uuid", metadata.upgrade_uuid])

        for option in metadata.launch_options:
            command.extend(["--java-options", option])

        command.extend(["--dest", str(destination)])
        return command

    def build_environment(self) -> Dict[str, str]:
        """Return the inherited environment with the installer tool directory prepended to PATH."""
        env = dict(os.environ if self._environ is None else self._environ)
        if self.tool_path is None:
            return env
        key = next((name for name in env if name.upper() == "PATH"), "PATH")
        inherited = env.get(key, "")
        env[key] = str(self.tool_path) + os.pathsep + inherited if inherited else str(self.tool_path)
        return env


__all__ = ["INSTALLER_TYPE", "InstallerBuilder", "InstallerResult"]
