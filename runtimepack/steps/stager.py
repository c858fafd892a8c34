"""Copies the application artifact and its dependencies into a flat staging directory."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from ..errors import ConfigurationError, StagingError
from ..logging import get_logger
from ..models import ArtifactSet

Copier = Callable[[Path, Path], object]


@dataclass
class StageResult:
    """Location of the staged files and the artifact set as staged."""

    directory: Path
    staged: ArtifactSet


class ArtifactStager:
    """Regenerates the staging directory from the current artifact set.

    Files are copied into a sibling ``.partial`` directory which replaces the
    destination only once every copy succeeded. A failed run therefore leaves
    no partially staged destination behind.
    """

    def __init__(self, copier: Copier | None = None) -> None:
        self._copy = copier or shutil.copy2
        self.logger = get_logger("stager")

    def stage(self, artifacts: ArtifactSet, destination: Path) -> StageResult:
        artifacts.validate_names()
        files = artifacts.files()
        for source in files:
            if not source.is_file():
                raise ConfigurationError.missing("Artifact", source)

        work_dir = destination.with_name(destination.name + ".partial")
        try:
            if work_dir.exists():
                shutil.rmtree(work_dir)
            work_dir.mkdir(parents=True)
        except OSError as exc:
            raise StagingError(f"Unable to prepare staging directory {work_dir}: {exc}") from exc

        for source in files:
            try:
                self._copy(source, work_dir / source.name)
            except OSError as exc:
                shutil.rmtree(work_dir, ignore_errors=True)
                raise StagingError(f"Failed to stage {source}: {exc}") from exc
            self.logger.debug("Staged %s", source.name)

        try:
            if destination.exists():
                shutil.rmtree(destination)
            work_dir.rename(destination)
        except OSError as exc:
            shutil.rmtree(work_dir, ignore_errors=True)
            raise StagingError(f"Unable to replace staging directory {destination}: {exc}") from exc

        self.logger.info("Staged %d files into %s", len(files), destination)
        return StageResult(directory=destination, staged=artifacts.rebased(destination))


__all__ = ["ArtifactStager", "StageResult"]
