"""Core data models shared across runtimepack components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from fnmatch import fnmatch
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from .errors import ConfigurationError

DEFAULT_LAUNCH_OPTIONS: Tuple[str, ...] = (
    "-Xms64m",
    "-Xmx512m",
    "-Xss512k",
    "-Dfile.encoding=UTF-8",
)


class Step(str, Enum):
    """Pipeline steps in dependency order; values double as CLI command names."""

    STAGE = "stage"
    SYNTHESIZE_RUNTIME = "synthesize-runtime"
    BUILD_INSTALLER = "build-installer"

    @classmethod
    def ordered(cls) -> List["Step"]:
        return [cls.STAGE, cls.SYNTHESIZE_RUNTIME, cls.BUILD_INSTALLER]

    def with_predecessors(self) -> List["Step"]:
        """Return this step preceded by every step it depends on."""
        ordered = Step.ordered()
        return ordered[: ordered.index(self) + 1]


class PipelineState(str, Enum):
    NOT_STARTED = "not-started"
    STAGED = "staged"
    RUNTIME_IMAGE_READY = "runtime-image-ready"
    INSTALLER_BUILT = "installer-built"
    FAILED = "failed"


@dataclass(frozen=True)
class ArtifactSet:
    """The application's main artifact plus its runtime dependency files."""

    main: Path
    dependencies: Tuple[Path, ...] = ()

    def files(self) -> List[Path]:
        """Return the main artifact followed by distinct dependency paths."""
        seen = {self.main}
        result = [self.main]
        for dependency in self.dependencies:
            if dependency in seen:
                continue
            seen.add(dependency)
            result.append(dependency)
        return result

    def validate_names(self) -> None:
        """Fail when two distinct files would land on the same staged name."""
        owners: Dict[str, Path] = {}
        for path in self.files():
            # Windows file names are case-insensitive.
            key = path.name.lower()
            previous = owners.get(key)
            if previous is not None:
                raise ConfigurationError(
                    f"Artifact name collision for '{path.name}': {previous} and {path}",
                    resource="artifact set",
                    path=path,
                )
            owners[key] = path

    def matching(self, pattern: str) -> List[Path]:
        """Return files whose names match a case-insensitive glob pattern."""
        lowered = pattern.lower()
        return [path for path in self.files() if fnmatch(path.name.lower(), lowered)]

    def rebased(self, directory: Path) -> "ArtifactSet":
        """Return the same set as it appears after flat staging into ``directory``."""
        files = self.files()
        return ArtifactSet(
            main=directory / files[0].name,
            dependencies=tuple(directory / path.name for path in files[1:]),
        )


@dataclass(frozen=True)
class ModuleSet:
    """Ordered, de-duplicated module names for the runtime image."""

    names: Tuple[str, ...]

    @classmethod
    def build(cls, *groups: Iterable[str]) -> "ModuleSet":
        ordered: List[str] = []
        for group in groups:
            for name in group:
                cleaned = name.strip()
                if cleaned and cleaned not in ordered:
                    ordered.append(cleaned)
        return cls(names=tuple(ordered))

    def require(self, base_module: str) -> "ModuleSet":
        if not self.names:
            raise ConfigurationError("Runtime module list is empty", resource="modules")
        if base_module not in self.names:
            raise ConfigurationError(
                f"Runtime module list must include the base module '{base_module}'",
                resource="modules",
            )
        return self

    def as_argument(self) -> str:
        return ",".join(self.names)


@dataclass(frozen=True)
class PackagingMetadata:
    """Descriptive installer fields; read-only for the duration of a run."""

    name: str
    vendor: str
    main_class: str
    version: str
    icon: Path
    upgrade_uuid: str
    launch_options: Tuple[str, ...] = DEFAULT_LAUNCH_OPTIONS


@dataclass
class PipelineOutcome:
    """Summary of a pipeline run."""

    state: PipelineState
    completed: List[Step] = field(default_factory=list)
    staged: Optional[ArtifactSet] = None
    staging_dir: Optional[Path] = None
    runtime_image: Optional[Path] = None
    runtime_skipped: bool = False
    installer_dir: Optional[Path] = None


__all__ = [
    "DEFAULT_LAUNCH_OPTIONS",
    "ArtifactSet",
    "ModuleSet",
    "PackagingMetadata",
    "PipelineOutcome",
    "PipelineState",
    "Step",
]
