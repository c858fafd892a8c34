"""Configuration loading for runtimepack (.runtimepack.yml)."""

from __future__ import annotations

import glob
import re
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigurationError
from .models import DEFAULT_LAUNCH_OPTIONS, PackagingMetadata

CONFIG_FILENAME = ".runtimepack.yml"

DEFAULT_MODULES: tuple[str, ...] = (
    "java.base",
    "java.desktop",
    "java.logging",
    "java.sql",
    "java.naming",
    "javafx.base",
    "javafx.graphics",
    "javafx.controls",
)

_VERSION_PATTERN = re.compile(r"^\d+(\.\d+){0,2}$")
_GLOB_CHARS = ("*", "?", "[")


class ConfigError(ConfigurationError):
    """Raised when the configuration file cannot be parsed or is invalid."""


@dataclass
class ToolchainConfig:
    """Toolchain location and the auxiliary installer tool directory."""

    home: Optional[Path] = None
    installer_tool_path: Optional[Path] = None


@dataclass
class ArtifactsConfig:
    """Build output artifact and the resolved dependency files."""

    main: Optional[Path] = None
    dependencies: List[Path] = field(default_factory=list)


@dataclass
class RuntimeConfig:
    """Module selection for the synthesized runtime image."""

    modules: List[str] = field(default_factory=lambda: list(DEFAULT_MODULES))
    base_module: str = "java.base"
    framework_pattern: str = "javafx-*.jar"
    framework_module_separator: str = "."


@dataclass
class InstallerConfig:
    """Windows integration switches passed to the installer generator."""

    menu: bool = True
    shortcut: bool = True
    dir_chooser: bool = True
    per_user_install: bool = True


@dataclass
class PackagingConfig:
    """Represents the settings defined in .runtimepack.yml."""

    root: Path
    build_root: Path
    metadata: Optional[PackagingMetadata] = None
    toolchain: ToolchainConfig = field(default_factory=ToolchainConfig)
    artifacts: ArtifactsConfig = field(default_factory=ArtifactsConfig)
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    installer: InstallerConfig = field(default_factory=InstallerConfig)

    def require_metadata(self) -> PackagingMetadata:
        if self.metadata is None:
            raise ConfigError(
                f"{CONFIG_FILENAME} must define an 'app' section with packaging metadata",
                resource="app",
                path=self.root / CONFIG_FILENAME,
            )
        return self.metadata


def load_config(config_path: Path) -> PackagingConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return PackagingConfig(root=root, build_root=root / "build")

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    build_root = _as_path(data.get("build_root"), root) or root / "build"

    toolchain_data = _as_dict(data.get("toolchain"))
    toolchain = ToolchainConfig(
        home=_as_path(toolchain_data.get("home"), root),
        installer_tool_path=_as_path(toolchain_data.get("installer_tool_path"), root),
    )

    artifacts_data = _as_dict(data.get("artifacts"))
    artifacts = ArtifactsConfig(
        main=_as_path(artifacts_data.get("main"), root),
        dependencies=_expand_paths(_as_str_list(artifacts_data.get("dependencies")), root),
    )

    runtime = RuntimeConfig()
    runtime_data = _as_dict(data.get("runtime"))
    if "modules" in runtime_data:
        runtime.modules = _as_str_list(runtime_data.get("modules"))
    runtime.base_module = _as_str(runtime_data.get("base_module")) or runtime.base_module
    runtime.framework_pattern = (
        _as_str(runtime_data.get("framework_pattern")) or runtime.framework_pattern
    )
    separator = _as_str(runtime_data.get("framework_module_separator"))
    if separator is not None:
        runtime.framework_module_separator = separator

    installer = InstallerConfig()
    installer_data = _as_dict(data.get("installer"))
    for flag in ("menu", "shortcut", "dir_chooser", "per_user_install"):
        value = _as_bool(installer_data.get(flag))
        if value is not None:
            setattr(installer, flag, value)

    app_data = _as_dict(data.get("app"))
    metadata = _parse_metadata(app_data, root) if app_data else None

    return PackagingConfig(
        root=root,
        build_root=build_root,
        metadata=metadata,
        toolchain=toolchain,
        artifacts=artifacts,
        runtime=runtime,
        installer=installer,
    )


def _parse_metadata(app_data: Dict[str, Any], root: Path) -> PackagingMetadata:
    raw_version = app_data.get("version")
    if raw_version is not None and not isinstance(raw_version, str):
        # YAML reads an unquoted 1.10 as the float 1.1.
        raise ConfigError("app.version must be a quoted string", resource="app.version")

    required = {}
    for key in ("name", "vendor", "main_class", "version", "icon", "upgrade_uuid"):
        value = _as_str(app_data.get(key))
        if not value:
            raise ConfigError(f"app.{key} is required in {CONFIG_FILENAME}", resource=f"app.{key}")
        required[key] = value

    version = required["version"]
    if not _VERSION_PATTERN.match(version):
        raise ConfigError(
            f"app.version '{version}' must be one to three dot-separated integers",
            resource="app.version",
        )

    try:
        upgrade_uuid = str(uuid.UUID(required["upgrade_uuid"]))
    except ValueError as exc:
        raise ConfigError(
            f"app.upgrade_uuid '{required['upgrade_uuid']}' is not a valid UUID",
            resource="app.upgrade_uuid",
        ) from exc

    raw_options = app_data.get("launch_options")
    if raw_options is None:
        launch_options = DEFAULT_LAUNCH_OPTIONS
    elif isinstance(raw_options, str):
        launch_options = tuple(raw_options.split())
    else:
        launch_options = tuple(_as_str_list(raw_options))
    if not launch_options:
        raise ConfigError(
            "app.launch_options must list at least one option; omit it to use the defaults",
            resource="app.launch_options",
        )

    return PackagingMetadata(
        name=required["name"],
        vendor=required["vendor"],
        main_class=required["main_class"],
        version=version,
        icon=root / required["icon"],
        upgrade_uuid=upgrade_uuid,
        launch_options=launch_options,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}", path=path) from exc
    return loaded or {}


def _expand_paths(patterns: Sequence[str], root: Path) -> List[Path]:
    paths: List[Path] = []
    for pattern in patterns:
        candidate = root / pattern
        if any(char in pattern for char in _GLOB_CHARS):
            matches = sorted(Path(match) for match in glob.glob(str(candidate)))
            paths.extend(match for match in matches if match.is_file())
        else:
            paths.append(candidate)
    return paths


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_path(value: Any, root: Path) -> Optional[Path]:
    text = _as_str(value)
    if not text:
        return None
    return root / Path(text).expanduser()


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_MODULES",
    "ArtifactsConfig",
    "ConfigError",
    "InstallerConfig",
    "PackagingConfig",
    "RuntimeConfig",
    "ToolchainConfig",
    "load_config",
]
