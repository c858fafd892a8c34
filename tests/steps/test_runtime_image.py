"""Tests for runtime image synthesis."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from runtimepack.config import RuntimeConfig
from runtimepack.errors import ConfigurationError, SubprocessFailure, UnsupportedPlatformError
from runtimepack.steps import RuntimeImageSynthesizer, module_name_for
from tests._fixtures.workspace import RecordingRunner


def _synthesizer(runner: RecordingRunner, **settings) -> RuntimeImageSynthesizer:
    return RuntimeImageSynthesizer(RuntimeConfig(**settings), runner=runner, host="win32")


@pytest.mark.parametrize(
    "name, expected",
    [
        ("javafx-controls-21-win.jar", "javafx.controls"),
        ("javafx-base-21.jar", "javafx.base"),
        ("JAVAFX-GRAPHICS-21-WIN.JAR", "JAVAFX.GRAPHICS"),
        ("javafx-swing.jar", "javafx.swing"),
    ],
)
def test_module_name_for_drops_version_and_classifier(name: str, expected: str) -> None:
    assert module_name_for(name) == expected


def test_synthesize_invokes_jlink_with_expected_arguments(workspace, recording_runner) -> None:
    toolchain = workspace.jdk()
    staged = workspace.artifacts()
    output_dir = workspace.root / "build" / "runtime" / "1.0.0"

    result = _synthesizer(recording_runner).synthesize(toolchain, staged, output_dir)

    assert result.skipped is False
    assert recording_runner.tools() == ["jlink"]
    args = recording_runner.calls[0]["args"]
    assert args[:5] == [
        str(toolchain.jlink),
        "--strip-debug",
        "--no-header-files",
        "--no-man-pages",
        "--compress=2",
    ]
    module_path = args[args.index("--module-path") + 1].split(os.pathsep)
    assert module_path[0] == str(toolchain.module_repository)
    assert [Path(entry).name for entry in module_path[1:]] == [
        "javafx-base-21-win.jar",
        "javafx-controls-21-win.jar",
        "javafx-graphics-21-win.jar",
    ]
    assert args[args.index("--add-modules") + 1] == (
        "java.base,java.desktop,java.logging,java.sql,java.naming,"
        "javafx.base,javafx.graphics,javafx.controls"
    )
    assert args[-2:] == ["--output", str(output_dir)]


def test_module_list_is_superset_union_discovered(workspace, recording_runner) -> None:
    toolchain = workspace.jdk()
    staged = workspace.artifacts(["ui-framework-base.jar", "ui-framework-controls.jar"])
    synthesizer = _synthesizer(
        recording_runner,
        modules=["core", "io", "net"],
        base_module="core",
        framework_pattern="ui-framework-*.jar",
        framework_module_separator="-",
    )

    result = synthesizer.synthesize(toolchain, staged, workspace.root / "runtime" / "1.0.0")

    assert result.modules is not None
    assert result.modules.names == (
        "core",
        "io",
        "net",
        "ui-framework-base",
        "ui-framework-controls",
    )


def test_existing_output_is_skipped_without_invoking_jlink(workspace, recording_runner) -> None:
    toolchain = workspace.jdk()
    staged = workspace.artifacts()
    output_dir = workspace.root / "runtime" / "1.0.0"
    marker = output_dir / "release"
    marker.parent.mkdir(parents=True)
    marker.write_text("JAVA_VERSION=17", encoding="utf-8")

    result = _synthesizer(recording_runner).synthesize(toolchain, staged, output_dir)

    assert result.skipped is True
    assert recording_runner.calls == []
    assert [path.name for path in output_dir.iterdir()] == ["release"]


def test_missing_jlink_fails_before_creating_runtime_dirs(workspace, recording_runner) -> None:
    toolchain = workspace.jdk(jlink=False)
    staged = workspace.artifacts()
    runtime_root = workspace.root / "build" / "runtime"

    with pytest.raises(ConfigurationError, match="jlink.exe not found"):
        _synthesizer(recording_runner).synthesize(toolchain, staged, runtime_root / "1.0.0")

    assert not runtime_root.exists()
    assert recording_runner.calls == []


def test_missing_module_repository_is_reported(workspace, recording_runner) -> None:
    toolchain = workspace.jdk(jmods=False)

    with pytest.raises(ConfigurationError) as excinfo:
        _synthesizer(recording_runner).synthesize(
            toolchain, workspace.artifacts(), workspace.root / "runtime" / "1.0.0"
        )

    assert excinfo.value.path == toolchain.module_repository


def test_no_framework_artifacts_is_configuration_error(workspace, recording_runner) -> None:
    toolchain = workspace.jdk()
    staged = workspace.artifacts(["gson-2.11.0.jar"])

    with pytest.raises(ConfigurationError, match="javafx-\\*.jar"):
        _synthesizer(recording_runner).synthesize(
            toolchain, staged, workspace.root / "runtime" / "1.0.0"
        )


def test_jlink_failure_surfaces_exit_code(workspace) -> None:
    runner = RecordingRunner(exit_codes={"jlink": 2})

    with pytest.raises(SubprocessFailure) as excinfo:
        _synthesizer(runner).synthesize(
            workspace.jdk(), workspace.artifacts(), workspace.root / "runtime" / "1.0.0"
        )

    assert excinfo.value.exit_code == 2


def test_non_windows_host_is_refused(workspace, recording_runner) -> None:
    synthesizer = RuntimeImageSynthesizer(runner=recording_runner, host="linux")

    with pytest.raises(UnsupportedPlatformError, match="Windows-only"):
        synthesizer.synthesize(
            workspace.jdk(), workspace.artifacts(), workspace.root / "runtime" / "1.0.0"
        )

    assert recording_runner.calls == []
