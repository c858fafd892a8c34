"""Tests for artifact and module models."""

from __future__ import annotations

from pathlib import Path

import pytest

from runtimepack.errors import ConfigurationError
from runtimepack.models import ArtifactSet, ModuleSet, Step


def test_artifact_set_rejects_name_collisions(tmp_path: Path) -> None:
    artifacts = ArtifactSet(
        main=tmp_path / "app.jar",
        dependencies=(tmp_path / "a" / "lib.jar", tmp_path / "b" / "lib.jar"),
    )

    with pytest.raises(ConfigurationError, match="lib.jar"):
        artifacts.validate_names()


def test_artifact_set_ignores_repeated_identical_paths(tmp_path: Path) -> None:
    lib = tmp_path / "lib.jar"
    artifacts = ArtifactSet(main=tmp_path / "app.jar", dependencies=(lib, lib))

    artifacts.validate_names()
    assert artifacts.files() == [tmp_path / "app.jar", lib]


def test_artifact_set_matching_is_case_insensitive(tmp_path: Path) -> None:
    artifacts = ArtifactSet(
        main=tmp_path / "app.jar",
        dependencies=(tmp_path / "JavaFX-base-21.jar", tmp_path / "gson.jar"),
    )

    assert artifacts.matching("javafx-*.jar") == [tmp_path / "JavaFX-base-21.jar"]


def test_rebased_places_files_flat_in_directory(tmp_path: Path) -> None:
    artifacts = ArtifactSet(
        main=tmp_path / "libs" / "app.jar",
        dependencies=(tmp_path / "deps" / "lib.jar",),
    )
    staged = artifacts.rebased(tmp_path / "input")

    assert staged.main == tmp_path / "input" / "app.jar"
    assert staged.dependencies == (tmp_path / "input" / "lib.jar",)


def test_module_set_preserves_order_and_deduplicates() -> None:
    modules = ModuleSet.build(["core", "io", "net"], ["io", "ui-framework-base", " ", "net"])

    assert modules.names == ("core", "io", "net", "ui-framework-base")
    assert modules.as_argument() == "core,io,net,ui-framework-base"


def test_module_set_requires_base_module() -> None:
    with pytest.raises(ConfigurationError, match="base module 'java.base'"):
        ModuleSet.build(["java.sql"]).require("java.base")


def test_module_set_must_not_be_empty() -> None:
    with pytest.raises(ConfigurationError, match="empty"):
        ModuleSet.build([]).require("java.base")


def test_step_predecessors_follow_pipeline_order() -> None:
    assert Step.STAGE.with_predecessors() == [Step.STAGE]
    assert Step.BUILD_INSTALLER.with_predecessors() == [
        Step.STAGE,
        Step.SYNTHESIZE_RUNTIME,
        Step.BUILD_INSTALLER,
    ]


def test_artifact_set_name_collisions_ignore_case(tmp_path: Path) -> None:
    artifacts = ArtifactSet(
        main=tmp_path / "app.jar",
        dependencies=(tmp_path / "a" / "Gson.jar", tmp_path / "b" / "gson.jar"),
    )

    with pytest.raises(ConfigurationError, match="collision"):
        artifacts.validate_names()
