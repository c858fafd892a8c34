"""Pipeline orchestration for stage, synthesize-runtime and build-installer flows."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .config import PackagingConfig
from .errors import ConfigurationError, PipelineError, PipelineFailure
from .layout import BuildLayout
from .logging import get_logger
from .models import ArtifactSet, PipelineOutcome, PipelineState, Step
from .steps import ArtifactStager, InstallerBuilder, RuntimeImageSynthesizer
from .toolchain import Toolchain, resolve_toolchain

_TRANSITIONS: Dict[Step, Tuple[PipelineState, PipelineState]] = {
    Step.STAGE: (PipelineState.NOT_STARTED, PipelineState.STAGED),
    Step.SYNTHESIZE_RUNTIME: (PipelineState.STAGED, PipelineState.RUNTIME_IMAGE_READY),
    Step.BUILD_INSTALLER: (PipelineState.RUNTIME_IMAGE_READY, PipelineState.INSTALLER_BUILT),
}


class PackagingPipeline:
    """Coordinates the packaging steps for one build root.

    Steps run strictly in order and each run starts from ``NOT_STARTED``.
    The first failing step moves the pipeline to ``FAILED`` and is raised as
    ``PipelineFailure``; nothing is retried.
    """

    def __init__(
        self,
        config: PackagingConfig,
        *,
        artifacts: ArtifactSet | None = None,
        toolchain: Toolchain | None = None,
        stager: ArtifactStager | None = None,
        synthesizer: RuntimeImageSynthesizer | None = None,
        installer: InstallerBuilder | None = None,
        host: str | None = None,
    ) -> None:
        self.config = config
        self.layout = BuildLayout(config.build_root)
        self._artifacts = artifacts
        self._toolchain = toolchain
        self.stager = stager or ArtifactStager()
        self.synthesizer = synthesizer or RuntimeImageSynthesizer(config.runtime, host=host)
        self.installer = installer or InstallerBuilder(
            config.installer,
            tool_path=config.toolchain.installer_tool_path,
            host=host,
        )
        self.state = PipelineState.NOT_STARTED
        self.logger = get_logger("orchestrator")

    def stage(self) -> PipelineOutcome:
        return self.run(Step.STAGE)

    def synthesize_runtime(self) -> PipelineOutcome:
        return self.run(Step.SYNTHESIZE_RUNTIME)

    def build_installer(self) -> PipelineOutcome:
        return self.run(Step.BUILD_INSTALLER)

    def run(self, target: Step | str = Step.BUILD_INSTALLER) -> PipelineOutcome:
        """Run ``target`` and every step it depends on."""
        target = Step(target)
        self.state = PipelineState.NOT_STARTED
        outcome = PipelineOutcome(state=self.state)
        self.logger.info("Starting pipeline for target %s (build root %s)", target.value, self.layout.root)

        for step in target.with_predecessors():
            reached = self._check_transition(step)
            self.logger.info("Running %s", step.value)
            try:
                self._execute(step, outcome)
            except (PipelineError, OSError) as exc:
                cause = exc if isinstance(exc, PipelineError) else PipelineError(str(exc))
                self.state = PipelineState.FAILED
                outcome.state = self.state
                self.logger.error("%s failed: %s", step.value, cause)
                raise PipelineFailure(step.value, cause) from exc
            self.state = reached
            outcome.completed.append(step)

        outcome.state = self.state
        self.logger.info("Pipeline reached %s", self.state.value)
        return outcome

    def clean(self, *, runtime_only: bool = False) -> List[Path]:
        """Delete persisted pipeline directories and return the removed paths.

        With ``runtime_only`` only the current version's runtime image is
        removed, forcing the next run to synthesize it again.
        """
        if runtime_only:
            version = self.config.require_metadata().version
            targets = [self.layout.runtime_image(version)]
        else:
            targets = self.layout.owned_dirs()

        removed: List[Path] = []
        for target in targets:
            if target.exists():
                shutil.rmtree(target)
                removed.append(target)
                self.logger.info("Removed %s", target)
        return removed

    # ------------------------------------------------------------------
    # Steps

    def _execute(self, step: Step, outcome: PipelineOutcome) -> None:
        if step is Step.STAGE:
            self._run_stage(outcome)
        elif step is Step.SYNTHESIZE_RUNTIME:
            self._run_synthesis(outcome)
        else:
            self._run_installer(outcome)

    def _run_stage(self, outcome: PipelineOutcome) -> None:
        result = self.stager.stage(self._resolve_artifacts(), self.layout.staging_dir)
        outcome.staged = result.staged
        outcome.staging_dir = result.directory

    def _run_synthesis(self, outcome: PipelineOutcome) -> None:
        staged = self._require_staged(outcome)
        version = self.config.require_metadata().version
        result = self.synthesizer.synthesize(
            self._resolve_toolchain(),
            staged,
            self.layout.runtime_image(version),
        )
        outcome.runtime_image = result.output_dir
        outcome.runtime_skipped = result.skipped

    def _run_installer(self, outcome: PipelineOutcome) -> None:
        staged = self._require_staged(outcome)
        if Step.SYNTHESIZE_RUNTIME not in outcome.completed or outcome.runtime_image is None:
            raise PipelineError("Runtime image has not been synthesized in this run")
        result = self.installer.build(
            self._resolve_toolchain(),
            staged,
            outcome.runtime_image,
            self.config.require_metadata(),
            self.layout.installer_dir,
        )
        outcome.installer_dir = result.destination

    # ------------------------------------------------------------------
    # Helpers

    def _check_transition(self, step: Step) -> PipelineState:
        """Return the state reached by ``step``; it must start from its expected state."""
        expected, reached = _TRANSITIONS[step]
        if self.state is not expected:
            raise PipelineError(f"Cannot run {step.value} from state {self.state.value}")
        return reached

    @staticmethod
    def _require_staged(outcome: PipelineOutcome) -> ArtifactSet:
        if Step.STAGE not in outcome.completed or outcome.staged is None:
            raise PipelineError("Artifacts have not been staged in this run")
        return outcome.staged

    def _resolve_artifacts(self) -> ArtifactSet:
        if self._artifacts is not None:
            return self._artifacts
        artifacts = self.config.artifacts
        if artifacts.main is None:
            raise ConfigurationError(
                "No main artifact configured. Set artifacts.main or pass --main-artifact.",
                resource="main artifact",
            )
        return ArtifactSet(main=artifacts.main, dependencies=tuple(artifacts.dependencies))

    def _resolve_toolchain(self) -> Toolchain:
        if self._toolchain is None:
            self._toolchain = resolve_toolchain(self.config.toolchain.home)
        return self._toolchain


__all__ = ["PackagingPipeline"]
