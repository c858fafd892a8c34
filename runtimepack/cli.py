"""CLI entrypoints for runtimepack commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import CONFIG_FILENAME, ConfigError, load_config
from .errors import PipelineError, PipelineFailure
from .logging import configure_logging
from .models import PipelineOutcome, Step
from .orchestrator import PackagingPipeline


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_artifact_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--main-artifact",
        type=Path,
        help="Application JAR to package (overrides artifacts.main).",
    )
    parser.add_argument(
        "--dependency",
        type=Path,
        action="append",
        default=None,
        help="Runtime dependency file; repeat for each file (overrides artifacts.dependencies).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="runtimepack",
        description="Stage artifacts, build a minimal runtime image and package an MSI installer.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--config",
        type=Path,
        default=Path("."),
        help=f"Path to {CONFIG_FILENAME} or its directory (defaults to current directory).",
    )
    parser.add_argument(
        "--build-root",
        type=Path,
        help="Override the build root holding staged files, runtime images and installers.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    stage_parser = subparsers.add_parser(
        Step.STAGE.value,
        help="Copy the application artifact and dependencies into the staging directory.",
    )
    _add_verbose_option(stage_parser, suppress_default=True)
    _add_artifact_options(stage_parser)

    runtime_parser = subparsers.add_parser(
        Step.SYNTHESIZE_RUNTIME.value,
        help="Stage, then create the bundled runtime image with jlink.",
    )
    _add_verbose_option(runtime_parser, suppress_default=True)
    _add_artifact_options(runtime_parser)

    installer_parser = subparsers.add_parser(
        Step.BUILD_INSTALLER.value,
        help="Stage, create the runtime image, then build the MSI with jpackage.",
    )
    _add_verbose_option(installer_parser, suppress_default=True)
    _add_artifact_options(installer_parser)

    clean_parser = subparsers.add_parser(
        "clean",
        help="Delete staged files, runtime images and installers.",
    )
    _add_verbose_option(clean_parser, suppress_default=True)
    clean_parser.add_argument(
        "--runtime-only",
        action="store_true",
        help="Only delete the runtime image for the configured version.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for runtimepack commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    try:
        config = load_config(args.config)
    except ConfigError as exc:
        parser.exit(exc.exit_code, f"{exc}\n")

    if args.build_root is not None:
        config.build_root = args.build_root.expanduser().resolve()
    if getattr(args, "main_artifact", None) is not None:
        config.artifacts.main = args.main_artifact.expanduser().resolve()
    if getattr(args, "dependency", None):
        config.artifacts.dependencies = [path.expanduser().resolve() for path in args.dependency]

    pipeline = PackagingPipeline(config)

    if args.command == "clean":
        try:
            removed = pipeline.clean(runtime_only=bool(args.runtime_only))
        except (PipelineError, OSError) as exc:
            code = exc.exit_code if isinstance(exc, PipelineError) else 1
            parser.exit(code, f"runtimepack clean failed: {exc}\n")
        if not removed:
            print("Nothing to clean")
        for path in removed:
            print(f"Removed {_relativize(path)}")
        return

    try:
        outcome = pipeline.run(Step(args.command))
    except PipelineFailure as exc:
        parser.exit(
            exc.exit_code,
            f"runtimepack {args.command} failed at {exc.step}: {exc.cause}\n"
            "Run with --verbose for more details.\n",
        )
    _print_summary(outcome)


def _print_summary(outcome: PipelineOutcome) -> None:
    if outcome.staging_dir is not None:
        print(f"Artifacts staged at {_relativize(outcome.staging_dir)}")
    if outcome.runtime_image is not None:
        suffix = " (existing image reused)" if outcome.runtime_skipped else ""
        print(f"Runtime image ready at {_relativize(outcome.runtime_image)}{suffix}")
    if outcome.installer_dir is not None:
        print(f"Installer written to {_relativize(outcome.installer_dir)}")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
