"""Build service module.

This module provides the high-level build API:
- make_images(): Main entry point - check inputs, load, expand and build
- run_tasks(): Sequential render/write/build/deploy of expanded tasks
- render_dockerfiles(): Write Dockerfiles without invoking docker
- Scratch directory lifecycle

Every failure aborts the whole run. Nothing is retried.
"""

from __future__ import annotations

import logging
import shutil
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from swift_docker.builds.runner import (
    CommandExecutionError,
    compose_build_command,
    compose_push_command,
    run_command,
)
from swift_docker.builds.tasks import BuildTask, expand_tasks
from swift_docker.config import get_settings
from swift_docker.errors import (
    BuildScriptsDirMissingError,
    DockerfileWriteError,
    ImageBuildError,
    ImageDeployError,
    ManifestMissingError,
    ScratchDirCreateError,
    TemplateMissingError,
)
from swift_docker.manifest.io import load_manifest
from swift_docker.template import load_template, render
from swift_docker.types import TaskStage

if TYPE_CHECKING:
    from swift_docker.config import Settings
    from swift_docker.manifest.schema import BuildManifest

logger = logging.getLogger(__name__)

StageCallback = Callable[[BuildTask, TaskStage], None]


@dataclass
class TaskOutcome:
    """Final state of one task in a run."""

    task: BuildTask
    stage: TaskStage
    dockerfile_path: Path | None = None


@dataclass
class RunReport:
    """Per-task outcomes of a run, in execution order."""

    deploy: bool
    outcomes: list[TaskOutcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def succeeded(self) -> int:
        return sum(1 for o in self.outcomes if o.stage == TaskStage.DONE)


def prepare_scratch_dir(path: Path) -> None:
    """Delete any leftover scratch directory and create a fresh one.

    Raises:
        ScratchDirCreateError: If the directory cannot be removed or created.
    """
    try:
        if path.exists():
            logger.debug("Removing stale build directory %s", path)
            shutil.rmtree(path)
        path.mkdir(parents=True)
    except OSError as e:
        raise ScratchDirCreateError(path, str(e)) from e


def cleanup_scratch_dir(path: Path) -> None:
    """Remove the scratch directory, ignoring any failure."""
    shutil.rmtree(path, ignore_errors=True)


def dockerfile_path(directory: Path, task: BuildTask) -> Path:
    """Return where the Dockerfile of a task is written in a build directory."""
    return directory / f"Dockerfile-{task.name}"


def write_dockerfile(path: Path, task: BuildTask, content: str) -> Path:
    """Write a rendered Dockerfile.

    Raises:
        DockerfileWriteError: If the file cannot be written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as e:
        raise DockerfileWriteError(path, task.name, str(e)) from e
    return path


def _notify(on_stage: StageCallback | None, task: BuildTask, stage: TaskStage) -> None:
    logger.debug("%s: %s", task.name, stage.value)
    if on_stage is not None:
        on_stage(task, stage)


def build_image(
    task: BuildTask,
    path: Path,
    docker: str = "docker",
    timeout: int | None = None,
) -> None:
    """Build the image of a task from its Dockerfile.

    Raises:
        ImageBuildError: If docker cannot be run or exits non-zero.
    """
    cmd = compose_build_command(task.image_name, path, docker=docker)
    try:
        result = run_command(cmd, timeout=timeout)
    except CommandExecutionError as e:
        raise ImageBuildError(
            task.name, task.image_name, str(e), exit_code=e.exit_code
        ) from e
    if not result.success:
        raise ImageBuildError(
            task.name,
            task.image_name,
            f"docker exited with code {result.exit_code}",
            exit_code=result.exit_code,
            output=result.output,
        )


def push_image(
    task: BuildTask,
    docker: str = "docker",
    timeout: int | None = None,
) -> None:
    """Push the image of a task to its registry.

    Raises:
        ImageDeployError: If docker cannot be run or exits non-zero.
    """
    cmd = compose_push_command(task.image_name, docker=docker)
    try:
        result = run_command(cmd, timeout=timeout)
    except CommandExecutionError as e:
        raise ImageDeployError(
            task.name, task.image_name, str(e), exit_code=e.exit_code
        ) from e
    if not result.success:
        raise ImageDeployError(
            task.name,
            task.image_name,
            f"docker exited with code {result.exit_code}",
            exit_code=result.exit_code,
            output=result.output,
        )


def run_tasks(
    tasks: Sequence[BuildTask],
    template_lines: Sequence[str],
    *,
    deploy: bool = False,
    settings: Settings | None = None,
    on_stage: StageCallback | None = None,
) -> RunReport:
    """Render, write, build and optionally push every task in order.

    The scratch directory is recreated before the first task and removed
    once the run ends, whatever the outcome.

    Args:
        tasks: Expanded build tasks.
        template_lines: Dockerfile template lines.
        deploy: Push each image after building it.
        settings: Application settings; uses default if not provided.
        on_stage: Called each time a task enters a new stage.

    Returns:
        RunReport with one DONE outcome per task.

    Raises:
        ScratchDirCreateError: If the scratch directory cannot be prepared.
        DockerfileWriteError: If a Dockerfile cannot be written.
        ImageBuildError: If a build fails; later tasks are not attempted.
        ImageDeployError: If a push fails; later tasks are not attempted.
    """
    if settings is None:
        settings = get_settings()

    scratch_dir = settings.scratch_dir
    report = RunReport(deploy=deploy)
    prepare_scratch_dir(scratch_dir)

    try:
        for task in tasks:
            outcome = TaskOutcome(task=task, stage=TaskStage.RENDERING)
            report.outcomes.append(outcome)
            try:
                _notify(on_stage, task, TaskStage.RENDERING)
                content = render(template_lines, task.context)

                outcome.stage = TaskStage.WRITING
                _notify(on_stage, task, TaskStage.WRITING)
                outcome.dockerfile_path = write_dockerfile(
                    dockerfile_path(scratch_dir, task), task, content
                )

                outcome.stage = TaskStage.BUILDING
                _notify(on_stage, task, TaskStage.BUILDING)
                build_image(
                    task,
                    outcome.dockerfile_path,
                    docker=settings.docker_binary,
                    timeout=settings.build_timeout,
                )

                if deploy:
                    outcome.stage = TaskStage.DEPLOYING
                    _notify(on_stage, task, TaskStage.DEPLOYING)
                    push_image(
                        task,
                        docker=settings.docker_binary,
                        timeout=settings.push_timeout,
                    )
            except Exception:
                logger.error("Task %s failed while %s", task.name, outcome.stage.value)
                outcome.stage = TaskStage.FAILED
                _notify(on_stage, task, TaskStage.FAILED)
                raise

            outcome.stage = TaskStage.DONE
            _notify(on_stage, task, TaskStage.DONE)
            logger.info("Built %s", task.image_name)
    finally:
        cleanup_scratch_dir(scratch_dir)

    return report


def check_inputs(settings: Settings) -> None:
    """Check that the manifest, template and build scripts directory exist.

    Individual build scripts are not checked.

    Raises:
        ManifestMissingError: If the manifest is absent.
        TemplateMissingError: If the Dockerfile template is absent.
        BuildScriptsDirMissingError: If the scripts directory is absent.
    """
    if not settings.manifest_path.exists():
        raise ManifestMissingError(settings.manifest_path)
    if not settings.template_path.exists():
        raise TemplateMissingError(settings.template_path)
    if not settings.build_scripts_dir.is_dir():
        raise BuildScriptsDirMissingError(settings.build_scripts_dir)


def make_images(
    *,
    deploy: bool = False,
    settings: Settings | None = None,
    on_stage: StageCallback | None = None,
) -> tuple[BuildManifest, RunReport]:
    """Build (and optionally push) every image described by the manifest.

    Args:
        deploy: Push each image after building it.
        settings: Application settings; uses default if not provided.
        on_stage: Called each time a task enters a new stage.

    Returns:
        The loaded manifest and the run report.

    Raises:
        SwiftDockerError: Any error of the taxonomy; the run stops at the
            first one.
    """
    if settings is None:
        settings = get_settings()

    check_inputs(settings)
    manifest = load_manifest(settings.manifest_path)
    template_lines = load_template(settings.template_path)

    tasks = expand_tasks(manifest, owner=settings.owner)
    logger.info(
        "%s %d Docker image(s)",
        "Building and deploying" if deploy else "Building",
        len(tasks),
    )
    report = run_tasks(
        tasks,
        template_lines,
        deploy=deploy,
        settings=settings,
        on_stage=on_stage,
    )
    return manifest, report


def render_dockerfiles(
    tasks: Sequence[BuildTask],
    template_lines: Sequence[str],
    output_dir: Path,
) -> list[Path]:
    """Write `<output_dir>/<task>/Dockerfile` for every task.

    Nothing is built and the output directory is not cleaned up.

    Returns:
        Paths of the written Dockerfiles, in task order.

    Raises:
        DockerfileWriteError: If a Dockerfile cannot be written.
    """
    paths: list[Path] = []
    for task in tasks:
        content = render(template_lines, task.context)
        path = write_dockerfile(output_dir / task.name / "Dockerfile", task, content)
        logger.info("Wrote %s", path)
        paths.append(path)
    return paths


__all__ = [
    "RunReport",
    "StageCallback",
    "TaskOutcome",
    "build_image",
    "check_inputs",
    "cleanup_scratch_dir",
    "dockerfile_path",
    "make_images",
    "prepare_scratch_dir",
    "push_image",
    "render_dockerfiles",
    "run_tasks",
    "write_dockerfile",
]
