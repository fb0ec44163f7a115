"""Expansion of a manifest into build tasks.

One BuildTask is produced per (target, platform) pair, targets in manifest
order and platforms in the order each target lists them. The order is
significant: it drives the order of rendered files and docker invocations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from swift_docker.manifest.schema import BuildManifest, Platform, Target
from swift_docker.template import render_build_scripts
from swift_docker.types import TemplateToken, TemplateValue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BuildTask:
    """One concrete image to build.

    Attributes:
        name: Task name, `<platform>-<version_code>`.
        image_name: Tag given to the image, optionally owner-prefixed.
        context: Values used to render the Dockerfile template.
        platform: Platform the image is built for.
        target: Target the image is built from.
    """

    name: str
    image_name: str
    context: dict[TemplateToken, TemplateValue] = field(hash=False, compare=False)
    platform: Platform
    target: Target


def task_name(target: Target, platform: Platform) -> str:
    """Return the task name for a target/platform pair."""
    return f"{platform.name}-{target.version_code}"


def image_name(name: str, owner: str | None = None) -> str:
    """Prefix a task name with the owner namespace, if any."""
    if owner is None:
        return name
    return f"{owner}/{name}"


def tarball_path(target: Target, platform: Platform) -> str:
    """Return the intermediate path of the Swift toolchain tarball.

    Example: swift-4.0/ubuntu1604
    """
    version = platform.version
    return (
        f"swift-{target.swift_version.lower()}/"
        f"{platform.os}{version.major}{version.minor}"
    )


def platform_label(platform: Platform) -> str:
    """Return the Swift platform label, e.g. ubuntu16.04."""
    version = platform.version
    return f"{platform.os}{version.major}.{version.minor}"


def build_context(
    target: Target, platform: Platform
) -> dict[TemplateToken, TemplateValue]:
    """Compose the template context for a target/platform pair."""
    return {
        TemplateToken.IMAGE: platform.source_image_tag,
        TemplateToken.SWIFT_VERSION: target.swift_version,
        TemplateToken.SWIFT_VERSION_CODE: target.version_code,
        TemplateToken.SWIFT_TARBALL_PATH: tarball_path(target, platform),
        TemplateToken.SWIFT_PLATFORM: platform_label(platform),
        TemplateToken.BUILD_SCRIPTS: render_build_scripts(target.build_scripts),
    }


def build_task(target: Target, platform: Platform, owner: str | None = None) -> BuildTask:
    """Create the build task for a target/platform pair."""
    name = task_name(target, platform)
    return BuildTask(
        name=name,
        image_name=image_name(name, owner),
        context=build_context(target, platform),
        platform=platform,
        target=target,
    )


def expand_tasks(manifest: BuildManifest, owner: str | None = None) -> list[BuildTask]:
    """Expand a manifest into its ordered build tasks.

    Args:
        manifest: Loaded build manifest.
        owner: Optional registry namespace for image names.

    Returns:
        Build tasks, all tasks of target[0] first, then target[1], and so on.
    """
    tasks = [
        build_task(target, platform, owner)
        for target in manifest.targets
        for platform in target.platforms
    ]
    logger.debug("Expanded %d targets into %d tasks", len(manifest.targets), len(tasks))
    return tasks


__all__ = [
    "BuildTask",
    "build_context",
    "build_task",
    "expand_tasks",
    "image_name",
    "platform_label",
    "tarball_path",
    "task_name",
]
