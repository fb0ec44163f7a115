"""Shared type definitions for swift_docker.

This module contains enums and type aliases shared across subpackages
to avoid circular imports.
"""

from collections.abc import Mapping, Sequence
from enum import Enum


class TemplateToken(str, Enum):
    """Placeholders recognised inside `{{` and `}}` in templates."""

    IMAGE = "image"
    SWIFT_VERSION = "swift_version"
    SWIFT_VERSION_CODE = "swift_version_code"
    SWIFT_TARBALL_PATH = "swift_tarball_path"
    SWIFT_PLATFORM = "swift_platform"
    BUILD_SCRIPTS = "build_scripts"
    # Only used by the nested build-script template
    SCRIPT_FILE = "script_file"


class TaskStage(str, Enum):
    """Stage of a build task as it moves through the orchestrator."""

    RENDERING = "rendering"
    WRITING = "writing"
    BUILDING = "building"
    DEPLOYING = "deploying"
    DONE = "done"
    FAILED = "failed"


TemplateValue = str | Sequence[str]
TemplateContext = Mapping[TemplateToken, TemplateValue]


__all__ = [
    "TaskStage",
    "TemplateContext",
    "TemplateToken",
    "TemplateValue",
]
