"""Error taxonomy for swift_docker.

Every error carries a stable string code and a distinct process exit code.
Library code only raises; the CLI maps errors to exit codes in one place.
"""

from __future__ import annotations

from pathlib import Path

# Error code constants
MANIFEST_MISSING = "manifest_missing"
MANIFEST_UNREADABLE = "manifest_unreadable"
MANIFEST_INVALID = "manifest_invalid"
TEMPLATE_MISSING = "template_missing"
TEMPLATE_UNREADABLE = "template_unreadable"
BUILD_SCRIPTS_MISSING = "build_scripts_missing"
SCRATCH_DIR_FAILED = "scratch_dir_failed"
DOCKERFILE_WRITE_FAILED = "dockerfile_write_failed"
IMAGE_BUILD_FAILED = "image_build_failed"
IMAGE_DEPLOY_FAILED = "image_deploy_failed"


class SwiftDockerError(Exception):
    """Base error for all swift_docker failures."""

    code = "internal_error"
    exit_code = 1

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ManifestMissingError(SwiftDockerError):
    """Raised when the manifest file does not exist."""

    code = MANIFEST_MISSING
    exit_code = 10

    def __init__(self, path: Path) -> None:
        super().__init__(f"Manifest not found: {path}")
        self.path = path


class ManifestUnreadableError(SwiftDockerError):
    """Raised when the manifest file cannot be read or decoded."""

    code = MANIFEST_UNREADABLE
    exit_code = 11

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot read manifest {path}: {reason}")
        self.path = path
        self.reason = reason


class ManifestInvalidError(SwiftDockerError):
    """Raised when the manifest is structurally invalid."""

    code = MANIFEST_INVALID
    exit_code = 12


class MissingFieldError(ManifestInvalidError):
    """Raised when a required top-level manifest field is absent."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Manifest is missing required field '{field}'")
        self.field = field


class NoPlatformsError(ManifestInvalidError):
    """Raised when no valid platform remains after loading."""

    def __init__(self) -> None:
        super().__init__("Manifest does not define any valid platform")


class NoTargetsError(ManifestInvalidError):
    """Raised when no valid target remains after loading."""

    def __init__(self) -> None:
        super().__init__("Manifest does not define any valid target")


class TemplateMissingError(SwiftDockerError):
    """Raised when the Dockerfile template does not exist."""

    code = TEMPLATE_MISSING
    exit_code = 13

    def __init__(self, path: Path) -> None:
        super().__init__(f"Dockerfile template not found: {path}")
        self.path = path


class TemplateUnreadableError(SwiftDockerError):
    """Raised when the Dockerfile template cannot be read."""

    code = TEMPLATE_UNREADABLE
    exit_code = 14

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot read Dockerfile template {path}: {reason}")
        self.path = path


class BuildScriptsDirMissingError(SwiftDockerError):
    """Raised when the build scripts directory does not exist."""

    code = BUILD_SCRIPTS_MISSING
    exit_code = 15

    def __init__(self, path: Path) -> None:
        super().__init__(f"Build scripts directory not found: {path}")
        self.path = path


class ScratchDirCreateError(SwiftDockerError):
    """Raised when the scratch build directory cannot be (re)created."""

    code = SCRATCH_DIR_FAILED
    exit_code = 16

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot create build directory {path}: {reason}")
        self.path = path


class DockerfileWriteError(SwiftDockerError):
    """Raised when a rendered Dockerfile cannot be written."""

    code = DOCKERFILE_WRITE_FAILED
    exit_code = 17

    def __init__(self, path: Path, task_name: str, reason: str) -> None:
        super().__init__(f"Cannot write Dockerfile for {task_name} at {path}: {reason}")
        self.path = path
        self.task_name = task_name


class _ImageCommandError(SwiftDockerError):
    """Shared shape of docker build/push failures."""

    action = "run"

    def __init__(
        self,
        task_name: str,
        image_name: str,
        reason: str,
        exit_code: int | None = None,
        output: str = "",
    ) -> None:
        super().__init__(f"Failed to {self.action} image {image_name} ({task_name}): {reason}")
        self.task_name = task_name
        self.image_name = image_name
        self.reason = reason
        self.command_exit_code = exit_code
        self.output = output


class ImageBuildError(_ImageCommandError):
    """Raised when `docker build` fails for a task."""

    code = IMAGE_BUILD_FAILED
    exit_code = 18
    action = "build"


class ImageDeployError(_ImageCommandError):
    """Raised when `docker push` fails for a task."""

    code = IMAGE_DEPLOY_FAILED
    exit_code = 19
    action = "deploy"


__all__ = [
    "BUILD_SCRIPTS_MISSING",
    "DOCKERFILE_WRITE_FAILED",
    "IMAGE_BUILD_FAILED",
    "IMAGE_DEPLOY_FAILED",
    "MANIFEST_INVALID",
    "MANIFEST_MISSING",
    "MANIFEST_UNREADABLE",
    "SCRATCH_DIR_FAILED",
    "TEMPLATE_MISSING",
    "TEMPLATE_UNREADABLE",
    "BuildScriptsDirMissingError",
    "DockerfileWriteError",
    "ImageBuildError",
    "ImageDeployError",
    "ManifestInvalidError",
    "ManifestMissingError",
    "ManifestUnreadableError",
    "MissingFieldError",
    "NoPlatformsError",
    "NoTargetsError",
    "ScratchDirCreateError",
    "SwiftDockerError",
    "TemplateMissingError",
    "TemplateUnreadableError",
]
