"""Tests for the error taxonomy."""

from pathlib import Path

from swift_docker.errors import (
    BuildScriptsDirMissingError,
    DockerfileWriteError,
    ImageBuildError,
    ImageDeployError,
    ManifestInvalidError,
    ManifestMissingError,
    ManifestUnreadableError,
    MissingFieldError,
    NoPlatformsError,
    NoTargetsError,
    ScratchDirCreateError,
    SwiftDockerError,
    TemplateMissingError,
    TemplateUnreadableError,
)


def _all_errors():
    path = Path("x")
    return [
        ManifestMissingError(path),
        ManifestUnreadableError(path, "bad"),
        ManifestInvalidError("bad"),
        TemplateMissingError(path),
        TemplateUnreadableError(path, "bad"),
        BuildScriptsDirMissingError(path),
        ScratchDirCreateError(path, "bad"),
        DockerfileWriteError(path, "xenial-4.0", "bad"),
        ImageBuildError("xenial-4.0", "xenial-4.0", "bad"),
        ImageDeployError("xenial-4.0", "xenial-4.0", "bad"),
    ]


class TestTaxonomy:
    """Tests for codes and exit codes."""

    def test_distinct_exit_codes(self):
        exit_codes = [e.exit_code for e in _all_errors()]
        assert len(set(exit_codes)) == len(exit_codes)

    def test_distinct_codes(self):
        codes = [e.code for e in _all_errors()]
        assert len(set(codes)) == len(codes)

    def test_exit_codes_do_not_clash_with_usage_errors(self):
        assert all(e.exit_code >= 10 for e in _all_errors())

    def test_all_share_base(self):
        assert all(isinstance(e, SwiftDockerError) for e in _all_errors())

    def test_manifest_invalid_family(self):
        for error in (MissingFieldError("targets"), NoPlatformsError(), NoTargetsError()):
            assert isinstance(error, ManifestInvalidError)
            assert error.exit_code == ManifestInvalidError.exit_code


class TestMessages:
    """Tests for error context."""

    def test_manifest_missing_names_path(self):
        assert "/srv/manifest.json" in str(ManifestMissingError(Path("/srv/manifest.json")))

    def test_image_build_names_task_and_image(self):
        error = ImageBuildError(
            "xenial-4.0", "alice/xenial-4.0", "docker exited with code 1", exit_code=1
        )
        assert "alice/xenial-4.0" in str(error)
        assert "xenial-4.0" in error.message
        assert error.command_exit_code == 1
        assert error.output == ""

    def test_deploy_message(self):
        error = ImageDeployError("xenial-4.0", "xenial-4.0", "denied")
        assert str(error).startswith("Failed to deploy image xenial-4.0")
