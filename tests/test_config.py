"""Tests for configuration module."""

import json
import os
from pathlib import Path
from unittest.mock import patch

from swift_docker.config import Settings, get_settings, print_settings_json


class TestSettings:
    """Test Settings class."""

    def test_default_settings(self) -> None:
        """Settings should default to the working directory layout."""
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.manifest_path == Path("manifest.json")
        assert settings.template_path == Path("DockerfileTemplate")
        assert settings.build_scripts_dir == Path("build_scripts")
        assert settings.scratch_dir == Path(".docker-build")
        assert settings.docker_binary == "docker"
        assert settings.owner is None
        assert settings.build_timeout is None
        assert settings.log_level == "INFO"

    def test_settings_from_env(self) -> None:
        """Settings should be loadable from environment variables."""
        with patch.dict(
            os.environ,
            {
                "SWIFT_DOCKER_MANIFEST_PATH": "/tmp/manifest.json",
                "SWIFT_DOCKER_OWNER": "alice",
                "SWIFT_DOCKER_DOCKER_BINARY": "podman",
                "SWIFT_DOCKER_BUILD_TIMEOUT": "600",
                "SWIFT_DOCKER_LOG_LEVEL": "DEBUG",
            },
        ):
            settings = Settings()
            assert settings.manifest_path == Path("/tmp/manifest.json")
            assert settings.owner == "alice"
            assert settings.docker_binary == "podman"
            assert settings.build_timeout == 600
            assert settings.log_level == "DEBUG"

    def test_explicit_values_override_env(self) -> None:
        with patch.dict(os.environ, {"SWIFT_DOCKER_OWNER": "alice"}):
            settings = Settings(owner="bob")
            assert settings.owner == "bob"


class TestGetSettings:
    """Test get_settings function."""

    def test_returns_settings(self) -> None:
        assert isinstance(get_settings(), Settings)


class TestPrintSettingsJson:
    """Test print_settings_json function."""

    def test_json_output(self) -> None:
        output = print_settings_json(Settings(owner="alice"))
        data = json.loads(output)
        assert data["owner"] == "alice"
        assert data["docker_binary"] == "docker"
        assert "scratch_dir" in data
