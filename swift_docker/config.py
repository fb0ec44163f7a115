"""Configuration settings for swift_docker.

Uses pydantic-settings for config parsing from environment variables
and defaults. Configuration precedence: CLI flags > env vars > defaults.
Relative paths are resolved against the current working directory.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings.

    Settings are loaded from environment variables with the SWIFT_DOCKER_
    prefix. CLI flags can override these at runtime.
    """

    model_config = SettingsConfigDict(
        env_prefix="SWIFT_DOCKER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Inputs
    manifest_path: Path = Field(
        default=Path("manifest.json"),
        description="Build manifest listing platforms and targets",
    )
    template_path: Path = Field(
        default=Path("DockerfileTemplate"),
        description="Dockerfile template with {{token}} placeholders",
    )
    build_scripts_dir: Path = Field(
        default=Path("build_scripts"),
        description="Directory holding the scripts referenced by targets",
    )

    # Outputs
    scratch_dir: Path = Field(
        default=Path(".docker-build"),
        description="Scratch directory for rendered Dockerfiles (recreated per run)",
    )
    owner: str | None = Field(
        default=None,
        description="Registry namespace prefixed to image names",
    )

    # Docker
    docker_binary: str = Field(
        default="docker",
        description="Container engine executable",
    )
    build_timeout: int | None = Field(
        default=None,
        ge=1,
        description="Timeout for a single image build (unbounded if not set)",
    )
    push_timeout: int | None = Field(
        default=None,
        ge=1,
        description="Timeout for a single image push (unbounded if not set)",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )


def get_settings() -> Settings:
    """Get the application settings.

    Returns:
        Settings instance loaded from environment.
    """
    return Settings()


def print_settings_json(settings: Settings | None = None) -> str:
    """Render effective settings as JSON.

    Args:
        settings: Optional settings instance; uses default if not provided.

    Returns:
        JSON string of effective settings.
    """
    if settings is None:
        settings = get_settings()
    return settings.model_dump_json(indent=2)


__all__ = ["Settings", "get_settings", "print_settings_json"]
