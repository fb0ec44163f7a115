"""Pydantic models for the build manifest.

Raw manifest entries are validated one at a time with PlatformSchema and
TargetSchema so that a malformed entry can be dropped without failing the
whole load. The resolved records (Platform, Target, BuildManifest) are
immutable once built.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PlatformVersion(BaseModel):
    """Version of a platform OS.

    Attributes:
        major: Major version, kept as literal text (e.g. '16').
        minor: Minor version, kept as literal text (e.g. '04').
    """

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    major: str
    minor: str


class Platform(BaseModel):
    """One OS/version combination images can be built for.

    Attributes:
        name: Unique codename (e.g. 'xenial').
        os: Name of the OS (e.g. 'ubuntu').
        version: OS version.
        source_image_tag: Docker image used in the `FROM` declaration.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(min_length=1)
    os: str = Field(min_length=1)
    version: PlatformVersion
    source_image_tag: str = Field(alias="image_tag", min_length=1)


class TargetSchema(BaseModel):
    """A target entry as written in the manifest."""

    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    swift_version: str = Field(min_length=1)
    version_code: str = Field(min_length=1)
    platforms: list[str]
    build_scripts: list[str]


class Target(BaseModel):
    """One Swift version build job with its resolved platforms.

    Attributes:
        swift_version: Swift release to install (e.g. '4.0' or '4.0-RELEASE').
        version_code: Short version used in image names.
        build_scripts: Script filenames run in order inside the image.
        platforms: Platforms to build on, in the order the target lists them.
    """

    model_config = ConfigDict(frozen=True)

    swift_version: str
    version_code: str
    build_scripts: tuple[str, ...] = ()
    platforms: tuple[Platform, ...] = ()


class BuildManifest(BaseModel):
    """Root of the manifest: every platform and target of a run."""

    model_config = ConfigDict(frozen=True)

    platforms: tuple[Platform, ...]
    targets: tuple[Target, ...]

    @model_validator(mode="after")
    def validate_references(self) -> "BuildManifest":
        """Require at least one platform and target, and known references."""
        if not self.platforms:
            raise ValueError("manifest must define at least one platform")
        if not self.targets:
            raise ValueError("manifest must define at least one target")
        known = {platform.name for platform in self.platforms}
        for target in self.targets:
            for platform in target.platforms:
                if platform.name not in known:
                    raise ValueError(
                        f"target {target.version_code} references unknown "
                        f"platform '{platform.name}'"
                    )
        return self


__all__ = [
    "BuildManifest",
    "Platform",
    "PlatformVersion",
    "Target",
    "TargetSchema",
]
