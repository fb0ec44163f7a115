"""Build manifest loading.

This module reads manifest files (JSON, or YAML for convenience) and turns
them into a validated BuildManifest.

Loading is lenient per entry: a platform or target that does not match
its schema is omitted with a warning, and a target's references to unknown
platforms are dropped. The load still fails if no platform or no target
survives.
"""

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from swift_docker.errors import (
    ManifestInvalidError,
    ManifestMissingError,
    ManifestUnreadableError,
    MissingFieldError,
    NoPlatformsError,
    NoTargetsError,
)
from swift_docker.manifest.schema import (
    BuildManifest,
    Platform,
    Target,
    TargetSchema,
)

logger = logging.getLogger(__name__)

YAML_SUFFIXES = (".yaml", ".yml")


def load_json(path: Path) -> Any:
    """Load a JSON file.

    Args:
        path: Path to the JSON file.

    Returns:
        Decoded JSON content.

    Raises:
        ManifestUnreadableError: If the file cannot be read or decoded.
    """
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ManifestUnreadableError(path, str(e)) from e


def load_yaml(path: Path) -> Any:
    """Load a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        Decoded YAML content.

    Raises:
        ManifestUnreadableError: If the file cannot be read or decoded.
    """
    try:
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f)
    except (OSError, UnicodeDecodeError, yaml.YAMLError) as e:
        raise ManifestUnreadableError(path, str(e)) from e


def _entry_list(data: dict[str, Any], key: str) -> list[Any]:
    if key not in data:
        raise MissingFieldError(key)
    entries = data[key]
    if not isinstance(entries, list):
        raise ManifestInvalidError(
            f"Manifest field '{key}' must be a list, got {type(entries).__name__}"
        )
    return entries


def parse_platforms(entries: list[Any]) -> list[Platform]:
    """Validate platform entries, omitting malformed ones and duplicates."""
    platforms: list[Platform] = []
    seen: set[str] = set()
    for index, entry in enumerate(entries):
        try:
            platform = Platform.model_validate(entry)
        except ValidationError as e:
            logger.warning(
                "Omitting platform #%d: %s",
                index,
                "; ".join(err["msg"] for err in e.errors()),
            )
            continue
        if platform.name in seen:
            logger.warning("Omitting duplicate platform '%s'", platform.name)
            continue
        seen.add(platform.name)
        platforms.append(platform)
    return platforms


def resolve_target(entry: TargetSchema, platforms: list[Platform]) -> Target:
    """Resolve a target's platform names against the known platforms.

    Unknown names are dropped with a warning. The target's own order is
    kept, duplicates included.
    """
    by_name = {platform.name: platform for platform in platforms}
    resolved: list[Platform] = []
    for name in entry.platforms:
        platform = by_name.get(name)
        if platform is None:
            logger.warning(
                "Target %s references unknown platform '%s'; ignoring it",
                entry.version_code,
                name,
            )
            continue
        resolved.append(platform)

    return Target(
        swift_version=entry.swift_version,
        version_code=entry.version_code,
        build_scripts=tuple(entry.build_scripts),
        platforms=tuple(resolved),
    )


def parse_targets(entries: list[Any], platforms: list[Platform]) -> list[Target]:
    """Validate target entries, omitting malformed ones."""
    targets: list[Target] = []
    for index, entry in enumerate(entries):
        try:
            schema = TargetSchema.model_validate(entry)
        except ValidationError as e:
            logger.warning(
                "Omitting target #%d: %s",
                index,
                "; ".join(err["msg"] for err in e.errors()),
            )
            continue
        targets.append(resolve_target(schema, platforms))
    return targets


def parse_manifest_data(data: Any) -> BuildManifest:
    """Parse and validate in-memory manifest data.

    Args:
        data: Decoded manifest content.

    Returns:
        Validated BuildManifest.

    Raises:
        ManifestInvalidError: If the top level is not an object or a
            required list is absent or mistyped.
        NoPlatformsError: If no valid platform remains.
        NoTargetsError: If no valid target remains.
    """
    if not isinstance(data, dict):
        raise ManifestInvalidError(
            f"Expected a manifest object, got {type(data).__name__}"
        )

    platform_entries = _entry_list(data, "platforms")
    target_entries = _entry_list(data, "targets")

    platforms = parse_platforms(platform_entries)
    if not platforms:
        raise NoPlatformsError()

    targets = parse_targets(target_entries, platforms)
    if not targets:
        raise NoTargetsError()

    return BuildManifest(platforms=tuple(platforms), targets=tuple(targets))


def load_manifest(path: Path) -> BuildManifest:
    """Load and validate a manifest file.

    Files ending in .yaml/.yml are read as YAML, anything else as JSON.

    Args:
        path: Path to the manifest.

    Returns:
        Validated BuildManifest.

    Raises:
        ManifestMissingError: If the file does not exist.
        ManifestUnreadableError: If the file cannot be read or decoded.
        ManifestInvalidError: If the content is not a valid manifest.
    """
    if not path.exists():
        raise ManifestMissingError(path)

    if path.suffix.lower() in YAML_SUFFIXES:
        data = load_yaml(path)
    else:
        data = load_json(path)

    manifest = parse_manifest_data(data)
    logger.debug(
        "Loaded manifest %s (%d platforms, %d targets)",
        path,
        len(manifest.platforms),
        len(manifest.targets),
    )
    return manifest


__all__ = [
    "load_json",
    "load_manifest",
    "load_yaml",
    "parse_manifest_data",
    "parse_platforms",
    "parse_targets",
    "resolve_target",
]
