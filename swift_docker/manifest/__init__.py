"""Build manifest module.

This module handles:
- Manifest schema validation (platforms, targets)
- Loading manifests from JSON/YAML files
"""

from swift_docker.manifest.io import load_manifest, parse_manifest_data
from swift_docker.manifest.schema import (
    BuildManifest,
    Platform,
    PlatformVersion,
    Target,
)

__all__ = [
    "BuildManifest",
    "Platform",
    "PlatformVersion",
    "Target",
    "load_manifest",
    "parse_manifest_data",
]
