"""Markdown recap of the images a manifest produces.

One section per target, with a table of the OS and image tag of each
platform the target builds on. Suitable for pasting into a README.
"""

from swift_docker.builds.tasks import image_name, task_name
from swift_docker.manifest.schema import BuildManifest, Platform, Target


def os_label(platform: Platform) -> str:
    """Return a human-readable OS label, e.g. 'Ubuntu 16.04'."""
    version = platform.version
    return f"{platform.os.capitalize()} {version.major}.{version.minor}"


def recap_table(target: Target, owner: str | None = None) -> str:
    """Render the recap section of a single target."""
    rows = [
        f"| {os_label(platform)} | {image_name(task_name(target, platform), owner)} |"
        for platform in target.platforms
    ]
    header = f"### Swift {target.version_code}\n"
    table_header = "\n| OS | Image Tag |\n| --- | --- |\n"
    return header + table_header + "\n".join(rows) + "\n"


def recap_tables(manifest: BuildManifest, owner: str | None = None) -> list[str]:
    """Render one recap section per target, in manifest order."""
    return [recap_table(target, owner) for target in manifest.targets]


__all__ = ["os_label", "recap_table", "recap_tables"]
