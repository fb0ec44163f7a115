"""Build orchestration module.

This module handles:
- Expanding a manifest into build tasks
- Running docker build/push commands
- Sequencing render, write, build and deploy per task
- Markdown recaps of built images
"""

from swift_docker.builds.tasks import BuildTask, expand_tasks

__all__ = ["BuildTask", "expand_tasks"]

# Access the remaining submodules directly, e.g. swift_docker.builds.service
