"""swift-docker - Build Swift Docker images from a declarative manifest.

This package renders one Dockerfile per (Swift version, platform) pair
from a shared template and drives the docker CLI to build and push them.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
