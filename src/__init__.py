"""swarmcoder: plan a project from a prompt and generate it role by role."""

from swarmcoder.version import __version__

__all__ = ["__version__"]
