# src/storage/base_output_writer.py — v3
"""Abstract artifact sink interface."""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseOutputWriter(ABC):
    """Unified interface for artifact storage backends."""

    @abstractmethod
    async def write(self, path: str, content: bytes | str) -> None:
        """Write content to the given path, creating parents."""

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """Check if path exists."""

    @abstractmethod
    async def copy(self, src: str, dst: str) -> None:
        """Copy a file (used for project assembly)."""
