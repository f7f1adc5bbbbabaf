# src/storage/local_writer.py — v4
"""Local filesystem artifact sink (default backend)."""

from __future__ import annotations

import shutil
from pathlib import Path

from swarmcoder.storage.base_output_writer import BaseOutputWriter


class LocalWriter(BaseOutputWriter):
    """Write artifacts to the local filesystem."""

    def __init__(self, base_path: str | Path | None = None) -> None:
        """Initialize with optional base path.

        Args:
            base_path: Root directory for all writes. If None, paths are used as given.
        """
        self._base = Path(base_path) if base_path else None

    def _resolve(self, path: str) -> Path:
        """Resolve a path relative to base_path."""
        if self._base is not None:
            return self._base / path
        return Path(path)

    async def write(self, path: str, content: bytes | str) -> None:
        p = self._resolve(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            p.write_bytes(content)
        else:
            p.write_text(content, encoding="utf-8")

    async def exists(self, path: str) -> bool:
        return self._resolve(path).exists()

    async def copy(self, src: str, dst: str) -> None:
        dst_path = self._resolve(dst)
        dst_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(str(self._resolve(src)), str(dst_path))
