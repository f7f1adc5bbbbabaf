# src/parsing/output_parser.py — v1
"""Output protocol parser — file blocks and decisions from generated text.

The protocol has two parts. File segments are delimited by literal
marker lines::

    === FILE: relative/path ===
    <verbatim content>
    === END FILE ===

After the files, an optional ``DECISIONS MADE:`` section carries
alternating ``[Decision]:`` / ``[Reason]:`` lines.

The parser is a line tokenizer with two states (outside / inside a file
segment). It performs no I/O and returns a tagged ParseResult; callers
decide what to do with a failure.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from swarmcoder.core.errors import NoArtifactsError
from swarmcoder.core.models import Artifact, DecisionRecord, normalize_path

logger = logging.getLogger(__name__)

FILE_MARKER = "=== FILE: {path} ==="
END_MARKER = "=== END FILE ==="
DECISIONS_HEADER = "DECISIONS MADE:"

_FILE_OPEN = re.compile(r"^\s*===\s*FILE:\s*(?P<path>.+?)\s*===\s*$")
_FILE_CLOSE = re.compile(r"^\s*===\s*END FILE\s*===\s*$")
_DECISIONS = re.compile(r"^\s*(?:#+\s*)?\**DECISIONS MADE:?\**\s*$", re.IGNORECASE)
_WHAT = re.compile(r"^[-*]?\s*\[?Decision\]?\s*:\s*(?P<text>.*)$", re.IGNORECASE)
_WHY = re.compile(r"^[-*]?\s*\[?Reason\]?\s*:\s*(?P<text>.*)$", re.IGNORECASE)


class ParseFailure(str, Enum):
    """Why a blob yielded no artifacts."""

    EMPTY_OUTPUT = "empty_output"
    NO_FILE_SEGMENTS = "no_file_segments"


@dataclass(frozen=True)
class ParseResult:
    """Tagged result: artifacts on success, a failure reason otherwise.

    Decisions are extracted independently of file segments, so a failed
    result may still carry them; callers must not record them when the
    parse failed.
    """

    artifacts: list[Artifact] = field(default_factory=list)
    decisions: list[DecisionRecord] = field(default_factory=list)
    failure: ParseFailure | None = None
    warnings: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.failure is None

    @property
    def paths(self) -> list[str]:
        return [a.path for a in self.artifacts]

    def require_artifacts(self, role_id: str) -> list[Artifact]:
        """Return artifacts or raise NoArtifactsError for a failed parse."""
        if self.failure is not None:
            raise NoArtifactsError(role_id, self.failure.value)
        return list(self.artifacts)


def parse_output(
    text: str,
    author: str,
    timestamp: datetime | None = None,
) -> ParseResult:
    """Parse one generated blob into artifacts and decision records.

    Args:
        text: Raw text returned by the generation service.
        author: Author stamped on every DecisionRecord (usually the role id).
        timestamp: Timestamp for the records (defaults to now, UTC).

    Returns:
        ParseResult. ``failure`` is set when no file segment was recognized.
    """
    if not text or not text.strip():
        return ParseResult(failure=ParseFailure.EMPTY_OUTPUT)

    artifacts, outside_lines, warnings = _tokenize(text)
    decisions = _extract_decisions(
        outside_lines, author, timestamp or datetime.now(timezone.utc)
    )

    if not artifacts:
        return ParseResult(
            decisions=decisions,
            failure=ParseFailure.NO_FILE_SEGMENTS,
            warnings=warnings,
        )
    return ParseResult(artifacts=artifacts, decisions=decisions, warnings=warnings)


def format_file_block(path: str, content: str) -> str:
    """Render one artifact in protocol form (used by prompts and the mock service)."""
    return f"{FILE_MARKER.format(path=path)}\n{content}\n{END_MARKER}"


# ------------------------------------------------------------------
# Tokenizer
# ------------------------------------------------------------------


def _tokenize(text: str) -> tuple[list[Artifact], list[str], list[str]]:
    """Split text into file segments and the lines outside them.

    A FILE marker seen while a segment is still open drops the open
    segment as unterminated and starts a new one. A segment still open
    at end of text is dropped too.
    """
    contents: dict[str, str] = {}
    warnings: list[str] = []
    outside: list[str] = []

    current_path: str | None = None
    buffer: list[str] = []

    for line in text.splitlines(keepends=True):
        stripped = line.rstrip("\r\n")
        opened = _FILE_OPEN.match(stripped)

        if current_path is None:
            if opened:
                current_path = opened.group("path")
                buffer = []
            else:
                outside.append(stripped)
            continue

        if _FILE_CLOSE.match(stripped):
            _accept(current_path, buffer, contents, warnings)
            current_path = None
            buffer = []
        elif opened:
            warnings.append(f"Unterminated file segment '{current_path}' dropped")
            current_path = opened.group("path")
            buffer = []
        else:
            buffer.append(line)

    if current_path is not None:
        warnings.append(f"Unterminated file segment '{current_path}' dropped")

    for w in warnings:
        logger.warning(w)

    artifacts = [Artifact(path=p, content=c) for p, c in contents.items()]
    return artifacts, outside, warnings


def _accept(
    raw_path: str,
    buffer: list[str],
    contents: dict[str, str],
    warnings: list[str],
) -> None:
    try:
        path = normalize_path(raw_path)
    except ValueError as exc:
        warnings.append(f"Rejected file segment: {exc}")
        return

    content = "".join(buffer)
    if content.endswith("\r\n"):
        content = content[:-2]
    elif content.endswith("\n"):
        content = content[:-1]

    if path in contents:
        warnings.append(f"Duplicate file segment '{path}', last one kept")
    contents[path] = content


# ------------------------------------------------------------------
# Decisions section
# ------------------------------------------------------------------


def _extract_decisions(
    lines: list[str],
    author: str,
    timestamp: datetime,
) -> list[DecisionRecord]:
    """Pair [Decision]/[Reason] lines following the DECISIONS MADE header.

    A decision without a reason before the next decision (or the end of
    the section) is dropped; a reason without a pending decision is
    ignored, as is any other line.
    """
    start = None
    for idx, line in enumerate(lines):
        if _DECISIONS.match(line):
            start = idx + 1
            break
    if start is None:
        return []

    records: list[DecisionRecord] = []
    pending: str | None = None

    for line in lines[start:]:
        stripped = line.strip()
        what = _WHAT.match(stripped)
        if what:
            text = what.group("text").strip()
            pending = text or None
            continue
        why = _WHY.match(stripped)
        if why and pending is not None:
            reason = why.group("text").strip()
            if reason:
                records.append(
                    DecisionRecord(
                        author=author, timestamp=timestamp, what=pending, why=reason,
                    )
                )
            pending = None

    return records
