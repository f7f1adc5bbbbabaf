# src/tracking/ledger.py — v2
"""Run ledger — append-only Markdown streams for one workspace.

Four streams: errors, learnings and feature requests under
``.learnings/``, decisions in ``DECISIONS.md``. Every write opens the
stream in append mode; nothing already written is edited or removed.
The ledger is passed explicitly to whoever needs it (scheduler,
planner, orchestrator); there is no module-level instance.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from datetime import datetime, timezone
from pathlib import Path

from swarmcoder.core.models import SCHEDULER_AUTHOR, DecisionRecord
from swarmcoder.storage import layout
from swarmcoder.tracking.models import LedgerEntry, LedgerStream

logger = logging.getLogger(__name__)

_ENTRY_HEADING = re.compile(r"^## \d{4}-\d{2}-\d{2}T", re.MULTILINE)
_CONTENT_HEADING = re.compile(r"^(#+ \d{4}-\d{2}-\d{2}T)", re.MULTILINE)

_PATHS: dict[LedgerStream, Callable[[Path], Path]] = {
    LedgerStream.ERRORS: layout.errors_path,
    LedgerStream.LEARNINGS: layout.learnings_path,
    LedgerStream.FEATURE_REQUESTS: layout.feature_requests_path,
    LedgerStream.DECISIONS: layout.decisions_path,
}


class RunLedger:
    """Single-writer, append-only audit trail of a run.

    Args:
        project_dir: Workspace root directory.
        clock: Timestamp source (UTC now by default).
    """

    def __init__(
        self,
        project_dir: Path,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._project = project_dir
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._entries: list[LedgerEntry] = []

    def path(self, stream: LedgerStream) -> Path:
        return _PATHS[stream](self._project)

    def initialize(self, prompt: str) -> None:
        """Write stream headers. Existing streams are left untouched."""
        now = self._clock().isoformat()
        decisions_header = (
            f"# Project Decisions\n\nCreated: {now}\nPrompt: {escape_content(prompt)}\n\n"
            "Key architectural and technical decisions made during generation.\n\n---\n\n"
        )
        learning_header = (
            f"# Swarm Learning Log\n\nGenerated: {now}\n"
            f"Project: {escape_content(prompt)}\n\n---\n\n"
        )
        for stream in LedgerStream:
            path = self.path(stream)
            if path.exists():
                continue
            path.parent.mkdir(parents=True, exist_ok=True)
            header = decisions_header if stream is LedgerStream.DECISIONS else learning_header
            path.write_text(header, encoding="utf-8")

    # ------------------------------------------------------------------
    # Streams
    # ------------------------------------------------------------------

    def log_error(self, author: str, error: str, context: str = "") -> LedgerEntry:
        return self._append(
            LedgerEntry(
                stream=LedgerStream.ERRORS,
                timestamp=self._clock(),
                author=author,
                fields={"Error": error, "Context": context or "N/A"},
            )
        )

    def log_learning(
        self,
        author: str,
        title: str,
        content: str,
        category: str = "correction",
    ) -> LedgerEntry:
        return self._append(
            LedgerEntry(
                stream=LedgerStream.LEARNINGS,
                timestamp=self._clock(),
                author=author,
                title=title,
                category=category,
                body=content,
            )
        )

    def log_feature_request(self, author: str, feature: str, rationale: str) -> LedgerEntry:
        return self._append(
            LedgerEntry(
                stream=LedgerStream.FEATURE_REQUESTS,
                timestamp=self._clock(),
                author=author,
                fields={"Feature": feature, "Rationale": rationale},
            )
        )

    def record_decision(self, record: DecisionRecord) -> LedgerEntry:
        return self._append(
            LedgerEntry(
                stream=LedgerStream.DECISIONS,
                timestamp=record.timestamp,
                author=record.author,
                fields={"Decision": record.what, "Rationale": record.why},
            )
        )

    def record_decisions(self, records: Iterable[DecisionRecord]) -> int:
        count = 0
        for record in records:
            self.record_decision(record)
            count += 1
        return count

    def decide(self, what: str, why: str, author: str = SCHEDULER_AUTHOR) -> LedgerEntry:
        """Record a decision made by the orchestration itself."""
        return self.record_decision(
            DecisionRecord(author=author, timestamp=self._clock(), what=what, why=why)
        )

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    @property
    def entries(self) -> list[LedgerEntry]:
        """Entries appended through this instance, in order."""
        return list(self._entries)

    def count(self, stream: LedgerStream) -> int:
        """Number of entries in a stream on disk, including earlier attempts."""
        path = self.path(stream)
        if not path.exists():
            return 0
        return len(_ENTRY_HEADING.findall(path.read_text(encoding="utf-8")))

    def counts(self) -> dict[LedgerStream, int]:
        return {stream: self.count(stream) for stream in LedgerStream}

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _append(self, entry: LedgerEntry) -> LedgerEntry:
        path = self.path(entry.stream)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as f:
            f.write(render_entry(entry))
        self._entries.append(entry)
        logger.debug("Ledger %s entry by %s", entry.stream.value, entry.author)
        return entry


def render_entry(entry: LedgerEntry) -> str:
    """Render one entry as a Markdown block terminated by a rule."""
    heading = f"## {entry.timestamp.isoformat()} — {escape_content(entry.author)}"
    if entry.category:
        heading += f" ({entry.category})"
    parts = [heading, ""]
    if entry.title:
        parts.extend([f"**{escape_content(entry.title)}**", ""])
    if entry.stream is LedgerStream.DECISIONS:
        # Decision and rationale as separate paragraphs.
        for label, value in entry.fields.items():
            parts.extend([f"**{label}:** {escape_content(value)}", ""])
    elif entry.fields:
        parts.extend(
            f"**{label}:** {escape_content(value)}" for label, value in entry.fields.items()
        )
        parts.append("")
    if entry.body:
        parts.extend([escape_content(entry.body), ""])
    parts.extend(["---", "", ""])
    return "\n".join(parts)


def escape_content(text: str) -> str:
    """Backslash-escape lines that would read as an entry heading.

    Entries are counted by their heading line, so quoted model output
    must not be able to produce one.
    """
    return _CONTENT_HEADING.sub(r"\\\1", text)
