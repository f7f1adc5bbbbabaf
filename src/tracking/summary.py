# src/tracking/summary.py — v1
"""End-of-run summary: role outcomes, tech stack, ledger counts, next steps."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path

from swarmcoder.core.models import Manifest, RoleStatus
from swarmcoder.storage import layout
from swarmcoder.storage.models import Workspace
from swarmcoder.tracking.models import LedgerStream, RoleOutcome

logger = logging.getLogger(__name__)

ERROR_EXCERPT_CHARS = 50

NEXT_STEPS: tuple[str, ...] = (
    "Review `.learnings/` for patterns and improvements",
    "Check `DECISIONS.md` for architectural rationale",
    "Test the generated project at `{project_dir}`",
    "Promote broadly applicable learnings to the role guidance",
)

_STATUS_LABELS: dict[RoleStatus, tuple[str, str]] = {
    RoleStatus.DONE: ("✓", "success"),
    RoleStatus.FAILED: ("✗", "failed"),
}


def error_excerpt(error: str | None) -> str:
    """Truncate an error message for the role table."""
    if not error:
        return "-"
    flat = " ".join(error.split()).replace("|", "/")
    if len(flat) <= ERROR_EXCERPT_CHARS:
        return f"Error: {flat}"
    return f"Error: {flat[:ERROR_EXCERPT_CHARS]}..."


def render_summary(
    workspace: Workspace,
    manifest: Manifest,
    outcomes: list[RoleOutcome],
    ledger_counts: dict[LedgerStream, int],
    finished_at: datetime | None = None,
) -> str:
    """Render the run summary document.

    Args:
        workspace: Workspace of the run.
        manifest: Manifest the run executed.
        outcomes: One outcome per role, in manifest order.
        ledger_counts: Entry count per ledger stream.
        finished_at: Completion time (now if None).
    """
    end = finished_at or datetime.now(timezone.utc)
    duration = max((end - workspace.started_at).total_seconds(), 0.0)
    project = workspace.project_dir

    lines: list[str] = [
        "# Swarm Execution Summary",
        "",
        f"**Project:** {manifest.project_name}",
        f"**Prompt:** {workspace.prompt}",
        f"**Completed:** {end.isoformat()}",
        f"**Duration:** {round(duration)}s",
        f"**Manifest:** {layout.manifest_path(project)}",
        "",
        "## Role Performance",
        "",
        "| Role | Status | Files | Notes |",
        "|------|--------|-------|-------|",
    ]
    for outcome in outcomes:
        icon, label = _STATUS_LABELS.get(outcome.status, ("○", "not_run"))
        files = str(outcome.artifact_count) if outcome.status is RoleStatus.DONE else "-"
        lines.append(
            f"| {outcome.name} ({outcome.role_id}) | {icon} {label} | {files} "
            f"| {error_excerpt(outcome.error)} |"
        )

    lines.extend(["", "## Tech Stack", ""])
    lines.extend(f"- **{key}:** {value}" for key, value in manifest.tech_stack.items())

    total_files = sum(o.artifact_count for o in outcomes if o.status is RoleStatus.DONE)
    lines.extend(["", f"**Total files generated:** {total_files}", ""])

    lines.extend([
        "## Learnings Captured",
        "",
        f"- Errors: `.learnings/{layout.ERRORS_FILE}` "
        f"({ledger_counts.get(LedgerStream.ERRORS, 0)} entries)",
        f"- Insights: `.learnings/{layout.LEARNINGS_FILE}` "
        f"({ledger_counts.get(LedgerStream.LEARNINGS, 0)} entries)",
        f"- Feature requests: `.learnings/{layout.FEATURE_REQUESTS_FILE}` "
        f"({ledger_counts.get(LedgerStream.FEATURE_REQUESTS, 0)} entries)",
        f"- Decisions: `{layout.DECISIONS_FILE}` "
        f"({ledger_counts.get(LedgerStream.DECISIONS, 0)} entries)",
        "",
        "## Next Steps",
        "",
    ])
    lines.extend(
        f"{idx}. {step.format(project_dir=project)}"
        for idx, step in enumerate(NEXT_STEPS, start=1)
    )
    return "\n".join(lines) + "\n"


def write_summary(path: Path, content: str) -> Path:
    """Write (or overwrite) the summary document."""
    path.write_text(content, encoding="utf-8")
    logger.info("Summary written: %s", path)
    return path
