# src/storage/layout.py — v3
"""Workspace directory structure definition.

One workspace per run, under ``{workspace_root}/{project_id}/``::

    workspace.json          run identity and prompt
    swarm.json              validated manifest
    tasks.json              RunState, rewritten after every role
    DECISIONS.md            decision stream
    SWARM_SUMMARY.md        end-of-run summary
    calls_log.jsonl         generation call records
    .learnings/             errors, learnings, feature requests
    files/{role_id}/...     role-scoped artifacts + raw.txt
    <declared outputs>      project tree after assembly
"""

from __future__ import annotations

from pathlib import Path

FILES_DIR = "files"
LEARNINGS_DIR = ".learnings"

WORKSPACE_FILE = "workspace.json"
MANIFEST_FILE = "swarm.json"
TASKS_FILE = "tasks.json"
DECISIONS_FILE = "DECISIONS.md"
SUMMARY_FILE = "SWARM_SUMMARY.md"
CALLS_LOG_FILE = "calls_log.jsonl"
RAW_OUTPUT_FILE = "raw.txt"
README_FILE = "README.md"

ERRORS_FILE = "ERRORS.md"
LEARNINGS_FILE = "LEARNINGS.md"
FEATURE_REQUESTS_FILE = "FEATURE_REQUESTS.md"


def project_dir(workspace_root: Path, project_id: str) -> Path:
    """Return root directory for a project."""
    return workspace_root / project_id


def files_dir(project: Path) -> Path:
    return project / FILES_DIR


def role_dir(project: Path, role_id: str) -> Path:
    """Return the role-scoped artifact directory."""
    return files_dir(project) / role_id


def role_artifact_path(project: Path, role_id: str, relative: str) -> Path:
    """Role-scoped write location: files/{role_id}/{path}."""
    return role_dir(project, role_id) / relative


def project_artifact_path(project: Path, relative: str) -> Path:
    """Project-scoped write location used at assembly: {path}."""
    return project / relative


def raw_output_path(project: Path, role_id: str) -> Path:
    return role_dir(project, role_id) / RAW_OUTPUT_FILE


def learnings_dir(project: Path) -> Path:
    return project / LEARNINGS_DIR


# --- Specific file paths ---

def workspace_path(project: Path) -> Path:
    return project / WORKSPACE_FILE


def manifest_path(project: Path) -> Path:
    return project / MANIFEST_FILE


def tasks_path(project: Path) -> Path:
    return project / TASKS_FILE


def decisions_path(project: Path) -> Path:
    return project / DECISIONS_FILE


def summary_path(project: Path) -> Path:
    return project / SUMMARY_FILE


def calls_log_path(project: Path) -> Path:
    return project / CALLS_LOG_FILE


def readme_path(project: Path) -> Path:
    return project / README_FILE


def errors_path(project: Path) -> Path:
    return learnings_dir(project) / ERRORS_FILE


def learnings_path(project: Path) -> Path:
    return learnings_dir(project) / LEARNINGS_FILE


def feature_requests_path(project: Path) -> Path:
    return learnings_dir(project) / FEATURE_REQUESTS_FILE


def ensure_workspace_directories(project: Path) -> None:
    """Create all standard directories for a new workspace."""
    for dir_fn in [files_dir, learnings_dir]:
        dir_fn(project).mkdir(parents=True, exist_ok=True)


# --- Reserved paths ---

RESERVED_FILES = frozenset({
    WORKSPACE_FILE,
    MANIFEST_FILE,
    TASKS_FILE,
    DECISIONS_FILE,
    SUMMARY_FILE,
    CALLS_LOG_FILE,
})
RESERVED_DIRS = (FILES_DIR, LEARNINGS_DIR)


def is_reserved(relative: str) -> bool:
    """True if a project-relative path collides with workspace bookkeeping.

    Compared case-insensitively so case-folding filesystems are covered.
    """
    folded = relative.casefold()
    if folded in {name.casefold() for name in RESERVED_FILES}:
        return True
    head = folded.split("/", 1)[0]
    return head in {name.casefold() for name in RESERVED_DIRS}
