# src/storage/run_manager.py — v3
"""Workspace lifecycle: create, persist run state and manifest, assemble.

Assembly is a pure copy keyed by each role's declared outputs: a file a
role wrote but did not declare stays in its role directory, and no output
ever replaces a workspace bookkeeping file.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from swarmcoder.core.errors import ManifestValidationError
from swarmcoder.core.models import Manifest, parse_manifest
from swarmcoder.storage import layout
from swarmcoder.storage.base_output_writer import BaseOutputWriter
from swarmcoder.storage.models import RunState, Workspace

logger = logging.getLogger(__name__)

README_TEMPLATE = """# {project_name}

{prompt}

## Tech Stack
{tech_stack}

## Roles
{roles}

_Generated by swarmcoder_
"""


def generate_project_id(timestamp: datetime | None = None) -> str:
    """Generate a project_id: swarm-YYYY-MM-DDTHH-MM-SS."""
    ts = timestamp or datetime.now(timezone.utc)
    return f"swarm-{ts.strftime('%Y-%m-%dT%H-%M-%S')}"


async def create_workspace(
    writer: BaseOutputWriter,
    workspace_root: Path,
    prompt: str,
    project_id: str | None = None,
) -> Workspace:
    """Create a new workspace directory with an empty run state.

    Args:
        writer: Output writer backend.
        workspace_root: Directory holding all workspaces.
        prompt: Natural-language project description.
        project_id: Explicit id (generated from the clock if None).

    Returns:
        The new Workspace.
    """
    started = datetime.now(timezone.utc)
    pid = project_id or generate_project_id(started)
    project = layout.project_dir(workspace_root, pid)
    layout.ensure_workspace_directories(project)

    workspace = Workspace(
        project_id=pid, project_dir=project, prompt=prompt, started_at=started,
    )
    await writer.write(
        str(layout.workspace_path(project)), workspace.model_dump_json(indent=2),
    )
    await save_run_state(writer, workspace, RunState())
    logger.info("Workspace: %s", project)
    return workspace


def open_workspace(project: Path) -> Workspace:
    """Re-open an existing workspace (for resume).

    Raises:
        FileNotFoundError: If project holds no workspace record.
    """
    path = layout.workspace_path(project)
    if not path.exists():
        raise FileNotFoundError(f"Not a swarm workspace: {project}")
    workspace = Workspace.model_validate_json(path.read_text(encoding="utf-8"))
    # The directory may have moved since creation.
    return workspace.model_copy(update={"project_dir": project})


async def save_run_state(
    writer: BaseOutputWriter, workspace: Workspace, state: RunState,
) -> None:
    """Persist RunState to tasks.json."""
    await writer.write(
        str(layout.tasks_path(workspace.project_dir)), state.model_dump_json(indent=2),
    )


def load_run_state(workspace: Workspace) -> RunState:
    """Load RunState from tasks.json (empty state if missing)."""
    path = layout.tasks_path(workspace.project_dir)
    if not path.exists():
        return RunState()
    return RunState.model_validate_json(path.read_text(encoding="utf-8"))


async def save_manifest(
    writer: BaseOutputWriter, workspace: Workspace, manifest: Manifest,
) -> Path:
    path = layout.manifest_path(workspace.project_dir)
    await writer.write(str(path), manifest.model_dump_json(indent=2))
    return path


def load_manifest(path: Path) -> Manifest:
    """Load and validate a manifest JSON document.

    Raises:
        ManifestValidationError: If the file is not valid JSON or not a valid manifest.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ManifestValidationError(f"Manifest {path} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise ManifestValidationError(f"Manifest {path} must be a JSON object")
    return parse_manifest(data)


async def assemble_project(
    writer: BaseOutputWriter, workspace: Workspace, manifest: Manifest,
) -> list[str]:
    """Copy every declared output from its role directory to the project root.

    Returns:
        Project-relative paths copied, in manifest order.
    """
    logger.info("Assembling project...")
    project = workspace.project_dir
    copied: list[str] = []

    for role in manifest.roles:
        for out in role.outputs:
            if layout.is_reserved(out):
                logger.error("Refusing to assemble %s from %s: reserved path", out, role.id)
                continue
            src = layout.role_artifact_path(project, role.id, out)
            if not await writer.exists(str(src)):
                logger.warning("Declared output %s missing from %s", out, role.id)
                continue
            await writer.copy(str(src), str(layout.project_artifact_path(project, out)))
            logger.debug("Copied %s from %s", out, role.id)
            copied.append(out)

    if layout.README_FILE not in copied:
        await writer.write(
            str(layout.readme_path(project)), render_readme(manifest, workspace.prompt),
        )
    logger.info("Project assembled at %s (%d files)", project, len(copied))
    return copied


def render_readme(manifest: Manifest, prompt: str) -> str:
    tech = "\n".join(f"- {k}: {v}" for k, v in manifest.tech_stack.items()) or "- n/a"
    roles = "\n".join(f"- {r.name} ({r.id}): {', '.join(r.outputs)}" for r in manifest.roles)
    return README_TEMPLATE.format(
        project_name=manifest.project_name, prompt=prompt, tech_stack=tech, roles=roles,
    )
