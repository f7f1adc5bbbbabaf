# src/core/models.py — v2
"""Shared Pydantic domain models: Role, Manifest, Artifact, DecisionRecord.

No module redefines these types — all imports come from core.models.
Manifest invariants (unique ids, known dependencies, single owner per
output path, no output over workspace files) are enforced at construction;
dependency cycles are left to the scheduler, which reports them as
CyclicManifestError.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from swarmcoder.core.errors import ManifestValidationError
from swarmcoder.storage import layout

SCHEDULER_AUTHOR = "Orchestrator"


def normalize_path(raw: str) -> str:
    """Normalize a relative artifact path.

    Strips surrounding whitespace, converts backslashes, and removes a
    leading ``./`` or ``/``. Raises ValueError for empty paths or paths
    escaping the project root.
    """
    path = raw.strip().replace("\\", "/")
    while path.startswith("./"):
        path = path[2:]
    path = path.lstrip("/")
    if not path:
        raise ValueError(f"Empty artifact path: {raw!r}")
    if any(part == ".." for part in path.split("/")):
        raise ValueError(f"Artifact path escapes project root: {raw!r}")
    return path


def _unique(items: list[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


# === MANIFEST ===


class Role(BaseModel):
    """A unit of generation work with declared file ownership."""

    model_config = {"frozen": True}

    id: str
    name: str
    outputs: list[str] = Field(default_factory=list)
    depends_on: list[str] = Field(default_factory=list)

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        """Role ids name a directory under files/, so they must be one segment."""
        v = v.strip()
        if not v:
            raise ValueError("role id must not be empty")
        if v in (".", "..") or "/" in v or "\\" in v:
            raise ValueError(f"role id must be a single path segment: {v!r}")
        return v

    @field_validator("outputs")
    @classmethod
    def validate_outputs(cls, v: list[str]) -> list[str]:
        """Outputs are an ordered set of normalized relative paths."""
        return _unique([normalize_path(p) for p in v])

    @field_validator("depends_on")
    @classmethod
    def validate_depends_on(cls, v: list[str]) -> list[str]:
        return _unique([d.strip() for d in v])


class Manifest(BaseModel):
    """Validated dependency graph of roles for one run."""

    model_config = {"frozen": True}

    project_name: str
    tech_stack: dict[str, Any] = Field(default_factory=dict)
    roles: list[Role]
    shared_files: list[str] = Field(default_factory=list)
    constraints: list[str] = Field(default_factory=list)

    @field_validator("shared_files")
    @classmethod
    def validate_shared_files(cls, v: list[str]) -> list[str]:
        return _unique([normalize_path(p) for p in v])

    @model_validator(mode="after")
    def validate_graph(self) -> Manifest:
        """Check unique ids, known dependencies and output ownership."""
        errors: list[str] = []

        if not self.roles:
            errors.append("Manifest declares no roles")

        ids: set[str] = set()
        for role in self.roles:
            if role.id in ids:
                errors.append(f"Duplicate role id '{role.id}'")
            ids.add(role.id)

        for role in self.roles:
            for dep in role.depends_on:
                if dep not in ids:
                    errors.append(
                        f"Role '{role.id}' depends on '{dep}' which is not declared"
                    )

        owners: dict[str, str] = {}
        for role in self.roles:
            for path in role.outputs:
                if path in owners and owners[path] != role.id:
                    errors.append(
                        f"Output '{path}' declared by both '{owners[path]}' and '{role.id}'"
                    )
                else:
                    owners[path] = role.id
        for path in self.shared_files:
            if path in owners:
                errors.append(
                    f"Shared file '{path}' is also owned by role '{owners[path]}'"
                )

        for path in [*owners, *self.shared_files]:
            if layout.is_reserved(path):
                errors.append(f"Path '{path}' is reserved by the workspace")

        if errors:
            raise ManifestValidationError("; ".join(errors))
        return self

    # --- Helpers ---

    @property
    def role_ids(self) -> list[str]:
        """Role ids in declaration order."""
        return [r.id for r in self.roles]

    def get_role(self, role_id: str) -> Role:
        for role in self.roles:
            if role.id == role_id:
                return role
        raise KeyError(role_id)

    def dependents_of(self, role_id: str) -> list[str]:
        """Roles listing role_id as a dependency, in declaration order."""
        return [r.id for r in self.roles if role_id in r.depends_on]

    def owner_of(self, path: str) -> str | None:
        """Return the id of the role owning path, if any."""
        normalized = normalize_path(path)
        for role in self.roles:
            if normalized in role.outputs:
                return role.id
        return None


def parse_manifest(data: dict[str, Any]) -> Manifest:
    """Build a Manifest from a raw mapping.

    Raises:
        ManifestValidationError: If the mapping does not describe a valid manifest.
    """
    try:
        return Manifest.model_validate(data)
    except ValidationError as exc:
        raise ManifestValidationError(f"Invalid manifest: {exc}") from exc


# === EXECUTION ===


class RoleStatus(str, Enum):
    """Per-role scheduler state: PENDING → READY → RUNNING → DONE | FAILED."""

    PENDING = "pending"
    READY = "ready"
    RUNNING = "running"
    DONE = "done"
    FAILED = "failed"


# === GENERATION OUTPUT ===


class Artifact(BaseModel):
    """A file produced by a role."""

    model_config = {"frozen": True}

    path: str
    content: str


class DecisionRecord(BaseModel):
    """An architectural decision, recorded once and never edited."""

    model_config = {"frozen": True}

    author: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    what: str
    why: str
