# src/storage/models.py — v2
"""Storage domain models: Workspace, TaskRecord, RunState."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field


class Workspace(BaseModel):
    """On-disk location and identity of one swarm run."""

    project_id: str
    project_dir: Path
    prompt: str
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class TaskRecord(BaseModel):
    """Outcome of one role invocation, in execution order."""

    role_id: str
    status: Literal["done", "failed"]
    artifact_count: int = 0
    files: list[str] = Field(default_factory=list)
    error: str | None = None


class RunState(BaseModel):
    """Persistent run progress, written to tasks.json after every role.

    ``completed`` only grows; nothing is ever rolled back, so a failed
    run leaves a truthful partial record.
    """

    completed: list[str] = Field(default_factory=list)
    tasks: list[TaskRecord] = Field(default_factory=list)

    def is_completed(self, role_id: str) -> bool:
        return role_id in self.completed

    def mark_done(self, role_id: str, files: list[str]) -> TaskRecord:
        record = TaskRecord(
            role_id=role_id, status="done", artifact_count=len(files), files=list(files),
        )
        self.tasks.append(record)
        if role_id not in self.completed:
            self.completed.append(role_id)
        return record

    def mark_failed(self, role_id: str, error: str) -> TaskRecord:
        record = TaskRecord(role_id=role_id, status="failed", error=error)
        self.tasks.append(record)
        return record

    @property
    def total_files(self) -> int:
        return sum(t.artifact_count for t in self.tasks if t.status == "done")
