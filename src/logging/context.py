# src/logging/context.py — v2
"""Contextual logging support — attach project_id, role, step to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per swarm run.
_project_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "project_id", default=None
)
_role: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "role", default=None
)
_step: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "step", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    project_id: str | None = None
    role: str | None = None
    step: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(
        project_id=_project_id.get(),
        role=_role.get(),
        step=_step.get(),
    )


def set_project_context(project_id: str) -> None:
    """Set run-level context (called once per workspace)."""
    _project_id.set(project_id)


def set_role_context(role: str | None, step: str | None = None) -> None:
    """Set role-level context (called per role invocation)."""
    _role.set(role)
    _step.set(step)


def clear_context() -> None:
    """Reset all context variables."""
    _project_id.set(None)
    _role.set(None)
    _step.set(None)
