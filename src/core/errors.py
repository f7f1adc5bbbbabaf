# src/core/errors.py — v1
"""Error taxonomy for a swarm run.

Every error here is fatal to the run: it propagates to the top level,
the ledger and the partial artifact tree stay on disk, and the CLI
exits non-zero.
"""

from __future__ import annotations


class SwarmError(Exception):
    """Base class for all swarmcoder run failures."""


class ManifestValidationError(SwarmError):
    """Manifest is malformed: unknown dependency, duplicate id, shared output path."""


class CyclicManifestError(ManifestValidationError):
    """Role dependencies contain a cycle; no role can be scheduled."""

    def __init__(self, unscheduled: list[str], cycle: list[str] | None = None) -> None:
        self.unscheduled = unscheduled
        self.cycle = cycle or []
        detail = f" (cycle: {' -> '.join(self.cycle)})" if self.cycle else ""
        super().__init__(
            f"Cycle detected, roles never became ready: {unscheduled}{detail}"
        )


class PlanningError(ManifestValidationError):
    """Planner response could not be turned into a manifest."""


class GenerationError(SwarmError):
    """Generation service failed for a role (transport or service error)."""

    def __init__(self, role_id: str, message: str) -> None:
        self.role_id = role_id
        super().__init__(f"Role '{role_id}': {message}")


class NoArtifactsError(GenerationError):
    """Service responded but the output protocol yielded zero files."""

    def __init__(self, role_id: str, reason: str) -> None:
        self.reason = reason
        super().__init__(role_id, f"no file blocks found ({reason})")
