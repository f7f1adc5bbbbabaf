# src/pipeline/scheduler.py — v1
"""Dependency scheduler — run manifest roles one at a time in DAG order.

The plan is built before anything runs, so a cyclic manifest fails with
zero invocations. Roles run strictly sequentially, each only after all
of its dependencies are DONE. The first failure stops the run: later
roles are never started, earlier results stay on disk, and the error is
re-raised to the caller. Roles already recorded as completed in the
RunState are skipped, which makes a second pass over the same
workspace a resume.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from swarmcoder.core.models import SCHEDULER_AUTHOR, Manifest, Role, RoleStatus
from swarmcoder.llm.error_classifier import classify_error, is_transient
from swarmcoder.logging.context import set_role_context
from swarmcoder.pipeline.dag_builder import build_plan
from swarmcoder.tracking.models import RoleOutcome

if TYPE_CHECKING:
    from swarmcoder.pipeline.worker import WorkerInvoker, WorkerResult
    from swarmcoder.storage.models import RunState
    from swarmcoder.tracking.ledger import RunLedger

logger = logging.getLogger(__name__)

PersistFn = Callable[["RunState"], Awaitable[None]]


class DependencyScheduler:
    """Drive roles through PENDING → READY → RUNNING → DONE | FAILED.

    Args:
        invoker: Worker invoker for role calls.
        ledger: Run ledger receiving errors, learnings and decisions.
        run_state: Persistent progress record (mutated in place).
        persist: Coroutine saving run_state, called after every role.
    """

    def __init__(
        self,
        invoker: WorkerInvoker,
        ledger: RunLedger,
        run_state: RunState,
        persist: PersistFn | None = None,
    ) -> None:
        self._invoker = invoker
        self._ledger = ledger
        self._state = run_state
        self._persist = persist
        self._outcomes: dict[str, RoleOutcome] = {}

    @property
    def outcomes(self) -> list[RoleOutcome]:
        """Current outcome per role, in manifest order."""
        return list(self._outcomes.values())

    def status(self, role_id: str) -> RoleStatus:
        return self._outcomes[role_id].status

    async def run(self, manifest: Manifest, strict: bool = False) -> list[str]:
        """Run every not-yet-completed role of the manifest.

        Args:
            manifest: Validated manifest.
            strict: Forwarded to the invoker (stricter instructions).

        Returns:
            Ids of roles invoked by this call, in execution order.

        Raises:
            CyclicManifestError: Before any invocation, if the graph has a cycle.
            Exception: Whatever the first failing role raised.
        """
        plan = build_plan(manifest)
        self._outcomes = {
            r.id: RoleOutcome(role_id=r.id, name=r.name) for r in manifest.roles
        }
        for record in self._state.tasks:
            if record.status == "done" and record.role_id in self._outcomes:
                self._outcomes[record.role_id].artifact_count = record.artifact_count
        for role_id in self._state.completed:
            if role_id in self._outcomes:
                self._outcomes[role_id].status = RoleStatus.DONE
        self._promote_ready(manifest)

        start = time.monotonic()
        invoked: list[str] = []
        for idx, role_id in enumerate(plan.order, start=1):
            role = manifest.get_role(role_id)
            if self._state.is_completed(role_id):
                logger.info("[%d/%d] %s already completed, skipping", idx, plan.total_roles, role_id)
                continue

            if self.status(role_id) is not RoleStatus.READY:
                raise RuntimeError(f"Role '{role_id}' scheduled before its dependencies")

            logger.info("[%d/%d] Running %s (%s)", idx, plan.total_roles, role.name, role_id)
            self._outcomes[role_id].status = RoleStatus.RUNNING
            invoked.append(role_id)
            try:
                result = await self._invoker.invoke(role, manifest, strict=strict)
            except Exception as exc:
                await self._on_failure(role, exc)
                raise
            finally:
                set_role_context(None)
            await self._on_success(role, result)
            self._promote_ready(manifest)

        logger.info(
            "Scheduler complete: %d invoked, %d skipped, %.1fs",
            len(invoked), plan.total_roles - len(invoked), time.monotonic() - start,
        )
        return invoked

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _promote_ready(self, manifest: Manifest) -> None:
        """Move PENDING roles whose dependencies are all DONE to READY."""
        for role in manifest.roles:
            outcome = self._outcomes[role.id]
            if outcome.status is not RoleStatus.PENDING:
                continue
            if all(self.status(dep) is RoleStatus.DONE for dep in role.depends_on):
                outcome.status = RoleStatus.READY

    async def _on_success(self, role: Role, result: WorkerResult) -> None:
        outcome = self._outcomes[role.id]
        outcome.status = RoleStatus.DONE
        outcome.artifact_count = len(result.artifacts)
        self._state.mark_done(role.id, result.paths)
        await self._save()

        self._ledger.record_decisions(result.decisions)
        if result.generic_guidance:
            self._ledger.log_feature_request(
                SCHEDULER_AUTHOR,
                f"Dedicated guidance for role '{role.id}'",
                f"{role.name} ran with the generic guidance template.",
            )
        if result.warnings:
            self._ledger.log_learning(
                role.id,
                f"Protocol issues in {role.id} output",
                "\n".join(f"- {w}" for w in result.warnings),
                category="protocol",
            )
        logger.info("%s done (%d files)", role.id, outcome.artifact_count)

    async def _on_failure(self, role: Role, exc: BaseException) -> None:
        message = str(exc)
        outcome = self._outcomes[role.id]
        outcome.status = RoleStatus.FAILED
        outcome.error = message
        self._state.mark_failed(role.id, message)
        await self._save()

        cause = exc.__cause__ or exc
        error_type = classify_error(cause)
        logger.error("%s failed (%s): %s", role.id, error_type, message)

        self._ledger.log_error(
            role.id, message, context=f"Task: {', '.join(role.outputs) or 'no outputs'}",
        )
        self._ledger.log_learning(
            SCHEDULER_AUTHOR,
            f"Role {role.id} failed",
            (
                f"Error ({error_type}): {message}\n\n"
                "Consider: (1) breaking the task into smaller pieces, "
                "(2) providing more context in the instruction, "
                "(3) switching to a different model."
            ),
            category="error_pattern",
        )
        if is_transient(cause):
            self._ledger.log_learning(
                SCHEDULER_AUTHOR,
                "Transient generation failure",
                f"{role.id} hit a {error_type} error; a resumed run may succeed unchanged.",
                category="best_practice",
            )

    async def _save(self) -> None:
        if self._persist is not None:
            await self._persist(self._state)
