# src/pipeline/orchestrator.py — v2
"""Swarm orchestrator — plan, schedule, assemble, summarize.

Drives one run end to end:
  1. Workspace: create (or re-open for resume) and initialize the ledger
  2. Plan: prompt → manifest (skipped when a manifest is supplied)
  3. Schedule: roles in dependency order, fail-fast
  4. Assemble: declared outputs copied to the project root

The summary and the call log are written whether the run succeeds or
not. A failed scheduling pass may be retried once (MAX_RUN_ATTEMPTS=2)
on the same workspace; completed roles are never invoked again.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING

from swarmcoder.core.errors import GenerationError
from swarmcoder.core.models import SCHEDULER_AUTHOR, Manifest
from swarmcoder.llm.client_factory import client_for
from swarmcoder.logging.context import set_project_context
from swarmcoder.pipeline.scheduler import DependencyScheduler
from swarmcoder.pipeline.worker import WorkerInvoker
from swarmcoder.planning.planner import Planner
from swarmcoder.storage import layout
from swarmcoder.storage.local_writer import LocalWriter
from swarmcoder.storage.models import RunState, Workspace
from swarmcoder.storage.run_manager import (
    assemble_project,
    create_workspace,
    load_manifest,
    load_run_state,
    open_workspace,
    save_manifest,
    save_run_state,
)
from swarmcoder.tracking.call_logger import CallLogger
from swarmcoder.tracking.ledger import RunLedger
from swarmcoder.tracking.models import RoleOutcome
from swarmcoder.tracking.summary import render_summary, write_summary

if TYPE_CHECKING:
    from swarmcoder.config.settings import Settings
    from swarmcoder.llm.base_client import BaseLLMClient
    from swarmcoder.storage.base_output_writer import BaseOutputWriter

logger = logging.getLogger(__name__)


@dataclass
class RunReport:
    """Result of a successful run."""

    workspace: Workspace
    manifest: Manifest
    outcomes: list[RoleOutcome] = field(default_factory=list)
    assembled: list[str] = field(default_factory=list)
    attempts: int = 1
    calls: int = 0

    @property
    def project_dir(self) -> Path:
        return self.workspace.project_dir

    @property
    def total_files(self) -> int:
        return sum(o.artifact_count for o in self.outcomes)


class SwarmOrchestrator:
    """Top-level driver for a swarm run.

    Args:
        settings: Application settings.
        planner_llm: Planner client (routed from settings if None).
        worker_llm: Worker client (routed from settings if None).
        writer: Artifact sink (local filesystem by default).
    """

    def __init__(
        self,
        settings: Settings,
        planner_llm: BaseLLMClient | None = None,
        worker_llm: BaseLLMClient | None = None,
        writer: BaseOutputWriter | None = None,
    ) -> None:
        self._settings = settings
        self._planner_llm = planner_llm
        self._worker_llm = worker_llm or client_for("worker", settings)
        self._writer = writer or LocalWriter()
        self.workspace: Workspace | None = None

    async def run(
        self,
        prompt: str,
        manifest: Manifest | None = None,
        project_id: str | None = None,
    ) -> RunReport:
        """Execute a new run in a fresh workspace.

        Args:
            prompt: Natural-language project description.
            manifest: Pre-built manifest; the planner is skipped when given.
            project_id: Explicit workspace id (timestamped if None).

        Raises:
            SwarmError: Planning, validation or generation failure (after
                the summary has been written).
        """
        workspace = await create_workspace(
            self._writer, self._settings.workspace_root, prompt, project_id,
        )
        ledger = self._open_ledger(workspace)
        if manifest is not None:
            ledger.decide(
                f"Using supplied manifest '{manifest.project_name}'",
                "Manifest provided by the caller; planning skipped",
            )
        return await self._drive(workspace, ledger, RunState(), manifest)

    async def resume(self, project_dir: Path) -> RunReport:
        """Continue a failed run: completed roles are skipped.

        Raises:
            FileNotFoundError: project_dir is not a swarm workspace.
            ManifestValidationError: The stored manifest is invalid.
        """
        stored = open_workspace(project_dir)
        workspace = stored.model_copy(update={"started_at": datetime.now(timezone.utc)})
        manifest = load_manifest(layout.manifest_path(project_dir))
        state = load_run_state(workspace)
        ledger = self._open_ledger(workspace)
        ledger.decide(
            f"Resumed run with {len(state.completed)}/{len(manifest.roles)} roles completed",
            "Completed roles are kept; remaining roles run in dependency order",
        )
        return await self._drive(workspace, ledger, state, manifest)

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _open_ledger(self, workspace: Workspace) -> RunLedger:
        self.workspace = workspace
        set_project_context(workspace.project_id)
        ledger = RunLedger(workspace.project_dir)
        ledger.initialize(workspace.prompt)
        return ledger

    async def _drive(
        self,
        workspace: Workspace,
        ledger: RunLedger,
        state: RunState,
        manifest: Manifest | None,
    ) -> RunReport:
        start = time.monotonic()
        call_logger = CallLogger()
        scheduler: DependencyScheduler | None = None

        try:
            if manifest is None:
                manifest = await self._make_planner(call_logger).plan(workspace.prompt, ledger)
            await save_manifest(self._writer, workspace, manifest)

            invoker = WorkerInvoker(
                self._worker_llm,
                self._writer,
                workspace,
                call_logger=call_logger,
                temperature=self._settings.worker_temperature,
                max_tokens=self._settings.llm_max_tokens,
            )

            async def persist(run_state: RunState) -> None:
                await save_run_state(self._writer, workspace, run_state)

            scheduler = DependencyScheduler(invoker, ledger, state, persist=persist)
            attempts = await self._schedule(scheduler, manifest, ledger)
            assembled = await assemble_project(self._writer, workspace, manifest)

        except Exception as exc:
            # The scheduler already logged role failures.
            if not isinstance(exc, GenerationError):
                ledger.log_error(SCHEDULER_AUTHOR, str(exc), context=type(exc).__name__)
            logger.error("Run failed: %s (partial results in %s)", exc, workspace.project_dir)
            raise

        finally:
            if manifest is not None:
                self._write_summary(workspace, manifest, scheduler, ledger)
            call_logger.save(layout.calls_log_path(workspace.project_dir))

        logger.info(
            "Run complete: %d roles, %d files assembled, %d calls, %.1fs",
            len(manifest.roles), len(assembled), call_logger.total_calls,
            time.monotonic() - start,
        )
        return RunReport(
            workspace=workspace,
            manifest=manifest,
            outcomes=scheduler.outcomes,
            assembled=assembled,
            attempts=attempts,
            calls=call_logger.total_calls,
        )

    async def _schedule(
        self,
        scheduler: DependencyScheduler,
        manifest: Manifest,
        ledger: RunLedger,
    ) -> int:
        """Run the scheduler, retrying the whole pass if allowed.

        Returns:
            Number of attempts used.
        """
        max_attempts = self._settings.max_run_attempts
        for attempt in range(1, max_attempts + 1):
            try:
                await scheduler.run(manifest, strict=attempt > 1)
                return attempt
            except GenerationError as exc:
                if attempt >= max_attempts:
                    raise
                logger.warning(
                    "Attempt %d/%d failed (%s); retrying with stricter instructions",
                    attempt, max_attempts, exc,
                )
                ledger.log_learning(
                    SCHEDULER_AUTHOR,
                    "Whole-run retry",
                    f"Attempt {attempt} failed: {exc}\n\n"
                    "Retried once with a stricter output-format reminder; "
                    "completed roles were kept.",
                    category="best_practice",
                )
        raise RuntimeError("max_run_attempts must be >= 1")

    def _make_planner(self, call_logger: CallLogger) -> Planner:
        if self._planner_llm is None:
            self._planner_llm = client_for("planner", self._settings)
        return Planner(
            self._planner_llm,
            call_logger=call_logger,
            temperature=self._settings.planner_temperature,
            max_tokens=self._settings.llm_max_tokens,
        )

    def _write_summary(
        self,
        workspace: Workspace,
        manifest: Manifest,
        scheduler: DependencyScheduler | None,
        ledger: RunLedger,
    ) -> None:
        outcomes = scheduler.outcomes if scheduler is not None else []
        if not outcomes:
            outcomes = [RoleOutcome(role_id=r.id, name=r.name) for r in manifest.roles]
        content = render_summary(workspace, manifest, outcomes, ledger.counts())
        write_summary(layout.summary_path(workspace.project_dir), content)
