# tests/integration/test_int_swarm_run.py — v1
"""End-to-end swarm run against the offline mock adapter.

Exercises planner → scheduler → worker → assembly → summary with real
filesystem I/O and no network.
"""

from __future__ import annotations

import json

import pytest

from swarmcoder.config.settings import Settings
from swarmcoder.llm.adapters.mock_adapter import MOCK_MANIFEST, MockAdapter
from swarmcoder.llm.client_factory import client_for
from swarmcoder.pipeline.orchestrator import SwarmOrchestrator
from swarmcoder.storage import layout
from swarmcoder.storage.run_manager import load_run_state
from swarmcoder.tracking.ledger import RunLedger
from swarmcoder.tracking.models import LedgerStream

EXPECTED_ORDER = ["backend-dev", "frontend-dev", "blockchain-dev", "qa", "devops"]


@pytest.fixture
def mock_settings(tmp_path) -> Settings:
    return Settings(_env_file=None, mock=True, workspace_root=tmp_path / "projects")


class TestMockSwarmRun:
    @pytest.mark.asyncio
    async def test_full_run(self, mock_settings: Settings):
        llm = client_for("worker", mock_settings)
        assert isinstance(llm, MockAdapter)
        orch = SwarmOrchestrator(mock_settings, planner_llm=llm, worker_llm=llm)

        report = await orch.run("a token dashboard with Privy login")
        project = report.project_dir

        # Workspace layout
        assert project.parent == mock_settings.workspace_root
        assert project.name.startswith("swarm-")
        for path in (
            layout.manifest_path(project),
            layout.tasks_path(project),
            layout.decisions_path(project),
            layout.summary_path(project),
            layout.calls_log_path(project),
            layout.errors_path(project),
            layout.learnings_path(project),
            layout.feature_requests_path(project),
        ):
            assert path.exists(), path

        # Planner call first, then one call per role
        assert len(llm.calls) == 1 + len(EXPECTED_ORDER)
        worker_roles = [
            next(line for line in call[-1].content.splitlines() if line.startswith("Role:"))
            for call in llm.calls[1:]
        ]
        assert [r.split("(")[-1].rstrip(")") for r in worker_roles] == EXPECTED_ORDER

        # Assembly copies each role's declared outputs only
        declared = [p for r in MOCK_MANIFEST["roles"] for p in r["outputs"]]
        assert report.assembled == declared
        for rel in declared:
            assert (project / rel).exists(), rel
        assert (project / "README.md").exists()

        # Run state
        state = load_run_state(report.workspace)
        assert state.completed == EXPECTED_ORDER
        assert all(t.status == "done" for t in state.tasks)

        # Ledger: planner decisions + one decision per role
        ledger = RunLedger(project)
        assert ledger.count(LedgerStream.ERRORS) == 0
        assert ledger.count(LedgerStream.DECISIONS) == 2 + len(EXPECTED_ORDER)

        # Summary
        summary = layout.summary_path(project).read_text(encoding="utf-8")
        assert summary.count("✓ success") == len(EXPECTED_ORDER)
        assert "**Project:** Privy Dashboard" in summary

        # Stored manifest matches the plan
        stored = json.loads(layout.manifest_path(project).read_text(encoding="utf-8"))
        assert [r["id"] for r in stored["roles"]] == [r["id"] for r in MOCK_MANIFEST["roles"]]
