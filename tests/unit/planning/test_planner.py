# tests/unit/planning/test_planner.py — v1
"""Tests for planning/planner.py — prompt to validated manifest."""

from __future__ import annotations

import json

import pytest

from swarmcoder.core.errors import ManifestValidationError, PlanningError
from swarmcoder.llm.adapters.mock_adapter import MOCK_MANIFEST, MockAdapter
from swarmcoder.planning.planner import Planner, extract_json
from swarmcoder.storage.models import Workspace
from swarmcoder.tracking.call_logger import CallLogger
from swarmcoder.tracking.ledger import RunLedger
from swarmcoder.tracking.models import LedgerStream

MANIFEST = {
    "project_name": "Todo",
    "tech_stack": {"backend": "FastAPI", "frontend": "Svelte", "language": "Python"},
    "roles": [
        {"id": "backend-dev", "name": "BackendDev", "outputs": ["main.py"]},
        {"id": "qa", "name": "QA", "outputs": ["test_main.py"], "depends_on": ["backend-dev"]},
    ],
}


def _ledger(workspace: Workspace) -> RunLedger:
    ledger = RunLedger(workspace.project_dir)
    ledger.initialize(workspace.prompt)
    return ledger


class TestExtractJson:
    def test_bare(self):
        assert extract_json('{"a": 1}') == {"a": 1}

    def test_fenced(self):
        assert extract_json('Here:\n```json\n{"a": 1}\n```\nDone.') == {"a": 1}

    def test_embedded(self):
        assert extract_json('Sure! {"a": {"b": 2}} hope that helps') == {"a": {"b": 2}}

    def test_garbage(self):
        with pytest.raises(PlanningError):
            extract_json("I cannot do that")

    def test_array_rejected(self):
        with pytest.raises(PlanningError):
            extract_json("[1, 2]")


class TestPlanner:
    @pytest.mark.asyncio
    async def test_plan_from_mock(self, workspace: Workspace):
        llm = MockAdapter()
        manifest = await Planner(llm).plan("a dashboard", _ledger(workspace))
        assert manifest.project_name == MOCK_MANIFEST["project_name"]
        assert manifest.role_ids[0] == "backend-dev"
        assert llm.calls[0][0].role == "system"
        assert '"a dashboard"' in llm.calls[0][1].content

    @pytest.mark.asyncio
    async def test_uses_planner_temperature(self, mock_llm):
        mock_llm.complete.return_value.content = json.dumps(MANIFEST)
        await Planner(mock_llm, temperature=0.4, max_tokens=900).plan("todo")
        kwargs = mock_llm.complete.call_args.kwargs
        assert kwargs["temperature"] == 0.4
        assert kwargs["max_tokens"] == 900

    @pytest.mark.asyncio
    async def test_decisions_from_response(self, mock_llm, workspace: Workspace):
        data = dict(MANIFEST, decisions=[{"what": "FastAPI", "why": "async and typed"}])
        mock_llm.complete.return_value.content = json.dumps(data)
        ledger = _ledger(workspace)
        await Planner(mock_llm).plan("todo", ledger)

        text = ledger.path(LedgerStream.DECISIONS).read_text(encoding="utf-8")
        assert "— Planner" in text
        assert "**Decision:** FastAPI" in text
        assert "Assigned 2 roles: backend-dev, qa" in text
        assert ledger.count(LedgerStream.DECISIONS) == 2

    @pytest.mark.asyncio
    async def test_stack_decision_fallback(self, mock_llm, workspace: Workspace):
        mock_llm.complete.return_value.content = json.dumps(MANIFEST)
        ledger = _ledger(workspace)
        await Planner(mock_llm).plan("todo", ledger)
        text = ledger.path(LedgerStream.DECISIONS).read_text(encoding="utf-8")
        assert "Tech stack: FastAPI + Svelte" in text

    @pytest.mark.asyncio
    async def test_unparseable_output(self, mock_llm):
        mock_llm.complete.return_value.content = "no json here"
        with pytest.raises(PlanningError):
            await Planner(mock_llm).plan("todo")

    @pytest.mark.asyncio
    async def test_invalid_manifest(self, mock_llm):
        bad = dict(MANIFEST, roles=[{"id": "a", "name": "A", "depends_on": ["ghost"]}])
        mock_llm.complete.return_value.content = json.dumps(bad)
        with pytest.raises(ManifestValidationError, match="ghost"):
            await Planner(mock_llm).plan("todo")

    @pytest.mark.asyncio
    async def test_call_failure_wrapped(self, mock_llm):
        mock_llm.complete.side_effect = ConnectionError("refused")
        calls = CallLogger()
        with pytest.raises(PlanningError, match="refused"):
            await Planner(mock_llm, call_logger=calls).plan("todo")
        assert calls.records[0].author == "Planner"
        assert calls.records[0].status == "failed"
