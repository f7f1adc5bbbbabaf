# tests/unit/pipeline/test_worker.py — v1
"""Tests for pipeline/worker.py — one call per role, raw output persisted."""

from __future__ import annotations

import pytest

from swarmcoder.core.errors import GenerationError, NoArtifactsError
from swarmcoder.core.models import Manifest
from swarmcoder.pipeline.worker import WorkerInvoker
from swarmcoder.storage import layout
from swarmcoder.storage.local_writer import LocalWriter
from swarmcoder.storage.models import Workspace
from swarmcoder.tracking.call_logger import CallLogger


def _invoker(llm, workspace: Workspace, call_logger: CallLogger | None = None) -> WorkerInvoker:
    return WorkerInvoker(
        llm, LocalWriter(), workspace, call_logger=call_logger, temperature=0.25, max_tokens=1000,
    )


class TestWorkerInvoker:
    @pytest.mark.asyncio
    async def test_success_writes_role_scoped_artifacts(
        self, diamond_manifest: Manifest, diamond_script, scripted_llm, workspace: Workspace,
    ):
        llm = scripted_llm(diamond_script)
        result = await _invoker(llm, workspace).invoke(diamond_manifest.get_role("A"), diamond_manifest)

        assert llm.calls == ["A"]
        assert result.paths == ["a.txt"]
        written = layout.role_artifact_path(workspace.project_dir, "A", "a.txt")
        assert written.read_text(encoding="utf-8") == "content of A"
        assert [d.what for d in result.decisions] == ["A decision"]
        assert result.decisions[0].author == "A"

    @pytest.mark.asyncio
    async def test_raw_output_persisted(
        self, diamond_manifest: Manifest, diamond_script, scripted_llm, workspace: Workspace,
    ):
        llm = scripted_llm(diamond_script)
        await _invoker(llm, workspace).invoke(diamond_manifest.get_role("B"), diamond_manifest)
        raw = layout.raw_output_path(workspace.project_dir, "B").read_text(encoding="utf-8")
        assert raw == diamond_script["B"]

    @pytest.mark.asyncio
    async def test_raw_output_persisted_even_when_parse_fails(
        self, diamond_manifest: Manifest, scripted_llm, workspace: Workspace,
    ):
        llm = scripted_llm({"A": "Sorry, here is prose only."})
        with pytest.raises(NoArtifactsError):
            await _invoker(llm, workspace).invoke(diamond_manifest.get_role("A"), diamond_manifest)
        raw = layout.raw_output_path(workspace.project_dir, "A")
        assert raw.read_text(encoding="utf-8") == "Sorry, here is prose only."

    @pytest.mark.asyncio
    async def test_transport_error_wrapped(
        self, diamond_manifest: Manifest, scripted_llm, workspace: Workspace,
    ):
        cause = TimeoutError("request timed out")
        llm = scripted_llm({"A": cause})
        calls = CallLogger()
        with pytest.raises(GenerationError) as exc_info:
            await _invoker(llm, workspace, calls).invoke(
                diamond_manifest.get_role("A"), diamond_manifest,
            )
        assert exc_info.value.role_id == "A"
        assert exc_info.value.__cause__ is cause
        assert calls.records[0].status == "failed"

    @pytest.mark.asyncio
    async def test_call_recorded(
        self, diamond_manifest: Manifest, diamond_script, scripted_llm, workspace: Workspace,
    ):
        calls = CallLogger()
        await _invoker(scripted_llm(diamond_script), workspace, calls).invoke(
            diamond_manifest.get_role("A"), diamond_manifest,
        )
        assert calls.total_calls == 1
        assert calls.records[0].author == "A"
        assert calls.records[0].output_tokens == 20

    @pytest.mark.asyncio
    async def test_uses_configured_sampling(
        self, diamond_manifest: Manifest, mock_llm, workspace: Workspace, make_output,
    ):
        mock_llm.complete.return_value.content = make_output({"a.txt": "x"})
        await _invoker(mock_llm, workspace).invoke(diamond_manifest.get_role("A"), diamond_manifest)
        mock_llm.complete.assert_awaited_once()
        kwargs = mock_llm.complete.call_args.kwargs
        assert kwargs["temperature"] == 0.25
        assert kwargs["max_tokens"] == 1000

    @pytest.mark.asyncio
    async def test_generic_guidance_flag(
        self, diamond_manifest: Manifest, diamond_script, scripted_llm, workspace: Workspace,
    ):
        result = await _invoker(scripted_llm(diamond_script), workspace).invoke(
            diamond_manifest.get_role("A"), diamond_manifest,
        )
        assert result.generic_guidance is True
