# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides sample manifests, protocol-formatted outputs, a scripted LLM
client keyed by role id, and temp workspaces. No network access.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from swarmcoder.config.settings import Settings
from swarmcoder.core.models import Manifest, parse_manifest
from swarmcoder.llm.base_client import BaseLLMClient
from swarmcoder.llm.models import LLMResponse, Message
from swarmcoder.parsing.output_parser import format_file_block
from swarmcoder.storage import layout
from swarmcoder.storage.models import Workspace

_ROLE_LINE = re.compile(r"^Role: .+ \((?P<id>[^)]+)\)$", re.MULTILINE)


def protocol_output(files: dict[str, str], decisions: list[tuple[str, str]] | None = None) -> str:
    """Render files (and optional decisions) in FILE-block protocol form."""
    text = "\n\n".join(format_file_block(p, c) for p, c in files.items())
    if decisions:
        text += "\n\nDECISIONS MADE:\n"
        text += "".join(f"- [Decision]: {w}\n- [Reason]: {r}\n" for w, r in decisions)
    return text


class ScriptedLLM(BaseLLMClient):
    """Returns a scripted response per role id; records every call.

    A script value may be a string (returned as content) or an exception
    instance (raised).
    """

    def __init__(self, script: dict[str, str | BaseException]) -> None:
        self.script = script
        self.calls: list[str] = []
        self.messages: list[list[Message]] = []

    async def complete(self, messages, max_tokens=4096, temperature=0.3) -> LLMResponse:
        match = _ROLE_LINE.search(messages[-1].content)
        role_id = match.group("id") if match else "?"
        self.calls.append(role_id)
        self.messages.append(list(messages))
        value = self.script[role_id]
        if isinstance(value, BaseException):
            raise value
        return LLMResponse(
            content=value, model="scripted", provider="scripted",
            input_tokens=10, output_tokens=20,
        )

    @property
    def provider_name(self) -> str:
        return "scripted"


# === FIXTURES: Sample data ===


@pytest.fixture
def fixed_time() -> datetime:
    return datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def diamond_manifest() -> Manifest:
    """A; B and C depend on A; D depends on B and C."""
    return parse_manifest({
        "project_name": "Diamond",
        "tech_stack": {"backend": "Express", "frontend": "React", "language": "JavaScript"},
        "roles": [
            {"id": "A", "name": "RoleA", "outputs": ["a.txt"], "depends_on": []},
            {"id": "B", "name": "RoleB", "outputs": ["b.txt"], "depends_on": ["A"]},
            {"id": "C", "name": "RoleC", "outputs": ["c.txt"], "depends_on": ["A"]},
            {"id": "D", "name": "RoleD", "outputs": ["d.txt"], "depends_on": ["B", "C"]},
        ],
        "shared_files": ["README.md"],
    })


@pytest.fixture
def diamond_script() -> dict[str, str | BaseException]:
    """One valid protocol output per diamond role."""
    return {
        rid: protocol_output(
            {f"{rid.lower()}.txt": f"content of {rid}"},
            [(f"{rid} decision", f"{rid} reason")],
        )
        for rid in ("A", "B", "C", "D")
    }


@pytest.fixture
def scripted_llm():
    """Factory: scripted_llm(script) -> ScriptedLLM."""
    return ScriptedLLM


@pytest.fixture
def mock_llm() -> AsyncMock:
    """Mock LLM client returning an empty response."""
    client = AsyncMock(spec=BaseLLMClient)
    client.complete.return_value = LLMResponse(
        content="", model="test-model", provider="test",
    )
    client.provider_name = "test"
    return client


@pytest.fixture
def workspace(tmp_path: Path, fixed_time: datetime) -> Workspace:
    """An initialized, empty workspace directory."""
    project = layout.project_dir(tmp_path, "swarm-test")
    layout.ensure_workspace_directories(project)
    return Workspace(
        project_id="swarm-test",
        project_dir=project,
        prompt="a tiny test app",
        started_at=fixed_time,
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings isolated from any .env file, rooted in tmp_path."""
    return Settings(_env_file=None, workspace_root=tmp_path / "projects", mock=True)


@pytest.fixture
def make_output():
    """Factory: make_output(files, decisions=None) -> protocol text."""
    return protocol_output
