# src/pipeline/worker.py — v1
"""Worker invoker — one generation call per role, parsed into artifacts.

A role invocation either yields at least one artifact or raises a
GenerationError. The raw response is persisted before parsing so a
failed parse can be inspected afterwards.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from swarmcoder.core.errors import GenerationError
from swarmcoder.core.models import Artifact, DecisionRecord, Manifest, Role
from swarmcoder.logging.context import set_role_context
from swarmcoder.parsing.output_parser import parse_output
from swarmcoder.pipeline.instructions import build_instruction
from swarmcoder.storage import layout

if TYPE_CHECKING:
    from swarmcoder.llm.base_client import BaseLLMClient
    from swarmcoder.storage.base_output_writer import BaseOutputWriter
    from swarmcoder.storage.models import Workspace
    from swarmcoder.tracking.call_logger import CallLogger

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.25
DEFAULT_MAX_TOKENS = 4096


@dataclass
class WorkerResult:
    """Parsed output of one successful role invocation."""

    role_id: str
    artifacts: list[Artifact]
    decisions: list[DecisionRecord] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    generic_guidance: bool = False

    @property
    def paths(self) -> list[str]:
        return [a.path for a in self.artifacts]


class WorkerInvoker:
    """Invoke the generation service for a role and store what it wrote.

    Args:
        llm: Client used for every worker call.
        writer: Artifact sink.
        workspace: Workspace of the run.
        call_logger: Optional call logger for tracking.
        temperature: Sampling temperature for worker calls.
        max_tokens: Output token cap per call.
    """

    def __init__(
        self,
        llm: BaseLLMClient,
        writer: BaseOutputWriter,
        workspace: Workspace,
        call_logger: CallLogger | None = None,
        temperature: float = DEFAULT_TEMPERATURE,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> None:
        self._llm = llm
        self._writer = writer
        self._workspace = workspace
        self._call_logger = call_logger
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def invoke(
        self,
        role: Role,
        manifest: Manifest,
        strict: bool = False,
    ) -> WorkerResult:
        """Run one role.

        Args:
            role: Role to invoke.
            manifest: Manifest the role belongs to.
            strict: Use the stricter protocol reminder.

        Returns:
            WorkerResult with at least one artifact.

        Raises:
            GenerationError: The call failed or the output held no file blocks
                (NoArtifactsError).
        """
        set_role_context(role.id, step="generate")
        instruction = build_instruction(role, manifest, self._workspace.prompt, strict=strict)
        project = self._workspace.project_dir

        try:
            response = await self._llm.complete(
                instruction.messages,
                max_tokens=self._max_tokens,
                temperature=self._temperature,
            )
        except Exception as exc:
            if self._call_logger is not None:
                self._call_logger.record_failure(role.id, self._llm.provider_name, exc)
            raise GenerationError(role.id, f"generation call failed: {exc}") from exc

        if self._call_logger is not None:
            self._call_logger.record(role.id, response)

        await self._writer.write(str(layout.raw_output_path(project, role.id)), response.content)

        set_role_context(role.id, step="parse")
        parsed = parse_output(response.content, author=role.id)
        for warning in parsed.warnings:
            logger.warning("%s: %s", role.id, warning)
        artifacts = parsed.require_artifacts(role.id)

        set_role_context(role.id, step="write")
        for artifact in artifacts:
            await self._writer.write(
                str(layout.role_artifact_path(project, role.id, artifact.path)),
                artifact.content,
            )
            logger.debug("Wrote %s", artifact.path)

        produced = {a.path for a in artifacts}
        missing = [p for p in role.outputs if p not in produced]
        if missing:
            logger.warning("%s did not produce declared outputs: %s", role.id, missing)
        extra = [a.path for a in artifacts if a.path not in role.outputs]
        if extra:
            logger.info("%s wrote undeclared files (kept role-scoped): %s", role.id, extra)

        logger.info(
            "%s produced %d files, %d decisions",
            role.id, len(artifacts), len(parsed.decisions),
        )
        set_role_context(None)
        return WorkerResult(
            role_id=role.id,
            artifacts=artifacts,
            decisions=list(parsed.decisions),
            warnings=list(parsed.warnings),
            generic_guidance=instruction.generic_guidance,
        )
