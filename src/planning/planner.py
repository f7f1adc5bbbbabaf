# src/planning/planner.py — v1
"""Planner — turn a natural-language prompt into a validated Manifest.

One generation call at the planner temperature. The response may be a
bare JSON object or JSON inside a Markdown fence; anything else is a
PlanningError. Architectural decisions the planner explains are
recorded in the ledger under the "Planner" author.
"""

from __future__ import annotations

import json
import logging
import re
from typing import TYPE_CHECKING, Any

from swarmcoder.config.prompts import PLANNER_SYSTEM_PROMPT, PLANNER_USER_TEMPLATE
from swarmcoder.core.errors import PlanningError
from swarmcoder.core.models import Manifest, parse_manifest
from swarmcoder.llm.models import Message
from swarmcoder.logging.context import set_role_context

if TYPE_CHECKING:
    from swarmcoder.llm.base_client import BaseLLMClient
    from swarmcoder.tracking.call_logger import CallLogger
    from swarmcoder.tracking.ledger import RunLedger

logger = logging.getLogger(__name__)

PLANNER_AUTHOR = "Planner"

_FENCE = re.compile(r"```(?:json)?\s*\n(?P<body>.*?)\n\s*```", re.DOTALL | re.IGNORECASE)


def extract_json(text: str) -> dict[str, Any]:
    """Extract a JSON object from a model response.

    Tries, in order: the whole text, the first fenced block, and the
    span from the first ``{`` to the last ``}``.

    Raises:
        PlanningError: If no candidate decodes to a JSON object.
    """
    candidates = [text.strip()]
    fence = _FENCE.search(text)
    if fence:
        candidates.append(fence.group("body").strip())
    start, end = text.find("{"), text.rfind("}")
    if 0 <= start < end:
        candidates.append(text[start:end + 1])

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data
    raise PlanningError(f"Planner output is not a JSON object: {text[:200]!r}")


class Planner:
    """Produce the run manifest from a prompt.

    Args:
        llm: Planner client.
        call_logger: Optional call logger for tracking.
        temperature: Sampling temperature.
        max_tokens: Output token cap.
    """

    def __init__(
        self,
        llm: BaseLLMClient,
        call_logger: CallLogger | None = None,
        temperature: float = 0.4,
        max_tokens: int = 4096,
    ) -> None:
        self._llm = llm
        self._call_logger = call_logger
        self._temperature = temperature
        self._max_tokens = max_tokens

    async def plan(self, prompt: str, ledger: RunLedger | None = None) -> Manifest:
        """Generate and validate a manifest.

        Raises:
            PlanningError: Unusable planner output, or a failed call.
            ManifestValidationError: Well-formed JSON that breaks a manifest invariant.
        """
        set_role_context(PLANNER_AUTHOR, step="plan")
        messages = [
            Message(role="system", content=PLANNER_SYSTEM_PROMPT),
            Message(role="user", content=PLANNER_USER_TEMPLATE.format(prompt=prompt)),
        ]
        try:
            try:
                response = await self._llm.complete(
                    messages, max_tokens=self._max_tokens, temperature=self._temperature,
                )
            except Exception as exc:
                if self._call_logger is not None:
                    self._call_logger.record_failure(PLANNER_AUTHOR, self._llm.provider_name, exc)
                raise PlanningError(f"Planner call failed: {exc}") from exc
            if self._call_logger is not None:
                self._call_logger.record(PLANNER_AUTHOR, response)

            data = extract_json(response.content)
            decisions = data.pop("decisions", None)
            manifest = parse_manifest(data)
        finally:
            set_role_context(None)

        logger.info(
            "Manifest planned: %s (%d roles)", manifest.project_name, len(manifest.roles),
        )
        if ledger is not None:
            self._record_decisions(ledger, manifest, decisions)
        return manifest

    def _record_decisions(
        self, ledger: RunLedger, manifest: Manifest, decisions: Any,
    ) -> None:
        recorded = 0
        if isinstance(decisions, list):
            for item in decisions:
                if not isinstance(item, dict):
                    continue
                what = str(item.get("what", "")).strip()
                why = str(item.get("why", "")).strip()
                if what and why:
                    ledger.decide(what, why, author=PLANNER_AUTHOR)
                    recorded += 1

        if not recorded:
            stack = manifest.tech_stack
            ledger.decide(
                f"Tech stack: {stack.get('backend', 'n/a')} + {stack.get('frontend', 'n/a')}",
                f"Selected based on the prompt and common patterns for "
                f"{stack.get('language', 'n/a')} projects",
                author=PLANNER_AUTHOR,
            )

        ledger.decide(
            f"Assigned {len(manifest.roles)} roles: {', '.join(manifest.role_ids)}",
            "Roles cover the required functionality with explicit dependencies",
            author=PLANNER_AUTHOR,
        )
