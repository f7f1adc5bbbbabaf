# src/tracking/call_logger.py — v2
"""Generation call logging — one record per call, for post-mortem reading."""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path

from swarmcoder.llm.models import LLMResponse
from swarmcoder.tracking.models import LLMCallRecord

logger = logging.getLogger(__name__)


class CallLogger:
    """Accumulates generation call records during a run."""

    def __init__(self) -> None:
        self._records: list[LLMCallRecord] = []

    def record(self, author: str, response: LLMResponse) -> LLMCallRecord:
        """Record a successful call.

        Args:
            author: Role id or "Planner".
            response: Provider response with token usage.
        """
        record = LLMCallRecord(
            call_id=str(uuid.uuid4()),
            timestamp=datetime.now(timezone.utc),
            author=author,
            provider=response.provider,
            model=response.model,
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens,
            latency_ms=response.latency_ms,
        )
        self._records.append(record)
        return record

    def record_failure(self, author: str, provider: str, error: BaseException) -> LLMCallRecord:
        """Record a call that raised before returning a response."""
        record = LLMCallRecord(
            call_id=str(uuid.uuid4()),
            timestamp=datetime.now(timezone.utc),
            author=author,
            provider=provider,
            model="",
            status="failed",
            error=str(error),
        )
        self._records.append(record)
        return record

    @property
    def records(self) -> list[LLMCallRecord]:
        """All recorded calls."""
        return list(self._records)

    @property
    def total_calls(self) -> int:
        return len(self._records)

    def save(self, path: Path) -> None:
        """Append all records to a JSON Lines file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as f:
            for record in self._records:
                f.write(json.dumps(record.model_dump(), default=str) + "\n")
        logger.debug("Saved %d call records to %s", len(self._records), path)
