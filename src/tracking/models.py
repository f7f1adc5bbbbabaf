# src/tracking/models.py — v2
"""Tracking domain models: LedgerEntry, RoleOutcome, LLMCallRecord."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from swarmcoder.core.models import RoleStatus


class LedgerStream(str, Enum):
    """The four append-only ledger streams."""

    ERRORS = "errors"
    LEARNINGS = "learnings"
    FEATURE_REQUESTS = "feature_requests"
    DECISIONS = "decisions"


class LedgerEntry(BaseModel):
    """One appended ledger entry. Never edited once written."""

    model_config = {"frozen": True}

    stream: LedgerStream
    timestamp: datetime
    author: str
    title: str = ""
    category: str | None = None
    fields: dict[str, str] = Field(default_factory=dict)
    body: str = ""


class RoleOutcome(BaseModel):
    """Final state of one role, as shown in the run summary."""

    role_id: str
    name: str
    status: RoleStatus = RoleStatus.PENDING
    artifact_count: int = 0
    error: str | None = None


class LLMCallRecord(BaseModel):
    """Individual generation call log entry."""

    call_id: str
    timestamp: datetime
    author: str
    provider: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    latency_ms: int = 0
    status: Literal["success", "failed"] = "success"
    error: str | None = None
