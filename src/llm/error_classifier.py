# src/llm/error_classifier.py — v1
"""Classify generation-service failures for the run ledger.

The scheduler never retries a role; the classification only decides
which learnings get recorded after a failure.
"""

from __future__ import annotations

TRANSIENT_TYPES = frozenset({"timeout", "server_error", "rate_limit"})


def classify_error(error: BaseException) -> str:
    """Classify an exception into a coarse failure type."""
    msg = str(error).lower()
    name = type(error).__name__.lower()

    if "429" in msg or "rate" in msg:
        return "rate_limit"
    if "timeout" in name or "timeout" in msg or "timed out" in msg:
        return "timeout"
    if any(c in msg for c in ("500", "502", "503", "504", "server")):
        return "server_error"
    if "no file blocks" in msg or "json" in msg or "parse" in msg or "decode" in msg:
        return "parse_error"
    if "token" in msg and ("limit" in msg or "exceed" in msg):
        return "token_limit"
    return "unknown"


def is_transient(error: BaseException) -> bool:
    """Whether a retry with the same instruction could plausibly succeed."""
    return classify_error(error) in TRANSIENT_TYPES
