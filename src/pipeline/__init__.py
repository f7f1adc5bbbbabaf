"""Scheduling, worker invocation and run orchestration."""
