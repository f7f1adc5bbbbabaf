"""Run ledger, call log and summary."""
