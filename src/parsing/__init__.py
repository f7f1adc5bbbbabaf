"""Output protocol parsing."""
