"""Prompt-to-manifest planning."""
