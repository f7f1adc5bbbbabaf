"""Workspace layout, persistence and assembly."""
