"""Settings and prompt data."""
