"""Domain models and error taxonomy."""
