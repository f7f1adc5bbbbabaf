"""Generation service clients and routing."""
