"""Car catalog service."""
