"""Territory catalog access."""
