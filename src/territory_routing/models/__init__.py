"""Domain dataclasses."""
