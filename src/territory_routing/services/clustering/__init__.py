"""Territory clustering."""

from .engine import ClusteringEngine

__all__ = ["ClusteringEngine"]
