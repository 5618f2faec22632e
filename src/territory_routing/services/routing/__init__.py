"""Route optimization services."""

from .engine import RouteOptimizationEngine
from .ledger import RouteLedger
from .models import (
    AlternativeRoute,
    ConfigurationError,
    OptimizationModel,
    OptimizedRoute,
    RouteMetrics,
    RouteOptimizationConfig,
)

__all__ = [
    "AlternativeRoute",
    "ConfigurationError",
    "OptimizationModel",
    "OptimizedRoute",
    "RouteLedger",
    "RouteMetrics",
    "RouteOptimizationConfig",
    "RouteOptimizationEngine",
]
