"""Territory route optimization engine."""

from .data.catalog import TerritoryCatalog, generate_synthetic_catalog, load_catalog_csv
from .models.domain import ConductorSkills, Depot, RoutePoint, TerritoryCluster
from .services.routing import (
    ConfigurationError,
    OptimizedRoute,
    RouteOptimizationConfig,
    RouteOptimizationEngine,
)

__all__ = [
    "ConductorSkills",
    "ConfigurationError",
    "Depot",
    "OptimizedRoute",
    "RouteOptimizationConfig",
    "RouteOptimizationEngine",
    "RoutePoint",
    "TerritoryCatalog",
    "TerritoryCluster",
    "generate_synthetic_catalog",
    "load_catalog_csv",
]
