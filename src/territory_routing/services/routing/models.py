"""Routing domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List

from ...config import settings
from ...models.domain import ANY_TIME_SLOT, TIME_SLOTS, ConductorSkills, RoutePoint


class ConfigurationError(ValueError):
    """Raised when an optimization request violates the caller contract."""


class OptimizationModel(Enum):
    """Named weight presets for the cluster-informed strategy.

    These are fixed constants; accuracy is the reported figure for each
    preset, not a measured value.
    """

    DISTANCE_OPTIMIZER = ("distance-optimizer", 0.4, 0.3, 0.2, 0.1, 0.87)
    SUCCESS_PREDICTOR = ("success-predictor", 0.1, 0.5, 0.25, 0.15, 0.82)
    TERRITORY_CLUSTERER = ("territory-clusterer", 0.6, 0.2, 0.1, 0.1, 0.91)

    def __init__(
        self,
        key: str,
        distance_weight: float,
        success_weight: float,
        time_weight: float,
        skill_weight: float,
        accuracy: float,
    ) -> None:
        self.key = key
        self.distance_weight = distance_weight
        self.success_weight = success_weight
        self.time_weight = time_weight
        self.skill_weight = skill_weight
        self.accuracy = accuracy

    @classmethod
    def from_key(cls, key: str) -> "OptimizationModel":
        for model in cls:
            if model.key == key:
                return model
        raise ConfigurationError(f"Unknown optimization model '{key}'.")


@dataclass(slots=True)
class RouteOptimizationConfig:
    max_territories: int
    max_travel_time: int
    prioritize_success: bool = True
    avoid_recent_visits: bool = True
    time_slot_preference: str = ANY_TIME_SLOT
    conductor_skills: ConductorSkills = field(default_factory=ConductorSkills)
    optimization_model: str = settings.default_optimization_model


def validate_config(config: RouteOptimizationConfig) -> None:
    if config.max_territories <= 0:
        raise ConfigurationError("max_territories must be > 0")
    if config.max_travel_time <= 0:
        raise ConfigurationError("max_travel_time must be > 0")
    if config.time_slot_preference != ANY_TIME_SLOT and config.time_slot_preference not in TIME_SLOTS:
        raise ConfigurationError(f"Unknown time slot preference '{config.time_slot_preference}'.")
    OptimizationModel.from_key(config.optimization_model)


@dataclass(slots=True)
class RouteDraft:
    """Output of a single construction strategy before scoring."""

    strategy: str
    points: List[RoutePoint]
    total_distance_km: float
    estimated_time_min: float

    @property
    def avg_success(self) -> float:
        if not self.points:
            return 0.0
        return sum(point.success_probability for point in self.points) / len(self.points)


@dataclass(slots=True)
class AlternativeRoute:
    alternative_id: str
    strategy: str
    points: List[RoutePoint]
    total_distance_km: float
    estimated_time_min: float
    efficiency_score: float
    pros: List[str]
    cons: List[str]


@dataclass(slots=True)
class OptimizedRoute:
    route_id: str
    conductor_id: str
    strategy: str
    points: List[RoutePoint]
    total_distance_km: float
    estimated_time_min: float
    expected_calls: int
    efficiency_score: float
    recommendations: List[str]
    alternative_routes: List[AlternativeRoute]


@dataclass(slots=True)
class RouteMetrics:
    total_routes_optimized: int
    avg_efficiency: float
    total_distance_km: float
    total_distance_saved_km: float
    avg_success_rate: float
    model_accuracy: float
    active_optimizations: int
