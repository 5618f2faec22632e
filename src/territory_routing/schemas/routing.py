"""Routing request/response schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from ..config import settings
from ..models.domain import ConductorSkills
from ..services.routing.models import RouteOptimizationConfig


class ConductorSkillsModel(BaseModel):
    territory_experience: Dict[str, float] = Field(default_factory=dict)
    time_slot_affinity: Dict[str, float] = Field(default_factory=dict)
    avg_call_duration: float = 0.0
    success_rate: float = 0.0
    adaptability_score: float = 0.0

    def to_domain(self) -> ConductorSkills:
        return ConductorSkills(
            territory_experience=dict(self.territory_experience),
            time_slot_affinity=dict(self.time_slot_affinity),
            avg_call_duration=self.avg_call_duration,
            success_rate=self.success_rate,
            adaptability_score=self.adaptability_score,
        )


class OptimizeRouteRequest(BaseModel):
    conductor_id: str = Field(..., description="Conductor the route is built for.")
    max_territories: int = Field(..., description="Upper bound on visited territories.")
    max_travel_time: int = Field(..., description="Time budget in minutes (travel + service).")
    prioritize_success: bool = True
    avoid_recent_visits: bool = True
    time_slot_preference: Literal["morning", "afternoon", "evening", "any"] = "any"
    conductor_skills: ConductorSkillsModel = Field(default_factory=ConductorSkillsModel)
    optimization_model: Literal["distance-optimizer", "success-predictor", "territory-clusterer"] = Field(
        default=settings.default_optimization_model,
        description="Weight preset used by the cluster-informed strategy.",
    )
    timeout_seconds: Optional[float] = Field(default=None, gt=0.0)

    def to_config(self) -> RouteOptimizationConfig:
        return RouteOptimizationConfig(
            max_territories=self.max_territories,
            max_travel_time=self.max_travel_time,
            prioritize_success=self.prioritize_success,
            avoid_recent_visits=self.avoid_recent_visits,
            time_slot_preference=self.time_slot_preference,
            conductor_skills=self.conductor_skills.to_domain(),
            optimization_model=self.optimization_model,
        )


class RoutePointModel(BaseModel):
    territory: str
    latitude: float
    longitude: float
    priority: int
    estimated_duration: float
    success_probability: float
    optimal_time_slot: str
    last_visited: Optional[datetime] = None


class AlternativeRouteModel(BaseModel):
    alternative_id: str
    strategy: str
    points: List[RoutePointModel]
    total_distance_km: float
    estimated_time_min: float
    efficiency_score: float
    pros: List[str]
    cons: List[str]


class OptimizedRouteModel(BaseModel):
    route_id: str
    conductor_id: str
    strategy: str
    points: List[RoutePointModel]
    total_distance_km: float
    estimated_time_min: float
    expected_calls: int
    efficiency_score: float
    recommendations: List[str]
    alternative_routes: List[AlternativeRouteModel]


class TerritoryClusterModel(BaseModel):
    cluster_id: str
    territories: List[str]
    center_latitude: float
    center_longitude: float
    density: int
    avg_success_rate: float
    optimal_day: str
    optimal_time_slot: str


class RouteMetricsModel(BaseModel):
    total_routes_optimized: int
    avg_efficiency: float
    total_distance_km: float
    total_distance_saved_km: float
    avg_success_rate: float
    model_accuracy: float
    active_optimizations: int
