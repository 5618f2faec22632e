"""Domain models for territories, conductors and clusters."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Mapping, Optional

TIME_SLOTS: tuple[str, ...] = ("morning", "afternoon", "evening")
ANY_TIME_SLOT = "any"

MIN_PRIORITY = 1
MAX_PRIORITY = 5


def _clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


@dataclass(slots=True)
class Depot:
    """Dispatch office every route starts from and returns to."""

    code: str
    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class RoutePoint:
    """A territory as a visitable stop, with its historical call statistics.

    Priority and success probability are clamped on construction so every
    derived copy stays within range. Unknown time slots fall back to the
    first slot and naive visit timestamps are taken as UTC.
    """

    territory: str
    latitude: float
    longitude: float
    priority: int
    estimated_duration: float
    success_probability: float
    optimal_time_slot: str
    last_visited: Optional[datetime] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "priority", int(_clamp(int(self.priority), MIN_PRIORITY, MAX_PRIORITY)))
        object.__setattr__(self, "success_probability", _clamp(float(self.success_probability), 0.0, 1.0))
        object.__setattr__(self, "estimated_duration", max(1.0, float(self.estimated_duration)))
        if self.optimal_time_slot not in TIME_SLOTS:
            object.__setattr__(self, "optimal_time_slot", TIME_SLOTS[0])
        if self.last_visited is not None and self.last_visited.tzinfo is None:
            object.__setattr__(self, "last_visited", self.last_visited.replace(tzinfo=timezone.utc))

    def with_adjustments(
        self,
        *,
        success_probability: float | None = None,
        estimated_duration: float | None = None,
    ) -> "RoutePoint":
        changes: dict = {}
        if success_probability is not None:
            changes["success_probability"] = success_probability
        if estimated_duration is not None:
            changes["estimated_duration"] = estimated_duration
        return replace(self, **changes)


@dataclass(frozen=True, slots=True)
class ConductorSkills:
    """Skill profile of the conductor a route is being built for."""

    territory_experience: Mapping[str, float] = field(default_factory=dict)
    time_slot_affinity: Mapping[str, float] = field(default_factory=dict)
    avg_call_duration: float = 0.0
    success_rate: float = 0.0
    adaptability_score: float = 0.0

    def experience_for(self, territory: str) -> float:
        return _clamp(float(self.territory_experience.get(territory, 0.0)), 0.0, 1.0)

    def affinity_for(self, time_slot: str) -> float:
        return _clamp(float(self.time_slot_affinity.get(time_slot, 0.0)), 0.0, 1.0)


@dataclass(frozen=True, slots=True)
class TerritoryCluster:
    """Spatial group of territories produced by K-means."""

    cluster_id: str
    territories: tuple[str, ...]
    center_latitude: float
    center_longitude: float
    density: int
    avg_success_rate: float
    optimal_day: str
    optimal_time_slot: str
