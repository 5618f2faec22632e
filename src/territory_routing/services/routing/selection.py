"""Candidate filtering and conductor skill adjustments."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Sequence

from ...config import settings
from ...models.domain import ANY_TIME_SLOT, ConductorSkills, RoutePoint
from .models import RouteOptimizationConfig

MAX_ADJUSTED_SUCCESS = 0.95
EXPERIENCE_SUCCESS_BONUS = 0.2
AFFINITY_SUCCESS_BONUS = 0.1
EXPERIENCE_DURATION_REDUCTION = 0.15


def select_candidates(
    points: Sequence[RoutePoint],
    config: RouteOptimizationConfig,
    *,
    now: datetime | None = None,
    recent_visit_days: int = settings.recent_visit_days,
) -> list[RoutePoint]:
    """Filter and rank the catalog for one optimization request.

    Returns at most ``2 * max_territories`` points so constructors have
    room to discard infeasible ones.
    """
    candidates = list(points)

    if config.avoid_recent_visits:
        cutoff = (now or datetime.now(timezone.utc)) - timedelta(days=recent_visit_days)
        candidates = [
            point for point in candidates if point.last_visited is None or point.last_visited < cutoff
        ]

    if config.time_slot_preference != ANY_TIME_SLOT:
        candidates = [
            point for point in candidates if point.optimal_time_slot == config.time_slot_preference
        ]

    if config.prioritize_success:
        candidates.sort(key=lambda point: point.priority * point.success_probability, reverse=True)
    else:
        candidates.sort(key=lambda point: point.priority, reverse=True)

    return candidates[: config.max_territories * 2]


def apply_skill_adjustments(points: Sequence[RoutePoint], skills: ConductorSkills) -> list[RoutePoint]:
    adjusted: list[RoutePoint] = []
    for point in points:
        experience = skills.experience_for(point.territory)
        affinity = skills.affinity_for(point.optimal_time_slot)
        boosted = (
            point.success_probability
            + experience * EXPERIENCE_SUCCESS_BONUS
            + affinity * AFFINITY_SUCCESS_BONUS
        )
        adjusted.append(
            point.with_adjustments(
                success_probability=max(point.success_probability, min(MAX_ADJUSTED_SUCCESS, boosted)),
                estimated_duration=point.estimated_duration * (1 - experience * EXPERIENCE_DURATION_REDUCTION),
            )
        )
    return adjusted
