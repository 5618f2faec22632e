"""Rule-based route annotations."""

from __future__ import annotations

from collections import Counter
from typing import Sequence

from .models import AlternativeRoute, RouteDraft

NO_TERRITORIES_AVAILABLE = "No territories available"
DEFAULT_RECOMMENDATION = "Route optimized - follow the suggested order"
MAX_RECOMMENDATIONS = 5
MAX_ALTERNATIVES = 2


def to_alternative(draft: RouteDraft, score: float) -> AlternativeRoute:
    pros: list[str] = []
    cons: list[str] = []

    if score > 0.7:
        pros.append("High overall efficiency")
    if draft.total_distance_km < 50:
        pros.append("Short distance")
    if len(draft.points) > 5:
        pros.append("High call volume")

    if score < 0.5:
        cons.append("Efficiency could be improved")
    if draft.total_distance_km > 80:
        cons.append("Considerable distance")
    if draft.estimated_time_min > 400:
        cons.append("Long total duration")

    return AlternativeRoute(
        alternative_id=f"alt_{draft.strategy}",
        strategy=draft.strategy,
        points=list(draft.points),
        total_distance_km=draft.total_distance_km,
        estimated_time_min=draft.estimated_time_min,
        efficiency_score=score,
        pros=pros or ["Viable alternative route"],
        cons=cons or ["No significant drawbacks"],
    )


def build_alternatives(ranked: Sequence[tuple[RouteDraft, float]]) -> list[AlternativeRoute]:
    """Wrap every non-winning draft; ``ranked`` is best first."""
    return [to_alternative(draft, score) for draft, score in ranked[1 : 1 + MAX_ALTERNATIVES]]


def route_recommendations(draft: RouteDraft, score: float) -> list[str]:
    if not draft.points:
        return [NO_TERRITORIES_AVAILABLE]

    recommendations: list[str] = []
    if score < 0.6:
        recommendations.append("Consider reordering the visits for better efficiency")
    if draft.total_distance_km > 80:
        recommendations.append("Long route - schedule breaks every 2-3 territories")
    if any(point.success_probability < 0.3 for point in draft.points):
        recommendations.append("Some territories have low success probability - consider alternative hours")

    slot, slot_count = Counter(point.optimal_time_slot for point in draft.points).most_common(1)[0]
    if slot_count > len(draft.points) * 0.7:
        recommendations.append(f"Route is concentrated in the {slot} slot - plan the day around it")

    if draft.estimated_time_min > 6 * 60:
        recommendations.append("Long working day planned - make sure to take rest stops")

    return recommendations[:MAX_RECOMMENDATIONS] or [DEFAULT_RECOMMENDATION]
