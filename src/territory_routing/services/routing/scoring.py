"""Route efficiency scoring."""

from __future__ import annotations

from typing import Optional, Sequence

from .models import RouteDraft

DISTANCE_CAP_KM = 150.0
TIME_CAP_MIN = 600.0
DISTANCE_WEIGHT = 0.3
TIME_WEIGHT = 0.3
SUCCESS_WEIGHT = 0.4


def normalize(value: float, cap: float) -> float:
    return max(0.0, 1 - value / cap)


def efficiency_score(distance_km: float, time_min: float, avg_success: float) -> float:
    return (
        DISTANCE_WEIGHT * normalize(distance_km, DISTANCE_CAP_KM)
        + TIME_WEIGHT * normalize(time_min, TIME_CAP_MIN)
        + SUCCESS_WEIGHT * avg_success
    )


def score_draft(draft: RouteDraft) -> float:
    if not draft.points:
        return 0.0
    return efficiency_score(draft.total_distance_km, draft.estimated_time_min, draft.avg_success)


def rank_drafts(
    drafts: Sequence[RouteDraft],
    *,
    preferred: Optional[RouteDraft] = None,
) -> list[tuple[RouteDraft, float]]:
    """Order drafts best first: highest score, then fewer points, then production order.

    A ``preferred`` draft is moved to the front regardless of its score.
    """
    scored = [(draft, score_draft(draft)) for draft in drafts]
    ranked = sorted(scored, key=lambda item: (-item[1], len(item[0].points)))
    if preferred is not None:
        ranked.sort(key=lambda item: item[0] is not preferred)
    return ranked
