import pytest

from territory_routing.models.domain import RoutePoint
from territory_routing.services.routing.models import RouteDraft
from territory_routing.services.routing.recommendations import (
    DEFAULT_RECOMMENDATION,
    MAX_RECOMMENDATIONS,
    NO_TERRITORIES_AVAILABLE,
    build_alternatives,
    route_recommendations,
    to_alternative,
)
from territory_routing.services.routing.scoring import efficiency_score, rank_drafts, score_draft


def _point(tid: str, *, success: float = 0.5, slot: str = "morning") -> RoutePoint:
    return RoutePoint(
        territory=tid,
        latitude=25.70,
        longitude=-80.19,
        priority=3,
        estimated_duration=20,
        success_probability=success,
        optimal_time_slot=slot,
    )


def _draft(strategy: str, count: int, distance: float, time: float, success: float = 0.5) -> RouteDraft:
    return RouteDraft(
        strategy=strategy,
        points=[_point(f"{strategy}-{index}", success=success) for index in range(count)],
        total_distance_km=distance,
        estimated_time_min=time,
    )


def test_efficiency_score_bounds():
    assert efficiency_score(0, 0, 1.0) == pytest.approx(1.0)
    assert efficiency_score(150, 600, 0.0) == pytest.approx(0.0)
    assert efficiency_score(500, 2000, 0.0) == 0.0
    assert efficiency_score(75, 300, 0.5) == pytest.approx(0.15 + 0.15 + 0.2)


def test_empty_draft_scores_zero():
    assert score_draft(_draft("empty", 0, 0.0, 0.0)) == 0.0


def test_rank_drafts_prefers_score_then_fewer_points():
    weak = _draft("weak", 3, 120.0, 500.0, success=0.2)
    dense = _draft("dense", 2, 10.0, 60.0)
    sparse = _draft("sparse", 4, 10.0, 60.0)

    ranked = rank_drafts([sparse, weak, dense])

    assert [draft.strategy for draft, _ in ranked] == ["dense", "sparse", "weak"]
    assert ranked[0][1] >= ranked[1][1] >= ranked[2][1]


def test_rank_drafts_moves_preferred_draft_first():
    full = _draft("full", 5, 12.0, 110.0)
    single = _draft("single", 1, 2.0, 22.0)
    partial = _draft("partial", 3, 6.0, 66.0)

    ranked = rank_drafts([single, partial, full], preferred=full)

    assert [draft.strategy for draft, _ in ranked] == ["full", "single", "partial"]
    assert ranked[0][1] == pytest.approx(score_draft(full))


def test_alternative_pros_and_cons():
    good = to_alternative(_draft("good", 6, 20.0, 120.0, success=0.9), 0.8)
    bad = to_alternative(_draft("bad", 2, 95.0, 450.0), 0.3)
    plain = to_alternative(_draft("plain", 3, 60.0, 200.0), 0.6)

    assert good.pros == ["High overall efficiency", "Short distance", "High call volume"]
    assert good.cons == ["No significant drawbacks"]
    assert bad.pros == ["Viable alternative route"]
    assert bad.cons == ["Efficiency could be improved", "Considerable distance", "Long total duration"]
    assert plain.alternative_id == "alt_plain"


def test_build_alternatives_skips_winner_and_caps_at_two():
    ranked = rank_drafts([_draft(name, 3, 10.0 * (index + 1), 100.0) for index, name in enumerate("abcd")])

    alternatives = build_alternatives(ranked)

    assert [alt.strategy for alt in alternatives] == ["b", "c"]


def test_recommendations_for_empty_route():
    assert route_recommendations(_draft("none", 0, 0.0, 0.0), 0.0) == [NO_TERRITORIES_AVAILABLE]


def test_recommendations_default_for_balanced_route():
    draft = RouteDraft(
        strategy="ok",
        points=[_point("1", slot="morning"), _point("2", slot="afternoon"), _point("3", slot="evening")],
        total_distance_km=10.0,
        estimated_time_min=90.0,
    )

    assert route_recommendations(draft, 0.8) == [DEFAULT_RECOMMENDATION]


def test_recommendations_never_exceed_limit():
    draft = _draft("bad", 4, 120.0, 500.0, success=0.1)

    recommendations = route_recommendations(draft, 0.1)

    assert len(recommendations) == MAX_RECOMMENDATIONS
    assert any("morning" in text for text in recommendations)
