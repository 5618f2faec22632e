"""Route construction strategies.

Every strategy receives the same ranked, skill-adjusted candidates and builds
its own visiting order. Estimated time is service time plus travel time over
the closed depot tour for all of them, so drafts are directly comparable.
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

from ...config import settings
from ...models.domain import MAX_PRIORITY, Depot, RoutePoint, TerritoryCluster
from ..geospatial import HasCoordinates, distance_km, route_distance_km, travel_minutes
from .models import OptimizationModel, RouteDraft, RouteOptimizationConfig

EXACT = "exact"
NEAREST_NEIGHBOR = "nearest_neighbor"
GREEDY = "greedy"
CLUSTER = "cluster"

CLUSTER_DISTANCE_CAP_KM = 100.0
CLUSTER_TIME_CAP_MIN = 480.0


def build_draft(
    strategy: str,
    points: Sequence[RoutePoint],
    *,
    depot: Depot,
    minutes_per_km: float = settings.travel_minutes_per_km,
) -> RouteDraft:
    distance = route_distance_km(points, depot)
    service = sum(point.estimated_duration for point in points)
    return RouteDraft(
        strategy=strategy,
        points=list(points),
        total_distance_km=distance,
        estimated_time_min=service + travel_minutes(distance, minutes_per_km),
    )


def _distance_matrix(nodes: Sequence[HasCoordinates]) -> list[list[float]]:
    return [[distance_km(a, b) for b in nodes] for a in nodes]


def shortest_tour_order(
    points: Sequence[RoutePoint],
    depot: Depot,
    *,
    budget: int = settings.permutation_budget,
) -> tuple[list[RoutePoint], int, bool]:
    """Depth-first branch-and-bound over visiting orders.

    Orderings are generated one at a time; partial tours already longer than
    the best closed tour are pruned. Both complete orderings and pruned
    branches are charged against ``budget``, so the work done stays bounded
    by it. Returns the best order found, the number of complete orderings
    evaluated, and whether the budget cut the search short.
    """
    count = len(points)
    if count == 0:
        return [], 0, False

    nodes: list[HasCoordinates] = [*points, depot]
    matrix = _distance_matrix(nodes)
    depot_index = count

    best_length = math.inf
    best_order: list[int] = list(range(count))
    evaluated = 0
    spent = 0
    exhausted = False
    order: list[int] = []
    used = [False] * count

    def charge() -> None:
        nonlocal spent, exhausted
        spent += 1
        if spent >= budget:
            exhausted = True

    def extend(last: int, partial: float) -> None:
        nonlocal best_length, best_order, evaluated
        if len(order) == count:
            evaluated += 1
            total = partial + matrix[last][depot_index]
            if total < best_length:
                best_length = total
                best_order = order.copy()
            charge()
            return
        for index in range(count):
            if exhausted:
                return
            if used[index]:
                continue
            step = partial + matrix[last][index]
            if step >= best_length:
                charge()
                continue
            used[index] = True
            order.append(index)
            extend(index, step)
            order.pop()
            used[index] = False

    extend(depot_index, 0.0)
    return [points[index] for index in best_order], evaluated, exhausted


def exact_search_route(
    candidates: Sequence[RoutePoint],
    config: RouteOptimizationConfig,
    *,
    depot: Depot,
    max_points: int = settings.exact_search_max_points,
    budget: int = settings.permutation_budget,
    minutes_per_km: float = settings.travel_minutes_per_km,
) -> Optional[RouteDraft]:
    """Shortest closed tour over the top-ranked candidates, or ``None`` when too many."""
    size = min(config.max_territories, len(candidates))
    if size == 0 or size > max_points:
        return None
    order, evaluated, exhausted = shortest_tour_order(candidates[:size], depot, budget=budget)
    if exhausted:
        logging.warning(
            f"Exact search stopped after {evaluated} orderings for {size} territories; using best found"
        )
    return build_draft(EXACT, order, depot=depot, minutes_per_km=minutes_per_km)


def nearest_neighbor(candidates: Sequence[RoutePoint], limit: int) -> list[RoutePoint]:
    """Start at the highest-priority point and chase success-weighted proximity."""
    if not candidates or limit <= 0:
        return []

    remaining = list(candidates)
    current = max(remaining, key=lambda point: point.priority)
    route = [current]
    remaining.remove(current)

    while len(route) < limit and remaining:
        origin = current
        current = min(
            remaining,
            key=lambda point: distance_km(origin, point) / (point.success_probability + 0.1),
        )
        route.append(current)
        remaining.remove(current)
    return route


def nearest_neighbor_route(
    candidates: Sequence[RoutePoint],
    config: RouteOptimizationConfig,
    *,
    depot: Depot,
    minutes_per_km: float = settings.travel_minutes_per_km,
) -> RouteDraft:
    route = nearest_neighbor(candidates, config.max_territories)
    return build_draft(NEAREST_NEIGHBOR, route, depot=depot, minutes_per_km=minutes_per_km)


def greedy_budget_route(
    candidates: Sequence[RoutePoint],
    config: RouteOptimizationConfig,
    *,
    depot: Depot,
    minutes_per_km: float = settings.travel_minutes_per_km,
) -> RouteDraft:
    """Grow a route from the depot while travel plus service fits the time budget.

    A candidate is feasible only if the conductor could still drive back to
    the depot within ``max_travel_time`` after serving it.
    """
    limit = min(config.max_territories, len(candidates))
    remaining = list(candidates)
    route: list[RoutePoint] = []
    elapsed = 0.0
    position: HasCoordinates = depot

    while len(route) < limit and remaining:
        best: Optional[RoutePoint] = None
        best_score = -math.inf
        best_leg = 0.0

        for point in remaining:
            leg = travel_minutes(distance_km(position, point), minutes_per_km)
            back = travel_minutes(distance_km(point, depot), minutes_per_km)
            if elapsed + leg + point.estimated_duration + back > config.max_travel_time:
                continue
            slot_score = 1.0 if point.optimal_time_slot == config.time_slot_preference else 0.5
            score = (
                1 / (distance_km(position, point) + 0.1)
                + point.success_probability * 2
                + point.priority * 0.5
                + slot_score
            )
            if score > best_score:
                best, best_score, best_leg = point, score, leg

        if best is None:
            break
        route.append(best)
        remaining.remove(best)
        elapsed += best_leg + best.estimated_duration
        position = best

    return build_draft(GREEDY, route, depot=depot, minutes_per_km=minutes_per_km)


def _member_score(
    point: RoutePoint,
    *,
    depot: Depot,
    model: OptimizationModel,
    experience: float,
) -> float:
    proximity = 1 / (1 + distance_km(depot, point))
    return (
        model.distance_weight * proximity
        + model.success_weight * point.success_probability
        + model.time_weight * point.priority / MAX_PRIORITY
        + model.skill_weight * experience
    )


def weighted_route_score(route: Sequence[RoutePoint], *, depot: Depot, model: OptimizationModel) -> float:
    if not route:
        return 0.0
    distance = route_distance_km(route, depot)
    total_time = sum(point.estimated_duration for point in route)
    avg_success = sum(point.success_probability for point in route) / len(route)
    avg_priority = sum(point.priority for point in route) / len(route)
    return (
        model.distance_weight * max(0.0, 1 - distance / CLUSTER_DISTANCE_CAP_KM)
        + model.success_weight * avg_success
        + model.time_weight * max(0.0, 1 - total_time / CLUSTER_TIME_CAP_MIN)
        + model.skill_weight * avg_priority / MAX_PRIORITY
    )


def cluster_weighted_route(
    candidates: Sequence[RoutePoint],
    config: RouteOptimizationConfig,
    clusters: Sequence[TerritoryCluster],
    *,
    depot: Depot,
    minutes_per_km: float = settings.travel_minutes_per_km,
) -> RouteDraft:
    """Search inside each cluster that holds candidates and keep the best-scoring one."""
    model = OptimizationModel.from_key(config.optimization_model)
    skills = config.conductor_skills

    best_route: list[RoutePoint] = []
    best_score = -math.inf
    for cluster in clusters:
        members = set(cluster.territories)
        in_cluster = [point for point in candidates if point.territory in members]
        if not in_cluster:
            continue
        ranked = sorted(
            in_cluster,
            key=lambda point: _member_score(
                point, depot=depot, model=model, experience=skills.experience_for(point.territory)
            ),
            reverse=True,
        )
        selected = ranked[: config.max_territories]
        route = nearest_neighbor(selected, config.max_territories)
        score = weighted_route_score(route, depot=depot, model=model)
        if score > best_score:
            best_score = score
            best_route = route

    if not best_route:
        best_route = nearest_neighbor(candidates, config.max_territories)
    return build_draft(CLUSTER, best_route, depot=depot, minutes_per_km=minutes_per_km)
