"""Bounded in-memory history of produced routes."""

from __future__ import annotations

import threading
from collections import deque

from ...config import settings
from .models import OptimizationModel, OptimizedRoute, RouteMetrics

DISTANCE_SAVINGS_FACTOR = 0.2


class RouteLedger:
    """Ring buffer of the most recent optimized routes; oldest entries are evicted first."""

    def __init__(self, capacity: int = settings.history_capacity) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self.capacity = capacity
        self._routes: deque[OptimizedRoute] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._routes)

    def record(self, route: OptimizedRoute) -> None:
        with self._lock:
            self._routes.append(route)

    def history(self) -> list[OptimizedRoute]:
        with self._lock:
            return list(self._routes)

    def metrics(self, *, active_optimizations: int = 0) -> RouteMetrics:
        routes = self.history()
        total = len(routes)
        total_distance = sum(route.total_distance_km for route in routes)
        visited = [point for route in routes for point in route.points]
        return RouteMetrics(
            total_routes_optimized=total,
            avg_efficiency=sum(route.efficiency_score for route in routes) / total if total else 0.0,
            total_distance_km=total_distance,
            total_distance_saved_km=total_distance * DISTANCE_SAVINGS_FACTOR,
            avg_success_rate=(
                sum(point.success_probability for point in visited) / len(visited) if visited else 0.0
            ),
            model_accuracy=sum(model.accuracy for model in OptimizationModel) / len(OptimizationModel),
            active_optimizations=active_optimizations,
        )
