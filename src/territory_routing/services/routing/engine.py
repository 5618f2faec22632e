"""Route optimization orchestration."""

from __future__ import annotations

import logging
import threading
import uuid
from concurrent.futures import Future, ThreadPoolExecutor, wait
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence

from ...config import settings
from ...data.catalog import CatalogProvider
from ...models.domain import Depot, RoutePoint, TerritoryCluster
from ..clustering.engine import ClusteringEngine
from .constructors import (
    EXACT,
    cluster_weighted_route,
    exact_search_route,
    greedy_budget_route,
    nearest_neighbor_route,
)
from .ledger import RouteLedger
from .models import (
    OptimizedRoute,
    RouteDraft,
    RouteMetrics,
    RouteOptimizationConfig,
    validate_config,
)
from .recommendations import NO_TERRITORIES_AVAILABLE, build_alternatives, route_recommendations
from .scoring import rank_drafts
from .selection import apply_skill_adjustments, select_candidates

MetricsCallback = Callable[[RouteMetrics], None]


def default_depot() -> Depot:
    return Depot(code=settings.depot_code, latitude=settings.depot_latitude, longitude=settings.depot_longitude)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RouteOptimizationEngine:
    """Builds optimized visiting orders for conductors over one territory catalog.

    The engine owns its clustering cache and history ledger; separate
    instances share nothing. Construction strategies run concurrently on a
    per-call thread pool and the best-scoring draft wins.
    """

    def __init__(
        self,
        catalog: CatalogProvider,
        *,
        depot: Optional[Depot] = None,
        clustering: Optional[ClusteringEngine] = None,
        ledger: Optional[RouteLedger] = None,
        recent_visit_days: int = settings.recent_visit_days,
        exact_search_max_points: int = settings.exact_search_max_points,
        permutation_budget: int = settings.permutation_budget,
        travel_minutes_per_km: float = settings.travel_minutes_per_km,
        timeout_seconds: Optional[float] = settings.optimization_timeout_seconds,
        max_workers: int = settings.optimization_workers,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.catalog = catalog
        self.depot = depot if depot is not None else default_depot()
        self.clustering = clustering if clustering is not None else ClusteringEngine(catalog)
        self.ledger = ledger if ledger is not None else RouteLedger()
        self.recent_visit_days = recent_visit_days
        self.exact_search_max_points = exact_search_max_points
        self.permutation_budget = permutation_budget
        self.travel_minutes_per_km = travel_minutes_per_km
        self.timeout_seconds = timeout_seconds
        self.max_workers = max_workers
        self.clock = clock
        self._active = 0
        self._active_lock = threading.Lock()
        self._subscribers: set[MetricsCallback] = set()
        self._subscribers_lock = threading.Lock()

    @property
    def active_optimizations(self) -> int:
        with self._active_lock:
            return self._active

    def optimize_route(
        self,
        conductor_id: str,
        config: RouteOptimizationConfig,
        *,
        timeout: Optional[float] = None,
    ) -> OptimizedRoute:
        validate_config(config)

        with self._active_lock:
            self._active += 1
        try:
            now = self.clock()
            candidates = select_candidates(
                self.catalog.snapshot(),
                config,
                now=now,
                recent_visit_days=self.recent_visit_days,
            )
            adjusted = apply_skill_adjustments(candidates, config.conductor_skills)
            logging.info(f"Optimizing route for conductor '{conductor_id}' over {len(adjusted)} candidates")

            drafts = self._construct(adjusted, config, timeout if timeout is not None else self.timeout_seconds)
            complete = self._complete_exact_tour(drafts, adjusted, config)
            route = self._assemble(conductor_id, drafts, now, complete=complete)
            self.ledger.record(route)
        finally:
            with self._active_lock:
                self._active -= 1

        logging.info(
            f"Route {route.route_id}: strategy={route.strategy}, points={len(route.points)}, "
            f"efficiency={route.efficiency_score:.3f}"
        )
        self._notify()
        return route

    def _construct(
        self,
        candidates: Sequence[RoutePoint],
        config: RouteOptimizationConfig,
        timeout: Optional[float],
    ) -> list[RouteDraft]:
        if not candidates:
            return []

        tasks: list[Callable[[], Optional[RouteDraft]]] = [
            lambda: exact_search_route(
                candidates,
                config,
                depot=self.depot,
                max_points=self.exact_search_max_points,
                budget=self.permutation_budget,
                minutes_per_km=self.travel_minutes_per_km,
            ),
            lambda: nearest_neighbor_route(
                candidates, config, depot=self.depot, minutes_per_km=self.travel_minutes_per_km
            ),
            lambda: greedy_budget_route(
                candidates, config, depot=self.depot, minutes_per_km=self.travel_minutes_per_km
            ),
            lambda: cluster_weighted_route(
                candidates,
                config,
                self.clustering.clusters(),
                depot=self.depot,
                minutes_per_km=self.travel_minutes_per_km,
            ),
        ]

        executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="route-constructor")
        try:
            futures: list[Future] = [executor.submit(task) for task in tasks]
            done, pending = wait(futures, timeout=timeout)
            if pending:
                logging.warning(
                    f"Route construction timed out after {timeout}s; {len(pending)} strategies did not finish"
                )
            drafts = [future.result() for future in futures if future in done]
        finally:
            executor.shutdown(wait=False, cancel_futures=True)
        return [draft for draft in drafts if draft is not None]

    @staticmethod
    def _complete_exact_tour(
        drafts: Sequence[RouteDraft],
        candidates: Sequence[RoutePoint],
        config: RouteOptimizationConfig,
    ) -> Optional[RouteDraft]:
        """The exact draft if it visits every requested territory within the time budget."""
        requested = min(config.max_territories, len(candidates))
        for draft in drafts:
            if (
                draft.strategy == EXACT
                and draft.points
                and len(draft.points) == requested
                and draft.estimated_time_min <= config.max_travel_time
            ):
                return draft
        return None

    def _assemble(
        self,
        conductor_id: str,
        drafts: Sequence[RouteDraft],
        now: datetime,
        *,
        complete: Optional[RouteDraft] = None,
    ) -> OptimizedRoute:
        route_id = f"route_{int(now.timestamp() * 1000)}_{conductor_id}_{uuid.uuid4().hex[:6]}"
        ranked = rank_drafts([draft for draft in drafts if draft.points], preferred=complete)
        if not ranked:
            return OptimizedRoute(
                route_id=route_id,
                conductor_id=conductor_id,
                strategy="none",
                points=[],
                total_distance_km=0.0,
                estimated_time_min=0.0,
                expected_calls=0,
                efficiency_score=0.0,
                recommendations=[NO_TERRITORIES_AVAILABLE],
                alternative_routes=[],
            )

        winner, score = ranked[0]
        return OptimizedRoute(
            route_id=route_id,
            conductor_id=conductor_id,
            strategy=winner.strategy,
            points=list(winner.points),
            total_distance_km=winner.total_distance_km,
            estimated_time_min=winner.estimated_time_min,
            expected_calls=len(winner.points),
            efficiency_score=score,
            recommendations=route_recommendations(winner, score),
            alternative_routes=build_alternatives(ranked),
        )

    def get_clusters(self) -> list[TerritoryCluster]:
        return list(self.clustering.clusters())

    def get_history(self) -> list[OptimizedRoute]:
        return self.ledger.history()

    def get_metrics(self) -> RouteMetrics:
        return self.ledger.metrics(active_optimizations=self.active_optimizations)

    def subscribe(self, callback: MetricsCallback) -> Callable[[], None]:
        """Register a callback receiving fresh metrics after every optimization."""
        with self._subscribers_lock:
            self._subscribers.add(callback)

        def unsubscribe() -> None:
            with self._subscribers_lock:
                self._subscribers.discard(callback)

        return unsubscribe

    def _notify(self) -> None:
        with self._subscribers_lock:
            subscribers = list(self._subscribers)
        if not subscribers:
            return
        metrics = self.get_metrics()
        for callback in subscribers:
            try:
                callback(metrics)
            except Exception:
                logging.exception("Route metrics subscriber failed")
