"""Route optimization endpoints."""

from __future__ import annotations

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Request, status

from ...schemas.routing import (
    OptimizedRouteModel,
    OptimizeRouteRequest,
    RouteMetricsModel,
    TerritoryClusterModel,
)
from ...services.routing.engine import RouteOptimizationEngine

router = APIRouter(prefix="/routes", tags=["routes"])


def get_engine(request: Request) -> RouteOptimizationEngine:
    return request.app.state.engine


@router.post("/optimize", response_model=OptimizedRouteModel, status_code=status.HTTP_200_OK)
def optimize(
    payload: OptimizeRouteRequest,
    engine: RouteOptimizationEngine = Depends(get_engine),
) -> OptimizedRouteModel:
    try:
        route = engine.optimize_route(payload.conductor_id, payload.to_config(), timeout=payload.timeout_seconds)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error optimizing route for conductor '{payload.conductor_id}': {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to optimize route: {str(exc)}",
        ) from exc
    return OptimizedRouteModel.model_validate(asdict(route))


@router.get("/clusters", response_model=list[TerritoryClusterModel], status_code=status.HTTP_200_OK)
def clusters(engine: RouteOptimizationEngine = Depends(get_engine)) -> list[TerritoryClusterModel]:
    return [TerritoryClusterModel.model_validate(asdict(cluster)) for cluster in engine.get_clusters()]


@router.get("/metrics", response_model=RouteMetricsModel, status_code=status.HTTP_200_OK)
def metrics(engine: RouteOptimizationEngine = Depends(get_engine)) -> RouteMetricsModel:
    return RouteMetricsModel.model_validate(asdict(engine.get_metrics()))


@router.get("/history", response_model=list[OptimizedRouteModel], status_code=status.HTTP_200_OK)
def history(engine: RouteOptimizationEngine = Depends(get_engine)) -> list[OptimizedRouteModel]:
    """Most recent optimized routes, oldest first."""
    return [OptimizedRouteModel.model_validate(asdict(route)) for route in engine.get_history()]
