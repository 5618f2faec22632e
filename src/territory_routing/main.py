"""FastAPI application entry point."""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI

from .api.routes import health, routes
from .config import settings
from .data.catalog import TerritoryCatalog, generate_synthetic_catalog, load_catalog_csv
from .services.routing.engine import RouteOptimizationEngine


def build_default_engine() -> RouteOptimizationEngine:
    if settings.catalog_file is not None:
        points = load_catalog_csv(settings.catalog_file)
    else:
        points = generate_synthetic_catalog(
            settings.synthetic_territory_count,
            seed=settings.random_seed,
            base_latitude=settings.depot_latitude,
            base_longitude=settings.depot_longitude,
        )
    return RouteOptimizationEngine(TerritoryCatalog(points))


def create_app(engine: Optional[RouteOptimizationEngine] = None) -> FastAPI:
    app = FastAPI(title=settings.app_name)
    app.state.engine = engine if engine is not None else build_default_engine()

    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(routes.router, prefix=settings.api_prefix)
    return app


app = create_app()
