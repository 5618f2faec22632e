"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root(request: Request) -> dict:
    engine = request.app.state.engine
    return {"status": "ok", "territories": len(engine.catalog.snapshot())}
