"""Health check endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}


@router.get("/ready")
async def ready(request: Request) -> dict:
    intake = await request.app.state.intake.health_check()
    return {
        "status": "ready",
        "intake": intake["status"],
        "crm_sync": request.app.state.sync is not None,
    }
