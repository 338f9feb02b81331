"""Admin endpoints for pricing configuration."""

from __future__ import annotations

from fastapi import APIRouter, Request

from bulkfiling.agents.compliance.pricing import load_schedule
from bulkfiling.models.pricing import PricingSchedule

router = APIRouter(tags=["admin"])


@router.get("/pricing")
async def get_pricing(request: Request, firm_id: str | None = None) -> PricingSchedule:
    """Return the schedule that quotes for ``firm_id`` would use."""
    state = request.app.state
    return load_schedule(state.pricing_store, state.settings.pricing, firm_id)
