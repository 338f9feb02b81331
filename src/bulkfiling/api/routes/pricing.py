"""Quote endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from bulkfiling.agents.compliance.pricing import PricingEngine, load_schedule
from bulkfiling.models.entity import EntityRecord
from bulkfiling.models.pricing import PricingSummary

router = APIRouter(tags=["pricing"])


class QuoteRequest(BaseModel):
    entities: list[EntityRecord] = Field(default_factory=list)
    selected_ids: list[str] | None = None  # None prices every entity
    firm_id: str | None = None


@router.post("/quote")
async def quote(request: Request, body: QuoteRequest) -> PricingSummary:
    state = request.app.state
    schedule = load_schedule(state.pricing_store, state.settings.pricing, body.firm_id)
    return PricingEngine(schedule).quote(body.entities, body.selected_ids)
