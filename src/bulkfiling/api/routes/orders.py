"""Paid-order hand-off: schedules the CRM sync and returns immediately."""

from __future__ import annotations

from fastapi import APIRouter, Request, status

from bulkfiling.models.firm import OrderConfirmation

router = APIRouter(tags=["orders"])


@router.post("", status_code=status.HTTP_202_ACCEPTED)
async def confirm_order(request: Request, order: OrderConfirmation) -> dict:
    sync = request.app.state.sync
    if sync is not None:
        sync.schedule(order)
    return {"confirmation_number": order.confirmation_number, "crm_sync_scheduled": sync is not None}
