"""SubmissionSync -- pushes a paid order to the CRM in the background.

Checkout never waits on, or fails because of, the CRM: every error is logged
and dropped. A failing client contact does not stop the remaining ones.
"""

from __future__ import annotations

import asyncio

from bulkfiling.agents.orchestrator.contacts import (
    client_contact_payload,
    firm_contact_payload,
    order_note,
    order_update_payload,
)
from bulkfiling.core.exceptions import BulkFilingError
from bulkfiling.core.logging import get_logger
from bulkfiling.core.protocols import ICRMClient
from bulkfiling.models.firm import OrderConfirmation

logger = get_logger(__name__)


class SubmissionSync:
    """Fire-and-forget CRM sync: firm contact, client contacts, order update, order note."""

    def __init__(self, crm: ICRMClient, location_id: str = "") -> None:
        self._crm = crm
        self._location_id = location_id
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def schedule(self, order: OrderConfirmation) -> asyncio.Task[None]:
        """Start the sync on the running loop and return immediately."""
        task = asyncio.get_running_loop().create_task(
            self._run(order), name=f"crm-sync-{order.confirmation_number}"
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait for every scheduled sync (shutdown and tests)."""
        if self._tasks:
            await asyncio.gather(*self._tasks)

    async def _run(self, order: OrderConfirmation) -> None:
        log = logger.bind(confirmation=order.confirmation_number, order=order.order_number)
        try:
            await self.sync(order)
        except BulkFilingError as exc:
            log.error("crm_sync_failed", error=str(exc))
        except Exception:  # noqa: BLE001 -- background task must never surface
            log.exception("crm_sync_crashed")

    async def sync(self, order: OrderConfirmation) -> list[str]:
        """Run the sync stages in order; returns the client contact ids created."""
        log = logger.bind(confirmation=order.confirmation_number)
        if not order.firm.email.strip():
            log.warning("crm_sync_skipped", reason="firm has no contact email")
            return []

        firm_contact_id = await self._crm.upsert_contact(
            firm_contact_payload(order.firm, order.confirmation_number, self._location_id)
        )
        log.info("crm_firm_contact_upserted", contact_id=firm_contact_id)

        client_ids = await self.create_client_contacts(order, firm_contact_id)

        await self._crm.update_contact(firm_contact_id, order_update_payload(order))
        await self._crm.add_note(firm_contact_id, order_note(order))
        log.info("crm_order_confirmed", clients=len(client_ids), entities=len(order.entities))
        return client_ids

    async def create_client_contacts(self, order: OrderConfirmation, firm_contact_id: str) -> list[str]:
        contact_ids: list[str] = []
        for entity in order.entities:
            payload = client_contact_payload(
                entity,
                firm_contact_id=firm_contact_id,
                firm=order.firm,
                order=order,
                location_id=self._location_id,
            )
            try:
                contact_ids.append(await self._crm.upsert_contact(payload))
            except BulkFilingError as exc:
                logger.warning(
                    "crm_client_contact_failed",
                    confirmation=order.confirmation_number,
                    entity_id=entity.id,
                    error=str(exc),
                )
        logger.info("crm_client_contacts_created",
                    created=len(contact_ids), requested=len(order.entities))
        return contact_ids
