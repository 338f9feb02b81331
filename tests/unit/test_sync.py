"""Tests for the fire-and-forget CRM sync."""

from __future__ import annotations

from decimal import Decimal

import pytest

from bulkfiling.agents.orchestrator.sync import SubmissionSync
from bulkfiling.models.firm import FirmProfile, OrderConfirmation
from tests.fakes import MemoryCRMClient
from tests.fakes.rows import make_entity


def _order(*entities, firm_email="pat@smithco.test"):
    return OrderConfirmation(
        confirmation_number="NYLTA-0002",
        order_number="ORD-2",
        firm=FirmProfile(firm_name="Smith & Co", contact_person="Pat Smith", email=firm_email),
        entities=list(entities),
        amount_paid=Decimal("747.00"),
        fees={e.id: Decimal("249") for e in entities},
    )


class TestSubmissionSync:
    @pytest.mark.asyncio
    async def test_runs_all_stages(self):
        crm = MemoryCRMClient()
        sync = SubmissionSync(crm, location_id="loc-1")
        order = _order(make_entity("a", contact_email="a@x.test"), make_entity("b", contact_email="b@x.test"))

        client_ids = await sync.sync(order)

        assert len(client_ids) == 2
        firm_id = next(cid for cid, p in crm.contacts.items() if p["email"] == "pat@smithco.test")
        assert crm.updates[0][0] == firm_id
        assert "Filings: 2" in crm.updates[0][1]["tags"]
        assert len(crm.notes) == 1
        note_contact, note = crm.notes[0]
        assert note_contact == firm_id
        assert "1. Entity a - Compliance Monitoring ($249.00)" in note

    @pytest.mark.asyncio
    async def test_failed_client_does_not_stop_others(self):
        crm = MemoryCRMClient(fail_emails={"bad@x.test"})
        sync = SubmissionSync(crm)
        order = _order(
            make_entity("a", contact_email="bad@x.test"),
            make_entity("b", contact_email="b@x.test"),
        )

        client_ids = await sync.sync(order)

        assert len(client_ids) == 1
        assert len(crm.updates) == 1

    @pytest.mark.asyncio
    async def test_schedule_swallows_failures(self):
        crm = MemoryCRMClient(fail_emails={"pat@smithco.test"})
        sync = SubmissionSync(crm)

        task = sync.schedule(_order(make_entity("a")))
        await sync.drain()

        assert task.done()
        assert task.exception() is None
        assert crm.contacts == {}
        assert sync.pending == 0

    @pytest.mark.asyncio
    async def test_schedule_returns_before_sync_runs(self):
        crm = MemoryCRMClient()
        sync = SubmissionSync(crm)

        sync.schedule(_order(make_entity("a", contact_email="a@x.test")))
        assert crm.contacts == {}
        assert sync.pending == 1

        await sync.drain()
        assert len(crm.contacts) == 2

    @pytest.mark.asyncio
    async def test_firm_without_email_is_skipped(self):
        crm = MemoryCRMClient()
        assert await SubmissionSync(crm).sync(_order(make_entity("a"), firm_email="")) == []
        assert crm.contacts == {}
