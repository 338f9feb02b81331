"""Tests for CRM contact payload builders."""

from __future__ import annotations

from decimal import Decimal

from bulkfiling.agents.orchestrator.contacts import (
    client_contact_payload,
    firm_contact_payload,
    order_note,
    order_update_payload,
)
from bulkfiling.models.entity import CompanyApplicant, FilingType
from bulkfiling.models.firm import FirmProfile, OrderConfirmation
from tests.fakes.rows import complete_owner, make_entity


def _fields(payload):
    return {f["key"]: f["field_value"] for f in payload["customFields"]}


def _firm():
    return FirmProfile(firm_id="firm-1", firm_name="Smith & Co CPAs", ein="98-7654321",
                       contact_person="Pat Smith Jr", email="pat@smithco.test", city="Albany", state="NY")


def _order(entities, amount="1000"):
    return OrderConfirmation(confirmation_number="NYLTA-0001", order_number="ORD-1",
                             firm=_firm(), entities=entities, amount_paid=Decimal(amount))


class TestFirmContact:
    def test_name_split_and_tags(self):
        payload = firm_contact_payload(_firm(), "NYLTA-0001", "loc-1")
        assert payload["firstName"] == "Pat"
        assert payload["lastName"] == "Smith Jr"
        assert payload["locationId"] == "loc-1"
        assert "nylta_new_account" in payload["tags"]
        assert _fields(payload)["firm_confirmation_number"] == "NYLTA-0001"


class TestClientContact:
    def test_disclosure_owners_and_applicants(self):
        entity = make_entity(
            "d1",
            beneficial_owners=[complete_owner("bo-1", pct="75")],
            company_applicants=[CompanyApplicant(id="ca-1", full_name="Alice Filer", role="Attorney")],
        )
        payload = client_contact_payload(entity, firm_contact_id="contact-1", firm=_firm(),
                                         order=_order([entity]), location_id="loc-1")
        fields = _fields(payload)
        assert fields["bo1__full_name"] == "Jane Doe"
        assert fields["bo1__ownership_"] == "75"
        assert fields["ca1__title_or_role"] == "Attorney"
        assert fields["parent_firm_id"] == "contact-1"
        assert fields["beneficial_owners_count"] == "1"
        assert "firm-NYLTA-0001" in payload["tags"]
        assert payload["lastName"] == "(monitoring)"

    def test_exemption_omits_applicants(self):
        entity = make_entity(
            "e1", filing=FilingType.EXEMPTION, exemption_category="Bank",
            company_applicants=[CompanyApplicant(id="ca-1", full_name="Alice Filer")],
        )
        fields = _fields(client_contact_payload(entity, firm_contact_id="c", firm=_firm(),
                                                order=_order([entity]), location_id=""))
        assert fields["select_exemption_category"] == "Bank"
        assert not any(key.startswith("ca1__") for key in fields)

    def test_foreign_entity_reports_authority_date(self):
        entity = make_entity("f1", country="Canada", foreign_authority_filed_date="2022-02-02")
        fields = _fields(client_contact_payload(entity, firm_contact_id="c", firm=_firm(),
                                                order=_order([entity]), location_id=""))
        assert fields["date_authority_filed_in_ny"] == "2022-02-02"
        assert fields["service_type"] == "filing"

    def test_owner_fields_capped_at_nine(self):
        owners = [complete_owner(f"bo-{n}") for n in range(1, 12)]
        entity = make_entity("d1", beneficial_owners=owners)
        fields = _fields(client_contact_payload(entity, firm_contact_id="c", firm=_firm(),
                                                order=_order([entity]), location_id=""))
        assert "bo9__full_name" in fields
        assert "bo10__full_name" not in fields
        assert fields["beneficial_owners_count"] == "11"


class TestOrderUpdate:
    def test_tags_and_amounts(self):
        entities = [make_entity("d1"), make_entity("e1", filing=FilingType.EXEMPTION)]
        payload = order_update_payload(_order(entities, amount="5000.01"))
        assert "Filing Type: Mixed" in payload["tags"]
        assert "Filings: 2" in payload["tags"]
        assert "Priority: High Value" in payload["tags"]
        fields = _fields(payload)
        assert fields["amount_paid"] == "5000.01"
        assert fields["bulk_service_type"] == "monitoring"

    def test_no_priority_tag_at_threshold(self):
        payload = order_update_payload(_order([make_entity("d1", service="filing")], amount="5000"))
        assert "Priority: High Value" not in payload["tags"]
        assert "Filing Type: Disclosure" in payload["tags"]


class TestOrderNote:
    def test_lists_each_client_with_its_fee(self):
        entities = [
            make_entity("d1", legal_name="Acme LLC"),
            make_entity("f1", legal_name="Maple Corp", country="Canada"),
        ]
        order = _order(entities, amount="647")
        order.fees = {"d1": Decimal("249"), "f1": Decimal("398")}

        note = order_note(order)

        assert note.startswith("New Order Placed - NYLTA-0001")
        assert "1. Acme LLC - Compliance Monitoring ($249.00)" in note
        assert "2. Maple Corp - Bulk Filing ($398.00)" in note
        assert "- Number of Clients: 2" in note
        assert "- Service Type: mixed" in note
        assert note.endswith("Total: $647.00")

    def test_client_without_recorded_fee_has_no_amount(self):
        note = order_note(_order([make_entity("d1", legal_name="Acme LLC")]))
        assert "1. Acme LLC - Compliance Monitoring\n" in note
