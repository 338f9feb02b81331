"""CRM contact payload builders.

Field keys match the custom fields configured in the HighLevel location:
person prefixes use a double underscore (``bo1__full_name``), ownership keeps
its trailing underscore (``bo1__ownership_``).
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from bulkfiling.models.entity import (
    BeneficialOwner,
    CompanyApplicant,
    EntityRecord,
    EntityType,
    FilingType,
    ServiceType,
)
from bulkfiling.models.firm import FirmProfile, OrderConfirmation

MAX_CONTACT_OWNERS = 9
MAX_CONTACT_APPLICANTS = 3
HIGH_VALUE_THRESHOLD = Decimal("5000")

CustomFields = list[dict[str, str]]


def _field(key: str, value: object) -> dict[str, str]:
    return {"key": key, "field_value": "" if value is None else str(value)}


def applicant_fields(applicant: CompanyApplicant, number: int) -> CustomFields:
    p = f"ca{number}"
    addr = applicant.address
    return [
        _field(f"{p}__full_name", applicant.full_name),
        _field(f"{p}__date_of_birth", applicant.dob),
        _field(f"{p}__street_address", addr.street),
        _field(f"{p}__city", addr.city),
        _field(f"{p}__state", addr.state),
        _field(f"{p}__zip_code", addr.zip_code),
        _field(f"{p}__country", addr.country),
        _field(f"{p}__title_or_role", applicant.role),
        _field(f"{p}__id_type", applicant.id_type),
        _field(f"{p}__id_number", applicant.id_number),
        _field(f"{p}__issuing_country", applicant.issuing_country),
        _field(f"{p}__issuing_state", applicant.issuing_state),
    ]


def owner_fields(owner: BeneficialOwner, number: int) -> CustomFields:
    p = f"bo{number}"
    addr = owner.address
    return [
        _field(f"{p}__full_name", owner.full_name),
        _field(f"{p}__date_of_birth", owner.dob),
        _field(f"{p}__street_address", addr.street),
        _field(f"{p}__city", addr.city),
        _field(f"{p}__state", addr.state),
        _field(f"{p}__zip_code", addr.zip_code),
        _field(f"{p}__country", addr.country),
        _field(f"{p}__id_type", owner.id_type),
        _field(f"{p}__id_number", owner.id_number),
        _field(f"{p}__issuing_country", owner.issuing_country),
        _field(f"{p}__issuing_state", owner.issuing_state),
        _field(f"{p}__ownership_", owner.ownership_percentage or "0"),
        _field(f"{p}__position__title", owner.position),
    ]


def firm_contact_payload(firm: FirmProfile, confirmation_number: str, location_id: str) -> dict[str, Any]:
    first, _, last = firm.contact_person.strip().partition(" ")
    return {
        "locationId": location_id,
        "firstName": first or firm.firm_name,
        "lastName": last.strip(),
        "email": firm.email,
        "phone": firm.phone,
        "companyName": firm.firm_name,
        "address1": firm.address,
        "city": firm.city,
        "state": firm.state,
        "postalCode": firm.zip_code,
        "country": firm.country,
        "tags": ["firm", "nylta-bulk-filing", "nylta_new_account"],
        "customFields": [
            _field("account_type", "firm"),
            _field("firm_name", firm.firm_name),
            _field("firm_ein", firm.ein),
            _field("firm_confirmation_number", confirmation_number),
            _field("professional_type", firm.professional_type),
            _field("firm_city", firm.city),
            _field("firm_state", firm.state),
            _field("firm_profile_completed", "true"),
        ],
    }


def client_contact_payload(
    entity: EntityRecord,
    *,
    firm_contact_id: str,
    firm: FirmProfile,
    order: OrderConfirmation,
    location_id: str,
) -> dict[str, Any]:
    """Client contact linked to its parent firm; applicants are omitted for exemptions."""
    exemption = entity.filing_type is FilingType.EXEMPTION
    fields: CustomFields = [
        _field("account_type", "client"),
        _field("parent_firm_id", firm_contact_id),
        _field("parent_firm_name", firm.firm_name),
        _field("parent_firm_confirmation", order.confirmation_number),
        _field("batch_id", order.confirmation_number),
        _field("order_number", order.order_number),
        _field("legal_business_name", entity.legal_name),
        _field("fictitious_name_dba", entity.fictitious_name),
        _field("ny_dos_id_number", entity.registry_id),
        _field("ein", entity.tax_id),
        _field("entity_type", entity.entity_type.value),
        _field("service_type", entity.service_type.value),
        _field("filing_type", entity.filing_type.value),
        _field("date_of_formation__registration", entity.formation_date),
        _field("country_of_formation", entity.country_of_formation),
        _field("state_of_formation", entity.state_of_formation),
        _field("llc_contact_email", entity.contact_email),
        _field("company_country", entity.country_of_formation),
        _field("beneficial_owners_count", len(entity.beneficial_owners)),
        _field("company_applicants_count", len(entity.company_applicants)),
    ]
    if entity.entity_type is EntityType.FOREIGN:
        fields.append(_field("date_authority_filed_in_ny", entity.foreign_authority_filed_date))
    if exemption:
        fields.append(_field("select_exemption_category", entity.exemption_category))
        fields.append(_field("explanation__supporting_facts", entity.exemption_explanation))
    else:
        for n, applicant in enumerate(entity.company_applicants[:MAX_CONTACT_APPLICANTS], start=1):
            fields.extend(applicant_fields(applicant, n))
    for n, owner in enumerate(entity.beneficial_owners[:MAX_CONTACT_OWNERS], start=1):
        fields.extend(owner_fields(owner, n))

    return {
        "locationId": location_id,
        "firstName": entity.legal_name,
        "lastName": f"({entity.service_type.value})",
        "email": entity.contact_email,
        "phone": entity.contact_phone,
        "companyName": entity.legal_name,
        "country": entity.country_of_formation,
        "tags": [
            "client",
            "nylta-llc",
            f"firm-{order.confirmation_number}",
            "nylta_submission_complete",
        ],
        "customFields": fields,
    }


def order_update_payload(order: OrderConfirmation) -> dict[str, Any]:
    """Order details and workflow trigger tags applied to the firm contact."""
    submitted = order.submitted_at.date().isoformat()
    count = len(order.entities)
    amount = f"{order.amount_paid:.2f}"
    tags = [
        "nylta_submission_complete",
        "nylta_invoice_pending",
        "Status: Bulk Filing Submitted",
        f"Filings: {count}",
        f"Filing Type: {order.filing_mix}",
    ]
    if order.amount_paid > HIGH_VALUE_THRESHOLD:
        tags.append("Priority: High Value")
    return {
        "tags": tags,
        "customFields": [
            _field("batch_id", order.confirmation_number),
            _field("order_number", order.order_number),
            _field("submission_date", submitted),
            _field("submission_status", "Pending"),
            _field("payment_status", "Pending"),
            _field("payment_amount", amount),
            _field("payment_date", submitted),
            _field("last_order_number", order.order_number),
            _field("last_order_date", submitted),
            _field("last_order_amount", amount),
            _field("last_order_client_count", count),
            _field("bulk_service_type", order.service_mix),
            _field("client_count", count),
            _field("amount_paid", amount),
            _field("bulk_filing_contact_email", order.firm.email),
        ],
    }


def order_note(order: OrderConfirmation) -> str:
    """Plain-text order summary posted as a note on the firm contact.

    Each filed client is listed with the fee recorded for it in
    ``order.fees``; clients without a recorded fee are listed without one.
    """
    amount = f"{order.amount_paid:.2f}"
    lines = [
        f"New Order Placed - {order.confirmation_number}",
        "",
        "Order Details:",
        f"- Order Number: {order.order_number}",
        f"- Submission Date: {order.submitted_at.date().isoformat()}",
        f"- Amount Paid: ${amount}",
        f"- Number of Clients: {len(order.entities)}",
        f"- Service Type: {order.service_mix}",
        "",
        "Clients Filed:",
    ]
    for number, entity in enumerate(order.entities, start=1):
        service = "Compliance Monitoring" if entity.service_type is ServiceType.MONITORING else "Bulk Filing"
        line = f"{number}. {entity.legal_name} - {service}"
        fee = order.fees.get(entity.id)
        if fee is not None:
            line += f" (${fee:.2f})"
        lines.append(line)
    lines += ["", f"Total: ${amount}"]
    return "\n".join(lines)
