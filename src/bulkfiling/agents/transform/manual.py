"""Manual single-client entry with required-field validation.

Hand-entered clients skip the parsers but end up in the same canonical
shape: entity type and service type derive from the country of formation,
exactly as for uploaded rows.
"""

from __future__ import annotations

import re
from uuid import uuid4

from pydantic import BaseModel

from bulkfiling.core.exceptions import ManualEntryError
from bulkfiling.core.logging import get_logger
from bulkfiling.models.entity import DOMESTIC_COUNTRY, EntityRecord, FilingType

logger = get_logger(__name__)

_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class ManualEntry(BaseModel):
    """Fields of the add-a-client form."""

    legal_name: str = ""
    registry_id: str = ""  # NY DOS ID
    tax_id: str = ""
    formation_date: str = ""
    country_of_formation: str = DOMESTIC_COUNTRY
    state_of_formation: str = ""
    contact_email: str = ""
    filing_type: str = FilingType.DISCLOSURE.value

    model_config = {"str_strip_whitespace": True}


def validate_manual_entry(entry: ManualEntry) -> list[str]:
    """Labels of the required fields that are missing or malformed, in form order."""
    missing: list[str] = []
    if not entry.legal_name:
        missing.append("legal name")
    if not entry.registry_id:
        missing.append("NY DOS ID")
    if not entry.formation_date:
        missing.append("formation date")
    if not entry.contact_email:
        missing.append("contact email")
    elif not _EMAIL.match(entry.contact_email):
        missing.append("contact email (invalid format)")
    if not entry.country_of_formation:
        missing.append("country of formation")
    elif entry.country_of_formation == DOMESTIC_COUNTRY and not entry.state_of_formation:
        missing.append("state of formation (required for United States entities)")
    if entry.filing_type.lower() not in (FilingType.DISCLOSURE, FilingType.EXEMPTION):
        missing.append("filing type (disclosure or exemption)")
    return missing


def build_manual_entity(entry: ManualEntry) -> EntityRecord:
    """Validate ``entry`` and build its record; raises ``ManualEntryError`` listing every gap."""
    missing = validate_manual_entry(entry)
    if missing:
        logger.info("manual_entry_rejected", missing=missing)
        raise ManualEntryError(missing)

    entity = EntityRecord(
        id=f"client-{uuid4().hex[:12]}",
        legal_name=entry.legal_name,
        registry_id=entry.registry_id,
        tax_id=entry.tax_id,
        formation_date=entry.formation_date,
        country_of_formation=entry.country_of_formation,
        state_of_formation=entry.state_of_formation,
        contact_email=entry.contact_email,
        filing_type=FilingType(entry.filing_type.lower()),
    )
    logger.info("manual_entity_added", entity_id=entity.id,
                entity_type=entity.entity_type.value, service_type=entity.service_type.value)
    return entity
