"""Firm-side models: registered users, profile, and checkout confirmation."""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

from pydantic import BaseModel, Field

from bulkfiling.models.entity import EntityRecord


class FirmUser(BaseModel):
    """Authorized user pre-registered by the filing firm."""

    id: str
    full_name: str
    email: str = ""
    title: str = ""


class FirmProfile(BaseModel):
    """Filing firm contact details."""

    firm_id: str = ""
    firm_name: str
    ein: str = ""
    contact_person: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = "United States"
    professional_type: str = ""


class OrderConfirmation(BaseModel):
    """Everything the post-checkout sync needs about a paid order."""

    confirmation_number: str
    order_number: str
    firm: FirmProfile
    entities: list[EntityRecord] = Field(default_factory=list)
    fees: dict[str, Decimal] = Field(default_factory=dict)  # entity id -> fee charged
    amount_paid: Decimal = Decimal("0")
    submitted_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def service_mix(self) -> str:
        """Service type shared by every ordered entity, or ``mixed``."""
        kinds = {e.service_type.value for e in self.entities}
        if len(kinds) > 1:
            return "mixed"
        return kinds.pop() if kinds else "filing"

    @property
    def filing_mix(self) -> str:
        kinds = {e.filing_type.value for e in self.entities}
        if len(kinds) > 1:
            return "Mixed"
        return "Exemption" if kinds == {"exemption"} else "Disclosure"
