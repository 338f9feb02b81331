"""Canonical Entity Record -- the normalized structure every component operates on.

Every upload, whichever of the two bulk schemas it uses, is parsed into
this shape. Classification fields (entity type, service type) and the
readiness flag are derived on read and can never go stale.
"""

from __future__ import annotations

import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import StrEnum
from typing import Optional

from pydantic import BaseModel, Field, computed_field

DOMESTIC_COUNTRY = "United States"

_DATE_FORMATS = ("%Y-%m-%d", "%m/%d/%Y", "%Y/%m/%d")
_STATE_ZIP = re.compile(r"^(?P<state>[A-Za-z][A-Za-z .]*?)\s+(?P<zip>\d{5}(?:-\d{4})?)$")


class EntityType(StrEnum):
    DOMESTIC = "domestic"
    FOREIGN = "foreign"


class ServiceType(StrEnum):
    MONITORING = "monitoring"
    FILING = "filing"


class FilingType(StrEnum):
    DISCLOSURE = "disclosure"
    EXEMPTION = "exemption"


def parse_date(value: str) -> Optional[date]:
    """Parse an input date cell; returns None when it is not a real date."""
    text = (value or "").strip()
    if not text:
        return None
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


def parse_percentage(value: str) -> Optional[Decimal]:
    """Parse an ownership percentage such as ``"25"``, ``"12.5"`` or ``"40%"``."""
    text = (value or "").strip().rstrip("%").strip()
    if not text:
        return None
    try:
        pct = Decimal(text)
    except InvalidOperation:
        return None
    return pct if pct.is_finite() else None


def classify_entity(country_of_formation: str) -> EntityType:
    """Domestic iff formed exactly in "United States" (case-sensitive)."""
    if country_of_formation == DOMESTIC_COUNTRY:
        return EntityType.DOMESTIC
    return EntityType.FOREIGN


def coerce_filing_type(value: str) -> FilingType:
    """Anything other than "exemption" (case-insensitive) is a disclosure."""
    if (value or "").strip().lower() == FilingType.EXEMPTION:
        return FilingType.EXEMPTION
    return FilingType.DISCLOSURE


def coerce_service_hint(value: str) -> Optional[ServiceType]:
    """Recognize a service-level cell; unrecognized values carry no hint."""
    text = (value or "").strip().lower()
    if text in (ServiceType.MONITORING, ServiceType.FILING):
        return ServiceType(text)
    return None


class Address(BaseModel):
    """Structured postal address."""

    street: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    country: str = ""

    model_config = {"str_strip_whitespace": True}

    @classmethod
    def parse(cls, text: str) -> Address:
        """Read a single-cell address.

        Accepts ``street|city|state|zip|country`` and
        ``street[, more street], city, STATE ZIP[, country]``, read from the
        right. Anything else lands in ``street`` untouched.
        """
        text = (text or "").strip()
        if not text:
            return cls()
        if "|" in text:
            parts = [p.strip() for p in text.split("|")] + [""] * 5
            return cls(street=parts[0], city=parts[1], state=parts[2],
                       zip_code=parts[3], country=parts[4])

        parts = [p.strip() for p in text.split(",")]
        for i in range(len(parts) - 1, 1, -1):
            match = _STATE_ZIP.match(parts[i])
            if match:
                return cls(street=", ".join(parts[:i - 1]), city=parts[i - 1],
                           state=match.group("state"), zip_code=match.group("zip"),
                           country=", ".join(parts[i + 1:]))
        return cls(street=text)

    @property
    def is_complete(self) -> bool:
        return all((self.street, self.city, self.state, self.zip_code, self.country))


class CompanyApplicant(BaseModel):
    """Individual responsible for the filing submission."""

    id: str
    full_name: str = ""
    dob: str = ""
    address: Address = Field(default_factory=Address)
    id_type: str = "SSN"
    id_number: str = ""
    issuing_country: str = ""
    issuing_state: str = ""
    role: str = ""
    matched_user_id: Optional[str] = None  # firm user with the same name, informational


class BeneficialOwner(BaseModel):
    """Individual reported under a disclosure filing."""

    id: str
    full_name: str = ""
    dob: str = ""
    address: Address = Field(default_factory=Address)
    id_type: str = ""
    id_number: str = ""
    issuing_country: str = ""
    issuing_state: str = ""
    ownership_percentage: str = ""
    position: str = ""

    @property
    def ownership(self) -> Optional[Decimal]:
        return parse_percentage(self.ownership_percentage)

    @property
    def has_valid_dob(self) -> bool:
        born = parse_date(self.dob)
        return born is not None and born <= date.today()

    def missing_fields(self) -> list[str]:
        """Names of the requirements this owner does not yet satisfy."""
        missing: list[str] = []
        if not self.full_name.strip():
            missing.append("full_name")
        if not self.has_valid_dob:
            missing.append("dob")
        if not self.address.is_complete:
            missing.append("address")
        if not self.id_type.strip():
            missing.append("id_type")
        if not self.id_number.strip():
            missing.append("id_number")
        if not self.issuing_country.strip():
            missing.append("issuing_country")
        elif self.issuing_country.strip() == DOMESTIC_COUNTRY and not self.issuing_state.strip():
            missing.append("issuing_state")
        pct = self.ownership
        if pct is None or pct <= 0:
            missing.append("ownership_percentage")
        return missing

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields()


class EntityRecord(BaseModel):
    """Single client company in canonical format."""

    # --- Identity Fields ---
    id: str
    legal_name: str = ""
    fictitious_name: str = ""
    registry_id: str = ""  # NY DOS ID
    tax_id: str = ""  # EIN

    # --- Formation Fields ---
    formation_date: str = ""
    country_of_formation: str = DOMESTIC_COUNTRY
    state_of_formation: str = ""
    foreign_authority_filed_date: str = ""  # foreign entities only

    # --- Contact Fields ---
    contact_email: str = ""
    contact_phone: str = ""

    # --- Filing Selection ---
    filing_type: FilingType = FilingType.DISCLOSURE
    requested_service: Optional[ServiceType] = None  # input hint or user choice

    # --- Exemption Fields ---
    exemption_category: str = ""
    exemption_explanation: str = ""

    # --- Child Records ---
    company_applicants: list[CompanyApplicant] = Field(default_factory=list)
    beneficial_owners: list[BeneficialOwner] = Field(default_factory=list)

    model_config = {"str_strip_whitespace": True, "validate_assignment": True}

    @computed_field  # type: ignore[prop-decorator]
    @property
    def entity_type(self) -> EntityType:
        return classify_entity(self.country_of_formation)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def service_type(self) -> ServiceType:
        """Foreign entities always file; domestic ones default to monitoring."""
        if self.entity_type is EntityType.FOREIGN:
            return ServiceType.FILING
        return self.requested_service or ServiceType.MONITORING

    @property
    def has_identity(self) -> bool:
        """Name and formation date are present (parse-time incompleteness rule)."""
        return bool(self.legal_name and self.formation_date)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def data_complete(self) -> bool:
        """Filing-type rule only: exemption category, or fully populated owners."""
        if self.filing_type is FilingType.EXEMPTION:
            return bool(self.exemption_category.strip())
        return bool(self.beneficial_owners) and all(
            owner.is_complete for owner in self.beneficial_owners
        )
