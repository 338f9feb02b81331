"""RelationalAssembler -- joins the four-table template into entity records.

Child tables are indexed by trimmed Client_ID once, in table order, so each
entity row is assembled with dictionary lookups instead of table scans.
"""

from __future__ import annotations

from collections import defaultdict
from typing import Iterable, Optional

from bulkfiling.agents.transform.base import RecordProducer
from bulkfiling.agents.transform.blocks import (
    APPLICANT_COLUMNS,
    APPLICANT_DEFAULTS,
    CLIENT_LIST_COLUMNS,
    EXEMPTION_COLUMNS,
    OWNER_COLUMNS,
    OWNER_DEFAULTS,
    read_columns,
)
from bulkfiling.core.logging import get_logger
from bulkfiling.core.types import Row, Table
from bulkfiling.models.entity import (
    DOMESTIC_COUNTRY,
    Address,
    BeneficialOwner,
    CompanyApplicant,
    EntityRecord,
    EntityType,
    FilingType,
    classify_entity,
    coerce_filing_type,
    coerce_service_hint,
)
from bulkfiling.models.firm import FirmUser

logger = get_logger(__name__)

MAX_OWNERS = 9
EXPECTED_APPLICANTS = 2


def _index(table: Table, columns: dict[str, int], defaults: dict[str, str] | None = None,
           ) -> dict[str, list[dict[str, str]]]:
    """Group child rows (header skipped) by Client_ID; rows without a name are dropped."""
    grouped: dict[str, list[dict[str, str]]] = defaultdict(list)
    for row in table[1:]:
        fields = read_columns(row, columns, defaults)
        if not fields["client_id"]:
            continue
        if "full_name" in fields and not fields["full_name"]:
            continue
        grouped[fields["client_id"]].append(fields)
    return grouped


def match_firm_user(name: str, users: Iterable[FirmUser]) -> Optional[str]:
    """Id of the firm user whose name equals ``name`` (trimmed, case-insensitive)."""
    wanted = name.strip().lower()
    if not wanted:
        return None
    for user in users:
        if user.full_name.strip().lower() == wanted:
            return user.id
    return None


def _address(fields: dict[str, str]) -> Address:
    return Address(
        street=fields["street"],
        city=fields["city"],
        state=fields["state"],
        zip_code=fields["zip_code"],
        country=fields["country"],
    )


class RelationalAssembler(RecordProducer):
    """Client List rows joined with owners, exemptions and applicants."""

    schema_kind = "relational"

    def __init__(
        self,
        entities: Table,
        *,
        owners: Table = (),
        exemptions: Table = (),
        applicants: Table = (),
        firm_users: Iterable[FirmUser] = (),
    ) -> None:
        super().__init__(entities)
        self._owners = _index(list(owners), OWNER_COLUMNS, OWNER_DEFAULTS)
        self._exemptions = _index(list(exemptions), EXEMPTION_COLUMNS)
        self._applicants = _index(list(applicants), APPLICANT_COLUMNS, APPLICANT_DEFAULTS)
        self._firm_users = list(firm_users)

    def build(self, index: int, row: Row) -> EntityRecord | None:
        fields = read_columns(row, CLIENT_LIST_COLUMNS)
        client_id = fields["client_id"]
        if not client_id or not fields["legal_name"]:
            return None

        country = fields["country_of_formation"] or DOMESTIC_COUNTRY
        filing_type = coerce_filing_type(fields["filing_type"])
        domestic = classify_entity(country) is EntityType.DOMESTIC

        entity = EntityRecord(
            id=f"client-imported-{client_id}",
            legal_name=fields["legal_name"],
            registry_id=fields["registry_id"],
            tax_id=fields["tax_id"],
            formation_date=fields["formation_date"],
            country_of_formation=country,
            state_of_formation=fields["state_of_formation"],
            contact_email=fields["contact_email"],
            contact_phone=fields["contact_phone"],
            filing_type=filing_type,
            requested_service=coerce_service_hint(fields["service_level"]) if domestic else None,
        )

        if filing_type is FilingType.DISCLOSURE:
            entity.beneficial_owners = self._attach_owners(client_id)
        else:
            exemption = self._exemptions.get(client_id)
            if exemption:
                entity.exemption_category = exemption[0]["exemption_category"]
                entity.exemption_explanation = exemption[0]["exemption_explanation"]
                if len(exemption) > 1:
                    logger.info("duplicate_exemption_rows_ignored",
                                client_id=client_id, rows=len(exemption))

        entity.company_applicants = self._attach_applicants(client_id)
        return entity

    def _attach_owners(self, client_id: str) -> list[BeneficialOwner]:
        owners = [
            BeneficialOwner(
                id=f"bo-{client_id}-{fields['number'] or n}",
                full_name=fields["full_name"],
                dob=fields["dob"],
                address=_address(fields),
                id_type=fields["id_type"],
                id_number=fields["id_number"],
                issuing_country=fields["issuing_country"],
                issuing_state=fields["issuing_state"],
                ownership_percentage=fields["ownership_percentage"],
                position=fields["position"],
            )
            for n, fields in enumerate(self._owners.get(client_id, []), start=1)
        ]
        if len(owners) > MAX_OWNERS:
            self.warn(
                f"Client {client_id} lists {len(owners)} beneficial owners (maximum {MAX_OWNERS})",
                client_id=client_id,
            )
        return owners

    def _attach_applicants(self, client_id: str) -> list[CompanyApplicant]:
        applicants = []
        for n, fields in enumerate(self._applicants.get(client_id, []), start=1):
            applicants.append(CompanyApplicant(
                id=f"ca-{client_id}-{fields['number'] or n}",
                full_name=fields["full_name"],
                dob=fields["dob"],
                address=_address(fields),
                id_type=fields["id_type"],
                id_number=fields["id_number"],
                issuing_country=fields["issuing_country"],
                issuing_state=fields["issuing_state"],
                role=fields["role"],
                matched_user_id=match_firm_user(fields["full_name"], self._firm_users),
            ))
        if applicants and len(applicants) != EXPECTED_APPLICANTS:
            self.warn(
                f"Client {client_id} has {len(applicants)} company applicant(s), expected {EXPECTED_APPLICANTS}",
                client_id=client_id,
            )
        return applicants
