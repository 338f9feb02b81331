"""FlatNormalizer -- maps legacy single-table rows onto canonical entity records."""

from __future__ import annotations

from uuid import uuid4

from bulkfiling.agents.idp.cells import cell
from bulkfiling.agents.transform.base import RecordProducer
from bulkfiling.agents.transform.blocks import (
    DISCLOSURE_APPLICANTS,
    DISCLOSURE_OWNERS,
    EXEMPTION_APPLICANTS,
    FLAT_COLUMNS,
    MIN_DISCLOSURE_CELLS,
    MIN_ENTITY_CELLS,
    MIN_EXEMPTION_CELLS,
    BlockLayout,
    read_blocks,
    read_columns,
)
from bulkfiling.core.logging import get_logger
from bulkfiling.core.types import Row
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

logger = get_logger(__name__)


def _applicants(row: Row, layout: BlockLayout, token: str) -> list[CompanyApplicant]:
    return [
        CompanyApplicant(
            id=f"ca-{token}-{number}",
            full_name=fields["full_name"],
            dob=fields["dob"],
            address=Address.parse(fields["address"]),
            id_type=fields["id_type"],
            id_number=fields["id_number"],
            issuing_country=fields["issuing_country"],
            issuing_state=fields["issuing_state"],
            role=fields["role"],
        )
        for number, fields in read_blocks(row, layout)
    ]


def _owners(row: Row, layout: BlockLayout, token: str) -> list[BeneficialOwner]:
    return [
        BeneficialOwner(
            id=f"owner-{token}-{number}",
            full_name=fields["full_name"],
            dob=fields["dob"],
            address=Address.parse(fields["address"]),
            id_type=fields["id_type"],
            id_number=fields["id_number"],
            issuing_country=fields["issuing_country"],
            issuing_state=fields["issuing_state"],
            ownership_percentage=fields["ownership_percentage"],
        )
        for number, fields in read_blocks(row, layout)
    ]


class FlatNormalizer(RecordProducer):
    """One row per entity; child records sit in fixed 8-cell blocks."""

    schema_kind = "flat"

    def build(self, index: int, row: Row) -> EntityRecord | None:
        if len(row) < MIN_ENTITY_CELLS or not cell(row, 0):
            return None

        fields = read_columns(row, FLAT_COLUMNS)
        country = fields["country_of_formation"] or DOMESTIC_COUNTRY
        filing_type = coerce_filing_type(fields["filing_type"])
        domestic = classify_entity(country) is EntityType.DOMESTIC
        token = uuid4().hex[:12]

        entity = EntityRecord(
            id=f"client-{token}",
            legal_name=fields["legal_name"],
            fictitious_name=fields["fictitious_name"],
            registry_id=fields["registry_id"],
            tax_id=fields["tax_id"],
            formation_date=fields["formation_date"],
            country_of_formation=country,
            state_of_formation=fields["state_of_formation"],
            foreign_authority_filed_date=fields["foreign_authority_filed_date"],
            contact_email=fields["contact_email"],
            filing_type=filing_type,
            requested_service=coerce_service_hint(fields["service_level"]) if domestic else None,
        )

        if filing_type is FilingType.EXEMPTION and len(row) >= MIN_EXEMPTION_CELLS:
            entity.exemption_category = fields["exemption_category"]
            entity.exemption_explanation = fields["exemption_explanation"]
            entity.company_applicants = _applicants(row, EXEMPTION_APPLICANTS, token)

        if filing_type is FilingType.DISCLOSURE and len(row) >= MIN_DISCLOSURE_CELLS:
            entity.company_applicants = _applicants(row, DISCLOSURE_APPLICANTS, token)
            entity.beneficial_owners = _owners(row, DISCLOSURE_OWNERS, token)

        logger.debug(
            "flat_row_normalized",
            row=index,
            entity_type=entity.entity_type.value,
            service_type=entity.service_type.value,
            filing_type=entity.filing_type.value,
        )
        return entity
