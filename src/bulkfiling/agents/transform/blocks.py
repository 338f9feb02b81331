"""Column layouts of both bulk schemas, kept as data.

Fixed offsets are contractual: template producers must keep them exactly.
Adding a field or block is a change to these tables, not to parser logic.
"""

from __future__ import annotations

from typing import Mapping

from pydantic import BaseModel

from bulkfiling.agents.idp.cells import cell
from bulkfiling.core.types import Row

# ---------------------------------------------------------------------------
# Flat (legacy single-table) schema
# ---------------------------------------------------------------------------

FLAT_COLUMNS: dict[str, int] = {
    "legal_name": 0,
    "fictitious_name": 1,
    "registry_id": 2,
    "tax_id": 3,
    "formation_date": 4,
    "country_of_formation": 5,
    "state_of_formation": 6,
    "foreign_authority_filed_date": 7,
    "contact_email": 8,
    "filing_type": 9,
    "service_level": 10,
    "exemption_category": 11,
    "exemption_explanation": 12,
}

MIN_ENTITY_CELLS = 9
MIN_EXEMPTION_CELLS = 13
MIN_DISCLOSURE_CELLS = 28

APPLICANT_FIELDS: tuple[str, ...] = (
    "full_name", "dob", "address", "id_type",
    "id_number", "issuing_country", "issuing_state", "role",
)
OWNER_FIELDS: tuple[str, ...] = (
    "full_name", "dob", "address", "id_type",
    "id_number", "issuing_country", "issuing_state", "ownership_percentage",
)
PERSON_DEFAULTS: dict[str, str] = {"id_type": "SSN"}


class BlockLayout(BaseModel):
    """``repeat`` consecutive blocks of ``len(fields)`` cells starting at ``start``."""

    start: int
    repeat: int
    fields: tuple[str, ...]

    model_config = {"frozen": True}

    @property
    def size(self) -> int:
        return len(self.fields)

    def offsets(self) -> range:
        return range(self.start, self.start + self.size * self.repeat, self.size)


EXEMPTION_APPLICANTS = BlockLayout(start=13, repeat=2, fields=APPLICANT_FIELDS)
DISCLOSURE_APPLICANTS = BlockLayout(start=12, repeat=2, fields=APPLICANT_FIELDS)
DISCLOSURE_OWNERS = BlockLayout(start=28, repeat=4, fields=OWNER_FIELDS)


def read_blocks(
    row: Row, layout: BlockLayout, defaults: Mapping[str, str] = PERSON_DEFAULTS
) -> list[tuple[int, dict[str, str]]]:
    """Read populated blocks as ``(block_number, fields)``; a block counts iff its first cell is set."""
    blocks: list[tuple[int, dict[str, str]]] = []
    for number, base in enumerate(layout.offsets(), start=1):
        if not cell(row, base):
            continue
        blocks.append((number, {
            name: cell(row, base + i, defaults.get(name, ""))
            for i, name in enumerate(layout.fields)
        }))
    return blocks


# ---------------------------------------------------------------------------
# Relational (four-table) schema
# ---------------------------------------------------------------------------

CLIENT_LIST_COLUMNS: dict[str, int] = {
    "client_id": 0,
    "legal_name": 1,
    "registry_id": 2,
    "ein_status": 3,
    "tax_id": 4,
    "formation_date": 5,
    "state_of_formation": 6,
    "country_of_formation": 7,
    "filing_type": 8,
    "service_level": 9,
    "contact_email": 10,
    "contact_phone": 11,
}

OWNER_COLUMNS: dict[str, int] = {
    "client_id": 0,
    "number": 1,
    "full_name": 2,
    "dob": 3,
    "street": 4,
    "city": 5,
    "state": 6,
    "country": 7,
    "zip_code": 8,
    "ownership_percentage": 9,
    "position": 10,
    "id_type": 11,
    "id_number": 12,
    "issuing_country": 13,
    "issuing_state": 14,
}
OWNER_DEFAULTS: dict[str, str] = {"id_type": "Passport", "issuing_country": "United States"}

EXEMPTION_COLUMNS: dict[str, int] = {
    "client_id": 0,
    "exemption_category": 1,
    "exemption_explanation": 2,
    "signer_name": 3,
    "signer_title": 4,
    "attestation_date": 5,
    "signer_initials": 6,
}

APPLICANT_COLUMNS: dict[str, int] = {
    "client_id": 0,
    "number": 1,
    "full_name": 2,
    "dob": 3,
    "street": 4,
    "city": 5,
    "state": 6,
    "country": 7,
    "zip_code": 8,
    "role": 9,
    "id_type": 10,
    "id_number": 11,
    "issuing_country": 12,
    "issuing_state": 13,
}
APPLICANT_DEFAULTS: dict[str, str] = {
    "country": "United States",
    "id_type": "SSN",
    "issuing_country": "United States",
}


def read_columns(
    row: Row, columns: Mapping[str, int], defaults: Mapping[str, str] | None = None
) -> dict[str, str]:
    """Map a row to named fields; short rows and empty cells fall back to ``defaults``."""
    defaults = defaults or {}
    return {name: cell(row, index, defaults.get(name, "")) for name, index in columns.items()}
