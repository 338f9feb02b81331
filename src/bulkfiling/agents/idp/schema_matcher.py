"""SchemaMatcherService -- decides which bulk-upload schema a workbook uses.

The result is a tagged variant resolved once here; downstream code only
calls ``produce()`` / ``start()`` and never branches on the schema again.
"""

from __future__ import annotations

from typing import Iterable, Literal

from pydantic import BaseModel, Field

from bulkfiling.agents.transform.assembler import RelationalAssembler
from bulkfiling.agents.transform.normalizer import FlatNormalizer
from bulkfiling.core.types import Table
from bulkfiling.models.firm import FirmUser
from bulkfiling.models.intake import ImportResult

CLIENT_LIST_SHEET = "Client List"
OWNERS_SHEET = "Beneficial Owners"
EXEMPTION_SHEET = "Exemption Attestations"
APPLICANTS_SHEET = "Company Applicants"
FLAT_SHEET = "Data"


class FlatSchema(BaseModel):
    """Single-table legacy layout: one row per entity, child records in fixed blocks."""

    kind: Literal["flat"] = "flat"
    rows: Table = Field(default_factory=list)

    @property
    def data_row_count(self) -> int:
        return max(len(self.rows) - 1, 0)

    def start(self, firm_users: Iterable[FirmUser] = ()) -> FlatNormalizer:
        return FlatNormalizer(self.rows)

    def produce(self, firm_users: Iterable[FirmUser] = ()) -> ImportResult:
        return self.start(firm_users).run()


class RelationalSchema(BaseModel):
    """Four-table template joined on Client_ID."""

    kind: Literal["relational"] = "relational"
    entities: Table = Field(default_factory=list)
    owners: Table = Field(default_factory=list)
    exemptions: Table = Field(default_factory=list)
    applicants: Table = Field(default_factory=list)

    @property
    def data_row_count(self) -> int:
        return max(len(self.entities) - 1, 0)

    def start(self, firm_users: Iterable[FirmUser] = ()) -> RelationalAssembler:
        return RelationalAssembler(
            self.entities,
            owners=self.owners,
            exemptions=self.exemptions,
            applicants=self.applicants,
            firm_users=firm_users,
        )

    def produce(self, firm_users: Iterable[FirmUser] = ()) -> ImportResult:
        return self.start(firm_users).run()


def is_relational(sheet_names: Iterable[str]) -> bool:
    """Client List plus at least one of the owner / exemption sheets."""
    names = set(sheet_names)
    return CLIENT_LIST_SHEET in names and bool({OWNERS_SHEET, EXEMPTION_SHEET} & names)


def detect_schema(sheets: dict[str, Table]) -> FlatSchema | RelationalSchema:
    """Pick the schema variant for a workbook's sheets (in workbook order)."""
    if is_relational(sheets):
        return RelationalSchema(
            entities=sheets[CLIENT_LIST_SHEET],
            owners=sheets.get(OWNERS_SHEET, []),
            exemptions=sheets.get(EXEMPTION_SHEET, []),
            applicants=sheets.get(APPLICANTS_SHEET, []),
        )
    if FLAT_SHEET in sheets:
        return FlatSchema(rows=sheets[FLAT_SHEET])
    first = next(iter(sheets.values()), [])
    return FlatSchema(rows=first)
