"""Upload intake results and progress reporting."""

from __future__ import annotations

from typing import Callable, Literal

from pydantic import BaseModel, Field

from bulkfiling.models.entity import EntityRecord

SchemaKind = Literal["flat", "relational"]


class ImportResult(BaseModel):
    """Entities produced from one upload plus the counts shown to the user."""

    schema_kind: SchemaKind
    entities: list[EntityRecord] = Field(default_factory=list)
    incomplete_count: int = 0  # stored but missing name or formation date
    skipped_rows: int = 0  # non-blank rows that could not become an entity
    warnings: list[str] = Field(default_factory=list)

    @property
    def imported_count(self) -> int:
        return len(self.entities) - self.incomplete_count

    @property
    def matched_applicant_count(self) -> int:
        return sum(
            1
            for entity in self.entities
            for applicant in entity.company_applicants
            if applicant.matched_user_id
        )

    def summary(self) -> str:
        msg = f"{self.imported_count} clients imported successfully"
        if self.incomplete_count:
            msg += f", {self.incomplete_count} incomplete"
        if self.matched_applicant_count:
            msg += (
                f" | {self.matched_applicant_count} company applicant(s)"
                " auto-matched with firm users"
            )
        return msg


class UploadProgress(BaseModel):
    """Incremental progress of an ingestion run."""

    stage: Literal["reading", "parsing", "normalizing", "done"]
    processed: int = 0
    total: int = 0

    @property
    def percent(self) -> int:
        if self.stage == "done":
            return 100
        if not self.total:
            return 0
        return min(99, int(self.processed * 100 / self.total))


ProgressCallback = Callable[[UploadProgress], None]
