"""CompletenessEvaluator -- per-entity readiness for submission.

``EntityRecord.data_complete`` is the stored-state rule and is recomputed on
every read. This service adds the explanations shown to the user and the
stricter review-step gate.
"""

from __future__ import annotations

from typing import Iterable

from pydantic import BaseModel, Field

from bulkfiling.core.logging import get_logger
from bulkfiling.models.entity import EntityRecord, FilingType

logger = get_logger(__name__)


class CompletenessSummary(BaseModel):
    ready_ids: list[str] = Field(default_factory=list)
    incomplete_ids: list[str] = Field(default_factory=list)

    @property
    def ready_count(self) -> int:
        return len(self.ready_ids)

    @property
    def incomplete_count(self) -> int:
        return len(self.incomplete_ids)


class CompletenessEvaluator:
    """Explains and gates entity readiness."""

    def missing_fields(self, entity: EntityRecord) -> list[str]:
        """Human-readable reasons the entity is not review-ready (empty when it is)."""
        missing: list[str] = []
        if not entity.legal_name:
            missing.append("legal name")
        if not entity.formation_date:
            missing.append("formation date")

        if entity.filing_type is FilingType.EXEMPTION:
            if not entity.exemption_category.strip():
                missing.append("exemption category")
            return missing

        if not entity.beneficial_owners:
            missing.append("at least one beneficial owner")
        for position, owner in enumerate(entity.beneficial_owners, start=1):
            gaps = owner.missing_fields()
            if gaps:
                label = owner.full_name or f"owner {position}"
                missing.append(f"{label}: {', '.join(g.replace('_', ' ') for g in gaps)}")
        return missing

    def is_review_ready(self, entity: EntityRecord) -> bool:
        """Review-step gate: identity present, and exemption filings also need an explanation."""
        if not entity.has_identity or not entity.data_complete:
            return False
        if entity.filing_type is FilingType.EXEMPTION:
            return bool(entity.exemption_explanation.strip())
        return True

    def summarize(self, entities: Iterable[EntityRecord]) -> CompletenessSummary:
        summary = CompletenessSummary()
        for entity in entities:
            if entity.data_complete:
                summary.ready_ids.append(entity.id)
            else:
                summary.incomplete_ids.append(entity.id)
        logger.debug("completeness_summarized",
                     ready=summary.ready_count, incomplete=summary.incomplete_count)
        return summary
