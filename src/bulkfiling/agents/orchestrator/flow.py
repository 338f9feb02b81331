"""Wizard routing decisions: conditional step skipping and navigation gates.

Pure functions over the entity list; the wizard UI owns rendering and state
storage.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Sequence

from pydantic import BaseModel

from bulkfiling.agents.validator.completeness import CompletenessEvaluator
from bulkfiling.models.entity import EntityRecord, FilingType


class WizardStep(IntEnum):
    UPLOAD = 0
    FILING_INTENT = 1
    COMPANY_APPLICANT = 2
    BENEFICIAL_OWNERS = 3
    EXEMPTION = 4
    REVIEW = 5
    PAYMENT = 6
    CONFIRMATION = 7


DISCLOSURE_ONLY_STEPS = (WizardStep.COMPANY_APPLICANT, WizardStep.BENEFICIAL_OWNERS)
FIRST_STEP = WizardStep.UPLOAD
LAST_STEP = WizardStep.CONFIRMATION


def all_exemption(entities: Sequence[EntityRecord]) -> bool:
    """True iff there is at least one entity and every entity files an exemption."""
    return bool(entities) and all(e.filing_type is FilingType.EXEMPTION for e in entities)


def skipped_steps(entities: Sequence[EntityRecord]) -> tuple[WizardStep, ...]:
    return DISCLOSURE_ONLY_STEPS if all_exemption(entities) else ()


def next_step(current: WizardStep, entities: Sequence[EntityRecord]) -> WizardStep:
    """Step after ``current``; the last step maps to itself."""
    skipped = skipped_steps(entities)
    step = current
    while step < LAST_STEP:
        step = WizardStep(step + 1)
        if step not in skipped:
            return step
    return LAST_STEP


def previous_step(current: WizardStep, entities: Sequence[EntityRecord]) -> WizardStep:
    """Step before ``current``; the first step maps to itself."""
    skipped = skipped_steps(entities)
    step = current
    while step > FIRST_STEP:
        step = WizardStep(step - 1)
        if step not in skipped:
            return step
    return FIRST_STEP


def exemption_step_ready(
    entities: Sequence[EntityRecord], evaluator: CompletenessEvaluator | None = None
) -> bool:
    """Every exemption entity has a category and an explanation."""
    evaluator = evaluator or CompletenessEvaluator()
    return all(
        evaluator.is_review_ready(e)
        for e in entities
        if e.filing_type is FilingType.EXEMPTION
    )


class WizardProgress(BaseModel):
    """Current step plus the furthest step the user has reached."""

    current: WizardStep = WizardStep.UPLOAD
    max_reached: WizardStep = WizardStep.UPLOAD

    def can_navigate(self, target: WizardStep, entity_count: int, selection_count: int = 0) -> bool:
        """Visited steps are always reachable; otherwise the forward precondition decides."""
        if target <= self.max_reached:
            return True
        if target == WizardStep.UPLOAD:
            return True
        if target <= WizardStep.REVIEW:
            return entity_count > 0
        if target == WizardStep.PAYMENT:
            return selection_count > 0
        return False

    def go_to(self, target: WizardStep) -> None:
        self.current = target
        if target > self.max_reached:
            self.max_reached = target
