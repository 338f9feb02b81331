"""Tests for wizard step routing."""

from __future__ import annotations

import pytest

from bulkfiling.agents.orchestrator.flow import (
    WizardProgress,
    WizardStep,
    all_exemption,
    exemption_step_ready,
    next_step,
    previous_step,
    skipped_steps,
)
from bulkfiling.models.entity import FilingType
from tests.fakes.rows import make_entity


def _exempt(entity_id, **fields):
    return make_entity(entity_id, filing=FilingType.EXEMPTION, **fields)


@pytest.fixture
def exempt_only():
    return [_exempt("e1"), _exempt("e2")]


@pytest.fixture
def mixed():
    return [_exempt("e1"), make_entity("d1")]


class TestAllExemption:
    def test_empty_list_is_not_all_exemption(self):
        assert all_exemption([]) is False
        assert skipped_steps([]) == ()

    def test_all_exemption(self, exempt_only, mixed):
        assert all_exemption(exempt_only)
        assert not all_exemption(mixed)
        assert skipped_steps(exempt_only) == (WizardStep.COMPANY_APPLICANT, WizardStep.BENEFICIAL_OWNERS)


class TestStepping:
    def test_forward_skips_disclosure_steps(self, exempt_only):
        assert next_step(WizardStep.FILING_INTENT, exempt_only) is WizardStep.EXEMPTION

    def test_backward_skips_disclosure_steps(self, exempt_only):
        assert previous_step(WizardStep.EXEMPTION, exempt_only) is WizardStep.FILING_INTENT

    def test_linear_when_mixed(self, mixed):
        assert next_step(WizardStep.FILING_INTENT, mixed) is WizardStep.COMPANY_APPLICANT
        assert previous_step(WizardStep.EXEMPTION, mixed) is WizardStep.BENEFICIAL_OWNERS

    def test_ends_are_fixed_points(self, mixed):
        assert next_step(WizardStep.CONFIRMATION, mixed) is WizardStep.CONFIRMATION
        assert previous_step(WizardStep.UPLOAD, mixed) is WizardStep.UPLOAD

    def test_full_walk(self, exempt_only):
        step, visited = WizardStep.UPLOAD, [WizardStep.UPLOAD]
        while step is not WizardStep.CONFIRMATION:
            step = next_step(step, exempt_only)
            visited.append(step)
        assert WizardStep.COMPANY_APPLICANT not in visited
        assert WizardStep.BENEFICIAL_OWNERS not in visited
        assert len(visited) == 6


class TestExemptionStepReady:
    def test_requires_category_and_explanation(self):
        entities = [_exempt("e1", exemption_category="Bank"), make_entity("d1")]
        assert not exemption_step_ready(entities)
        entities[0].exemption_explanation = "Chartered bank"
        assert exemption_step_ready(entities)


class TestWizardProgress:
    def test_upload_always_reachable(self):
        assert WizardProgress().can_navigate(WizardStep.UPLOAD, entity_count=0)

    def test_entity_steps_need_entities(self):
        progress = WizardProgress()
        assert not progress.can_navigate(WizardStep.REVIEW, entity_count=0)
        assert progress.can_navigate(WizardStep.REVIEW, entity_count=3)

    def test_payment_needs_selection(self):
        progress = WizardProgress()
        assert not progress.can_navigate(WizardStep.PAYMENT, entity_count=3, selection_count=0)
        assert progress.can_navigate(WizardStep.PAYMENT, entity_count=3, selection_count=1)

    def test_visited_steps_stay_reachable(self):
        progress = WizardProgress()
        progress.go_to(WizardStep.PAYMENT)
        progress.go_to(WizardStep.REVIEW)
        assert progress.current is WizardStep.REVIEW
        assert progress.max_reached is WizardStep.PAYMENT
        assert progress.can_navigate(WizardStep.PAYMENT, entity_count=0, selection_count=0)

    def test_confirmation_not_reachable_ahead(self):
        assert not WizardProgress().can_navigate(WizardStep.CONFIRMATION, entity_count=5, selection_count=5)
