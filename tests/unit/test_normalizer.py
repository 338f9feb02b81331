"""Tests for the flat single-table normalizer."""

from __future__ import annotations

from bulkfiling.agents.transform.normalizer import FlatNormalizer
from bulkfiling.models.entity import EntityType, FilingType, ServiceType
from tests.fakes.rows import (
    FLAT_HEADER,
    disclosure_row,
    entity_cells,
    exemption_row,
    person_block,
)


def _run(*rows):
    return FlatNormalizer([FLAT_HEADER, *rows]).run()


class TestScenarioA:
    def test_domestic_and_foreign_rows(self):
        result = _run(
            entity_cells("Acme Holdings LLC", country="United States", filing="disclosure", service=""),
            entity_cells("Maple Leaf Corp", country="Canada", service="monitoring"),
        )

        assert len(result.entities) == 2
        domestic, foreign = result.entities
        assert domestic.entity_type is EntityType.DOMESTIC
        assert domestic.service_type is ServiceType.MONITORING
        assert domestic.data_complete is False
        assert foreign.entity_type is EntityType.FOREIGN
        assert foreign.service_type is ServiceType.FILING


class TestRowAcceptance:
    def test_count_matches_named_rows(self):
        result = _run(
            entity_cells("One LLC"),
            entity_cells(""),
            entity_cells("Two LLC"),
            ["Short Row LLC", "x", "y"],
        )
        assert [e.legal_name for e in result.entities] == ["One LLC", "Two LLC"]
        assert result.skipped_rows == 2

    def test_missing_formation_date_counts_incomplete(self):
        result = _run(entity_cells("One LLC", formed=""), entity_cells("Two LLC"))
        assert len(result.entities) == 2
        assert result.incomplete_count == 1
        assert result.imported_count == 1
        assert result.summary() == "1 clients imported successfully, 1 incomplete"

    def test_blank_country_defaults_to_united_states(self):
        result = _run(entity_cells("One LLC", country=""))
        assert result.entities[0].country_of_formation == "United States"
        assert result.entities[0].entity_type is EntityType.DOMESTIC

    def test_service_hint_for_domestic(self):
        result = _run(entity_cells("One LLC", service="Filing"), entity_cells("Two LLC", service="gold"))
        assert [e.service_type for e in result.entities] == [ServiceType.FILING, ServiceType.MONITORING]

    def test_unrecognized_filing_type_is_disclosure(self):
        result = _run(entity_cells("One LLC", filing="exempt"))
        assert result.entities[0].filing_type is FilingType.DISCLOSURE

    def test_entity_ids_are_unique(self):
        result = _run(entity_cells("One LLC"), entity_cells("One LLC"))
        assert result.entities[0].id != result.entities[1].id
        assert result.entities[0].id.startswith("client-")


class TestDisclosureBlocks:
    def test_reads_applicants_and_owners(self):
        row = disclosure_row(
            entity_cells("Acme Holdings LLC"),
            applicants=[person_block("Alice Filer", id_type="", last="Attorney")],
            owners=[person_block("Jane Doe", last="60"), [""] * 8, person_block("John Roe", last="40%")],
        )
        entity = _run(row).entities[0]

        assert [a.full_name for a in entity.company_applicants] == ["Alice Filer"]
        assert entity.company_applicants[0].id_type == "SSN"
        assert entity.company_applicants[0].role == "Attorney"
        assert entity.company_applicants[0].address.city == "Albany"
        assert [o.full_name for o in entity.beneficial_owners] == ["Jane Doe", "John Roe"]
        assert entity.beneficial_owners[1].ownership_percentage == "40%"
        assert entity.data_complete is True

    def test_short_disclosure_row_has_no_children(self):
        row = disclosure_row(entity_cells("Acme Holdings LLC"), owners=[person_block("Jane Doe", last="60")])
        entity = _run(row[:27]).entities[0]
        assert entity.beneficial_owners == []
        assert entity.company_applicants == []


class TestExemptionBlocks:
    def test_reads_exemption_fields_and_applicants(self):
        row = exemption_row(
            entity_cells("Bank Co", filing="Exemption"),
            "Bank",
            "Chartered bank",
            applicants=[person_block("Alice Filer", last="Officer"), person_block("Bob Filer")],
        )
        entity = _run(row).entities[0]

        assert entity.filing_type is FilingType.EXEMPTION
        assert entity.exemption_category == "Bank"
        assert entity.exemption_explanation == "Chartered bank"
        assert len(entity.company_applicants) == 2
        assert entity.beneficial_owners == []
        assert entity.data_complete is True

    def test_exemption_row_too_short_for_fields(self):
        row = exemption_row(entity_cells("Bank Co", filing="exemption"), "Bank", "")
        entity = _run(row[:12]).entities[0]
        assert entity.exemption_category == ""
        assert entity.data_complete is False
