"""Tests for upload reading and schema detection."""

from __future__ import annotations

from datetime import datetime

import pytest

from bulkfiling.agents.idp.cells import cell, cell_to_str, clean_row
from bulkfiling.agents.idp.file_parser import parse_upload, read_delimited
from bulkfiling.agents.idp.schema_matcher import FlatSchema, RelationalSchema, is_relational
from bulkfiling.core.exceptions import InvalidFileError
from tests.fakes.rows import (
    CLIENT_LIST_HEADER,
    FLAT_HEADER,
    OWNERS_HEADER,
    entity_cells,
    to_csv,
    to_workbook,
)


class TestCells:
    def test_cell_to_str(self):
        assert cell_to_str(None) == ""
        assert cell_to_str(datetime(2020, 1, 15, 0, 0)) == "2020-01-15"
        assert cell_to_str(5551234.0) == "5551234"
        assert cell_to_str(12.5) == "12.5"
        assert cell_to_str("  Acme  ") == "Acme"

    def test_clean_row_trims_trailing_blanks(self):
        assert clean_row(["a", None, "b", None, None], trim_trailing=True) == ["a", "", "b"]

    def test_cell_default_for_short_rows(self):
        assert cell(["a"], 3, "SSN") == "SSN"
        assert cell(["a", ""], 1, "SSN") == "SSN"


class TestDelimited:
    def test_quoted_delimiter_stays_in_field(self):
        data = b'name,fictitious\n"Acme, Inc.","The ""Best"" Co"\n'
        assert read_delimited(data, "x.csv") == [["name", "fictitious"], ["Acme, Inc.", 'The "Best" Co']]

    def test_bom_and_blank_lines(self):
        data = "\ufeffname,ein\n\n,\nAcme,1\n".encode("utf-8")
        assert read_delimited(data, "x.csv") == [["name", "ein"], ["Acme", "1"]]

    def test_tsv_upload(self):
        data = to_csv([FLAT_HEADER, entity_cells("Acme, Inc.")], delimiter="\t")
        schema = parse_upload(data, "clients.tsv")
        assert isinstance(schema, FlatSchema)
        assert schema.rows[1][0] == "Acme, Inc."

    def test_csv_produces_entities(self):
        data = to_csv([FLAT_HEADER, entity_cells("Acme, Inc."), entity_cells("Beta LLC")])
        result = parse_upload(data, "clients.CSV").produce()
        assert [e.legal_name for e in result.entities] == ["Acme, Inc.", "Beta LLC"]


class TestInvalidFiles:
    def test_header_only_is_invalid(self):
        with pytest.raises(InvalidFileError, match="no data rows"):
            parse_upload(to_csv([FLAT_HEADER]), "clients.csv")

    def test_empty_file_is_invalid(self):
        with pytest.raises(InvalidFileError):
            parse_upload(b"", "clients.csv")

    def test_unsupported_extension(self):
        with pytest.raises(InvalidFileError, match="unsupported"):
            parse_upload(b"\xd0\xcf\x11\xe0", "legacy.xls")

    def test_binary_junk_as_csv(self):
        with pytest.raises(InvalidFileError) as err:
            parse_upload(b"\x00\x01\x02\xff\xfe", "clients.csv")
        assert err.value.filename == "clients.csv"

    def test_corrupt_workbook(self):
        with pytest.raises(InvalidFileError, match="unreadable workbook"):
            parse_upload(b"not a zip archive", "clients.xlsx")

    def test_client_list_without_rows(self):
        data = to_workbook({"Client List": [CLIENT_LIST_HEADER], "Beneficial Owners": [OWNERS_HEADER]})
        with pytest.raises(InvalidFileError, match="Client List"):
            parse_upload(data, "bulk.xlsx")


class TestWorkbookDetection:
    def test_is_relational(self):
        assert is_relational(["Client List", "Beneficial Owners"])
        assert is_relational(["Client List", "Exemption Attestations"])
        assert not is_relational(["Client List", "Company Applicants"])
        assert not is_relational(["Beneficial Owners", "Exemption Attestations"])

    def test_relational_workbook(self):
        data = to_workbook({
            "Instructions": [["Fill in every sheet"]],
            "Client List": [CLIENT_LIST_HEADER, ["C1", "Acme LLC"]],
            "Beneficial Owners": [OWNERS_HEADER],
        })
        schema = parse_upload(data, "bulk.xlsx")
        assert isinstance(schema, RelationalSchema)
        assert schema.applicants == []

    def test_flat_workbook_prefers_data_sheet(self):
        data = to_workbook({
            "Readme": [["ignore me"], ["really"]],
            "Data": [FLAT_HEADER, entity_cells("Acme LLC")],
        })
        schema = parse_upload(data, "clients.xlsx")
        assert isinstance(schema, FlatSchema)
        assert schema.rows[1][0] == "Acme LLC"

    def test_flat_workbook_falls_back_to_first_sheet(self):
        row = entity_cells("Acme LLC")
        row[2] = 5551234
        row[4] = datetime(2020, 1, 15)
        data = to_workbook({"Clients": [FLAT_HEADER, row], "Other": [["x"]]})
        schema = parse_upload(data, "clients.xlsx")
        assert schema.rows[1][2] == "5551234"
        assert schema.rows[1][4] == "2020-01-15"
