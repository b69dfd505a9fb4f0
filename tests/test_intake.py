# tests/test_intake.py

"""
Upload Intake Tests - CSV parsing and name de-duplication
"""

import pytest

from app.core.exceptions import IntakeException
from app.services.intake import dedupe_names, parse_company_csv


class TestParseCompanyCsv:

    def test_headerless_first_column(self):
        assert parse_company_csv(b"Acme\nBeta Corp\nGamma\n") == ["Acme", "Beta Corp", "Gamma"]

    @pytest.mark.parametrize("header", ["name", "Company", "Company Name", "company_name", "Organization"])
    def test_header_row_skipped(self, header):
        assert parse_company_csv(f"{header}\nAcme\nBeta\n") == ["Acme", "Beta"]

    def test_header_selects_column(self):
        content = "id,company,sector\n1,Acme,SaaS\n2,Beta,Fintech\n"
        assert parse_company_csv(content) == ["Acme", "Beta"]

    def test_quotes_and_whitespace_stripped(self):
        content = '"Acme, Inc."\n\'Beta\'\n   Gamma  \n'
        assert parse_company_csv(content) == ["Acme, Inc.", "Beta", "Gamma"]

    def test_blank_rows_and_cells_dropped(self):
        assert parse_company_csv("Acme\n\n  \n,\nBeta\n") == ["Acme", "Beta"]

    def test_duplicates_removed_case_insensitively(self):
        assert parse_company_csv("Acme\nacme\nBeta\nACME\n") == ["Acme", "Beta"]

    def test_utf8_bom_tolerated(self):
        assert parse_company_csv("\ufeffname\nAcme\n".encode("utf-8")) == ["Acme"]

    def test_unicode_names(self):
        assert parse_company_csv("Zürich Labs\nSão Paulo Co\n".encode("utf-8")) == ["Zürich Labs", "São Paulo Co"]

    def test_empty_upload(self):
        assert parse_company_csv(b"") == []
        assert parse_company_csv("name\n") == []

    def test_non_utf8_rejected(self):
        with pytest.raises(IntakeException):
            parse_company_csv(b"\xff\xfe\x00A\x00c")


class TestDedupeNames:

    def test_keeps_first_spelling(self):
        assert dedupe_names(["Acme", "ACME", " acme "]) == ["Acme"]

    def test_drops_blank_and_none(self):
        assert dedupe_names(["", None, "  ", "Beta"]) == ["Beta"]
