"""Tests for the primary XML and companion CSV loaders."""

from pathlib import Path

import pytest

from ledger_recon.loaders import CompanionCSVLoader, PrimaryXMLLoader
from ledger_recon.utils.exceptions import (
    CompanionFormatError,
    FormatError,
    PrimaryFormatError,
    SourceReadError,
)


def write(tmp_path: Path, name: str, content: str) -> Path:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path


class TestPrimaryXMLLoader:
    def test_loads_records_in_document_order(self, config, sample_xml):
        records = PrimaryXMLLoader(config).load(sample_xml)

        assert [r.reference for r in records] == ["130498", "167875", "147674", "130498"]
        first = records[0]
        assert first.account_number == "NL69ABNA0433647324"
        assert first.description == "Book Jan Theuß"
        assert first.start_balance == "26.9"
        assert first.mutation == "-18.78"
        assert first.end_balance == "8.12"

    def test_reads_attributes_and_reference_child(self, config, tmp_path):
        path = write(
            tmp_path,
            "attrs.xml",
            '<records>'
            '<record startBalance="1" mutation="2" endBalance="3">'
            "<reference>R1</reference><accountNumber>ACC</accountNumber>"
            "</record>"
            "</records>",
        )
        (record,) = PrimaryXMLLoader(config).load(path)

        assert record.reference == "R1"
        assert record.account_number == "ACC"
        assert (record.start_balance, record.mutation, record.end_balance) == ("1", "2", "3")

    def test_display_text_is_kept_verbatim(self, config, tmp_path):
        path = write(
            tmp_path,
            "padded.xml",
            "<records>"
            '<record reference=" R1 " accountNumber=" ACC ">'
            "<description>  Padded  </description>"
            "<startBalance> 1 </startBalance>"
            "</record>"
            "</records>",
        )
        (record,) = PrimaryXMLLoader(config).load(path)

        assert record.reference == "R1"
        assert record.account_number == " ACC "
        assert record.description == "  Padded  "
        assert record.start_balance == " 1 "

    def test_declared_encoding_is_honoured(self, config, tmp_path):
        path = tmp_path / "latin1.xml"
        path.write_bytes(
            '<?xml version="1.0" encoding="ISO-8859-1"?>'
            '<records><record reference="A">'
            "<description>Theu\u00df</description>"
            "</record></records>".encode("latin-1")
        )
        (record,) = PrimaryXMLLoader(config).load(path)

        assert record.description == "Theu\u00df"

    def test_configured_encoding_overrides_undeclared_document(self, config, tmp_path):
        config.input.primary.encoding = "latin-1"
        path = tmp_path / "undeclared.xml"
        path.write_bytes(
            '<records><record reference="A"><description>Theu\u00df</description>'
            "</record></records>".encode("latin-1")
        )
        (record,) = PrimaryXMLLoader(config).load(path)

        assert record.description == "Theu\u00df"

    def test_missing_fields_load_as_empty_text(self, config, tmp_path):
        path = write(tmp_path, "sparse.xml", '<records><record reference="R1"/></records>')
        (record,) = PrimaryXMLLoader(config).load(path)

        assert record.description == ""
        assert record.start_balance == ""

    def test_empty_root_loads_nothing(self, config, tmp_path):
        path = write(tmp_path, "empty.xml", "<records/>")
        assert PrimaryXMLLoader(config).load(path) == []

    def test_missing_file_raises_source_read_error(self, config, tmp_path):
        with pytest.raises(SourceReadError) as exc_info:
            PrimaryXMLLoader(config).load(tmp_path / "nope.xml")
        assert isinstance(exc_info.value, OSError)

    def test_invalid_xml_raises_format_error(self, config, tmp_path):
        path = write(tmp_path, "bad.xml", "<records><record reference='1'>")
        with pytest.raises(PrimaryFormatError):
            PrimaryXMLLoader(config).load(path)

    def test_wrong_root_raises_format_error(self, config, tmp_path):
        path = write(tmp_path, "root.xml", "<transactions/>")
        with pytest.raises(FormatError, match="Unexpected root element"):
            PrimaryXMLLoader(config).load(path)

    def test_record_without_reference_raises_format_error(self, config, tmp_path):
        path = write(tmp_path, "noref.xml", "<records><record/></records>")
        with pytest.raises(PrimaryFormatError, match="no reference"):
            PrimaryXMLLoader(config).load(path)

    def test_configurable_tags(self, config, tmp_path):
        config.input.primary.root_tag = "ledger"
        config.input.primary.record_tag = "txn"
        path = write(tmp_path, "custom.xml", '<ledger><txn reference="A"/></ledger>')

        (record,) = PrimaryXMLLoader(config).load(path)
        assert record.reference == "A"

    def test_file_summary(self, config, sample_xml):
        summary = PrimaryXMLLoader(config).get_file_summary(sample_xml)

        assert summary["record_count"] == 4
        assert summary["distinct_references"] == 3
        assert summary["duplicate_references"] == ["130498"]


class TestCompanionCSVLoader:
    def test_loads_references_and_fields(self, config, sample_csv):
        records = CompanionCSVLoader(config).load(sample_csv)

        assert [r.reference for r in records] == ["130498", "167875"]
        assert records[0].fields["Description"] == "Book Jan Theuß"
        assert records[0].fields["Mutation"] == "-18.78"
        assert "Reference" not in records[0].fields

    def test_values_are_kept_as_text(self, config, tmp_path):
        path = write(tmp_path, "zeros.csv", "Reference,Amount\n000123,1.10\n")
        (record,) = CompanionCSVLoader(config).load(path)

        assert record.reference == "000123"
        assert record.fields["Amount"] == "1.10"

    def test_reference_column_match_is_case_sensitive(self, config, tmp_path):
        path = write(tmp_path, "lower.csv", "reference,Amount\n1,2\n")
        with pytest.raises(CompanionFormatError, match="'Reference'"):
            CompanionCSVLoader(config).load(path)

    def test_blank_references_are_skipped(self, config, tmp_path):
        path = write(tmp_path, "blank.csv", "Reference,Amount\n,1\nR2,2\n")
        records = CompanionCSVLoader(config).load(path)
        assert [r.reference for r in records] == ["R2"]

    def test_header_only_loads_nothing(self, config, tmp_path):
        path = write(tmp_path, "header.csv", "Reference,Amount\n")
        assert CompanionCSVLoader(config).load(path) == []

    def test_empty_file_raises_format_error(self, config, tmp_path):
        path = write(tmp_path, "empty.csv", "")
        with pytest.raises(CompanionFormatError):
            CompanionCSVLoader(config).load(path)

    def test_missing_file_raises_source_read_error(self, config, tmp_path):
        with pytest.raises(SourceReadError):
            CompanionCSVLoader(config).load(tmp_path / "nope.csv")

    def test_custom_delimiter_and_column(self, config, tmp_path):
        config.input.companion.delimiter = ";"
        config.input.companion.reference_column = "Ref"
        path = write(tmp_path, "semi.csv", "Ref;Note\nA;x\n")

        (record,) = CompanionCSVLoader(config).load(path)
        assert record.reference == "A"
        assert record.fields == {"Note": "x"}

    def test_file_summary(self, config, tmp_path):
        path = write(tmp_path, "dups.csv", "Reference,Amount\nA,1\nB,2\nA,3\n")
        summary = CompanionCSVLoader(config).get_file_summary(path)

        assert summary["row_count"] == 3
        assert summary["columns"] == ["Reference", "Amount"]
        assert summary["distinct_references"] == 2
        assert summary["duplicate_references"] == ["A"]
