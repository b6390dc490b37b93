"""Tests for loading statement files."""

import pytest

from famtrack.utils.statement_text import read_statement_text


def test_reads_utf8_text(fixtures_dir):
    """Test plain text exports are read as-is."""
    text = read_statement_text(str(fixtures_dir / "itau_extrato.txt"))
    assert text.startswith("Itaú Unibanco")


def test_reads_latin1_text(tmp_path):
    """Test older exports in Latin-1 are decoded."""
    statement = tmp_path / "extrato.csv"
    statement.write_bytes("05/01/2025;PADARIA SÃO JOÃO;12,50".encode("latin-1"))
    assert "SÃO JOÃO" in read_statement_text(str(statement))


def test_missing_file(tmp_path):
    """Test a missing file is reported."""
    with pytest.raises(FileNotFoundError, match="not found"):
        read_statement_text(str(tmp_path / "nope.pdf"))


def test_unsupported_suffix(tmp_path):
    """Test spreadsheets are rejected."""
    statement = tmp_path / "extrato.xlsx"
    statement.write_bytes(b"PK")
    with pytest.raises(ValueError, match="Unsupported statement file type"):
        read_statement_text(str(statement))


def test_corrupt_pdf(tmp_path):
    """Test an unreadable PDF is reported as a bad statement file."""
    statement = tmp_path / "fatura.pdf"
    statement.write_bytes(b"this is not a pdf at all")
    with pytest.raises(ValueError, match="Could not read PDF fatura.pdf"):
        read_statement_text(str(statement))
