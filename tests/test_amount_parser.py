"""Tests for amount parsing."""

from decimal import Decimal

import pytest

from famtrack.utils.amount_parser import parse_amount


@pytest.mark.parametrize(
    "text,expected",
    [
        ("1.234,56", Decimal("1234.56")),
        ("R$ 1.234,56", Decimal("1234.56")),
        ("-R$ 6.000,00", Decimal("-6000.00")),
        ("+ 12,00", Decimal("12.00")),
        ("23,9", Decimal("23.9")),
        ("1,234.56", Decimal("1234.56")),
        ("-123.45", Decimal("-123.45")),
        ("(123,45)", Decimal("-123.45")),
        ("1.000.000", Decimal("1000000")),
        ("100", Decimal("100")),
    ],
)
def test_parse_amount(text, expected):
    """Test Brazilian and US notations."""
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "R$"])
def test_parse_amount_invalid(text):
    """Test unparseable amounts raise ValueError."""
    with pytest.raises(ValueError):
        parse_amount(text)
