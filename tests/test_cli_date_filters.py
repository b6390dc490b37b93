"""Tests for CLI date filter helper."""

from datetime import date

import click
import pytest

from famtrack.cli.date_filters import resolve_cli_date_range
from famtrack.utils.date_parser import get_date_range


def _ctx() -> click.Context:
    return click.Context(click.Command("test"))


def test_resolve_cli_date_range_rejects_multiple_periods(capsys):
    period_flags = {"this-month": True, "last-month": True}

    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(_ctx(), start_date=None, end_date=None, period_flags=period_flags)

    assert excinfo.value.exit_code == 1
    assert "Only one period option" in capsys.readouterr().err


def test_resolve_cli_date_range_rejects_period_with_start_end(capsys):
    with pytest.raises(click.exceptions.Exit) as excinfo:
        resolve_cli_date_range(
            _ctx(), start_date="2024-01-01", end_date=None, period_flags={"this-month": True}
        )

    assert excinfo.value.exit_code == 1
    assert "cannot be combined" in capsys.readouterr().err


def test_resolve_cli_date_range_returns_period_range():
    start, end = resolve_cli_date_range(
        _ctx(), start_date=None, end_date=None, period_flags={"next-month": True}
    )
    assert (start, end) == get_date_range("next-month")


def test_resolve_cli_date_range_explicit_dates():
    start, end = resolve_cli_date_range(
        _ctx(), start_date="01/02/2025", end_date="2025-02-28", period_flags={}
    )
    assert start == date(2025, 2, 1)
    assert end == date(2025, 2, 28)


def test_resolve_cli_date_range_invalid_date(capsys):
    with pytest.raises(click.exceptions.Exit):
        resolve_cli_date_range(_ctx(), start_date="soon", end_date=None, period_flags={})
    assert "Invalid start date" in capsys.readouterr().err
