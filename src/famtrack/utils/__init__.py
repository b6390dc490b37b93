"""Utility functions for famtrack."""

from famtrack.utils.date_parser import parse_date, add_months
from famtrack.utils.amount_parser import parse_amount
from famtrack.utils.text import normalize_name

__all__ = ["parse_date", "add_months", "parse_amount", "normalize_name"]
