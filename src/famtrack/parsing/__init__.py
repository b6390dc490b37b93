"""Rule-based statement parsing."""

from famtrack.parsing.detector import detect_bank, detect_statement_type
from famtrack.parsing.statement_parser import parse_statement
from famtrack.parsing.type_detector import detect_transaction_type

__all__ = [
    "detect_bank",
    "detect_statement_type",
    "detect_transaction_type",
    "parse_statement",
]
