"""Local statement parser: rule-based extraction without any AI call."""

import re
from dataclasses import replace
from datetime import date
from typing import Optional

import structlog

from famtrack.domain.entities import CHECKING, ParsedTransaction, ParserResult
from famtrack.parsing.banks import AMOUNT, GENERIC, LONG_DATE, select_ruleset
from famtrack.parsing.detector import UNKNOWN_BANK, detect_statement_type
from famtrack.parsing.type_detector import detect_transaction_type

logger = structlog.get_logger(__name__)

BANK_CONFIDENCE = 0.95
GENERIC_CONFIDENCE = 0.7
# A bank ruleset that finds fewer lines than this gets complemented by the
# generic one.
SPARSE_RESULT = 10

_DATE_TOKEN = re.compile(
    r"\d{2}/\d{2}|\d{4}-\d{2}-\d{2}|\b\d{1,2}\s+(?:jan|fev|mar|abr|mai|jun|jul|ago|set|out|nov|dez)\b",
    re.I,
)
_AMOUNT_TOKEN = re.compile(AMOUNT)


def _dedupe_key(txn: ParsedTransaction) -> tuple:
    return (txn.date, txn.description[:30], txn.amount)


def count_candidate_lines(text: str) -> int:
    """Number of lines that look like a transaction: a date and an amount."""
    count = 0
    in_dated_section = False
    for line in text.splitlines():
        if LONG_DATE.search(line):
            in_dated_section = True
        has_date = in_dated_section or _DATE_TOKEN.search(line)
        if has_date and _AMOUNT_TOKEN.search(line):
            count += 1
    return count


def score_confidence(base: float, found: int, candidates: int) -> float:
    """Scale the ruleset's base confidence by how many candidate lines it used."""
    if found == 0:
        return 0.0
    if candidates == 0:
        return base
    return round(base * min(1.0, found / candidates), 2)


def _fill_types(transactions: list[ParsedTransaction]) -> list[ParsedTransaction]:
    return [
        txn if txn.type else replace(txn, type=detect_transaction_type(txn.description))
        for txn in transactions
    ]


def parse_statement(
    text: str,
    user_provided_type: Optional[str] = None,
    reference_date: Optional[date] = None,
) -> ParserResult:
    """Extract transactions from statement text with regex rules.

    The first ruleset whose issuer matches the text is used. When it finds nothing, or the
    bank is unknown, the generic ruleset runs instead. When a bank ruleset
    finds only a handful of lines, generic lines that are not duplicates are
    appended. Either case marks the result ``hybrid``.

    Args:
        text: Raw statement text
        user_provided_type: ``checking`` or ``credit_card``; overrides detection
        reference_date: Date used to infer years on DD/MM lines (default today)

    Returns:
        ParserResult. Never raises; a failure yields an empty result with
        confidence 0 so the caller can escalate to AI extraction.
    """
    bank = UNKNOWN_BANK
    statement_type = user_provided_type
    try:
        ruleset = select_ruleset(text)
        bank = ruleset.bank if ruleset is not None else UNKNOWN_BANK
        statement_type = user_provided_type or detect_statement_type(text)
        logger.debug("statement_detected", bank=bank, statement_type=statement_type)

        transactions: list[ParsedTransaction] = []
        base_confidence = 0.0
        parsing_method = "regex"

        if ruleset is not None:
            transactions = ruleset.extract(text, statement_type, reference_date)
            base_confidence = BANK_CONFIDENCE

        if not transactions:
            logger.debug("generic_fallback", bank=bank)
            transactions = GENERIC.extract(text, statement_type, reference_date)
            base_confidence = GENERIC_CONFIDENCE
            parsing_method = "hybrid"
        elif len(transactions) < SPARSE_RESULT and bank != UNKNOWN_BANK:
            generic = GENERIC.extract(text, statement_type, reference_date)
            if len(generic) > len(transactions):
                existing = {_dedupe_key(txn) for txn in transactions}
                extra = [txn for txn in generic if _dedupe_key(txn) not in existing]
                logger.debug("generic_complement", bank=bank, added=len(extra))
                transactions = transactions + extra
                parsing_method = "hybrid"

        transactions = _fill_types(transactions)
        confidence = score_confidence(
            base_confidence, len(transactions), count_candidate_lines(text)
        )
    except Exception as e:
        logger.warning("local_parser_failed", bank=bank, error=str(e))
        return ParserResult(
            transactions=[],
            bank=bank,
            statement_type=statement_type or CHECKING,
            parsing_method="regex",
            confidence=0.0,
        )

    logger.info(
        "statement_parsed",
        bank=bank,
        statement_type=statement_type,
        count=len(transactions),
        parsing_method=parsing_method,
        confidence=confidence,
    )
    return ParserResult(
        transactions=transactions,
        bank=bank,
        statement_type=statement_type,
        parsing_method=parsing_method,
        confidence=confidence,
    )

