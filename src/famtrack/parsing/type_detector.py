"""Keyword-based income/expense classification."""

import re

from famtrack.domain.entities import EXPENSE, INCOME

INCOME_KEYWORDS = [
    re.compile(pattern, re.I)
    for pattern in (
        r"salário",
        r"salario",
        r"pix recebido",
        r"ted recebid[oa]",
        r"transferência recebida",
        r"transferencia recebida",
        r"depósito",
        r"deposito",
        r"estorno",
        r"reembolso",
        r"cashback",
        r"devolução",
        r"devolucao",
    )
]


def detect_transaction_type(description: str) -> str:
    """Return ``income`` if any income keyword appears, else ``expense``."""
    for pattern in INCOME_KEYWORDS:
        if pattern.search(description):
            return INCOME
    return EXPENSE
