"""Issuer and statement-kind detection for raw statement text."""

import re

from famtrack.domain.entities import CHECKING, CREDIT_CARD
from famtrack.utils.text import strip_accents

UNKNOWN_BANK = "Desconhecido"

# Checked in order; Bradesco is last because its name shows up on other
# banks' documents (boletos, transfers).
BANK_PATTERNS = [
    ("Nubank", re.compile(r"nubank|nu pagamentos|roxinho|\bnu s\.a", re.I)),
    ("Inter", re.compile(r"banco inter|inter s\.?a|intermedium", re.I)),
    ("Itaú", re.compile(r"\bitau|itau unibanco", re.I)),
    ("BTG", re.compile(r"btg pactual|btg banking", re.I)),
    ("Santander", re.compile(r"santander", re.I)),
    ("C6 Bank", re.compile(r"c6 bank|c6 s\.?a", re.I)),
    ("Cora", re.compile(r"cora scm|cora s\.?a|cora\.com", re.I)),
    ("Bradesco", re.compile(r"bradesco", re.I)),
]

CREDIT_CARD_KEYWORDS = [
    re.compile(pattern, re.I)
    for pattern in (
        r"fatura",
        r"cartao de credito",
        r"numero do cartao",
        r"limite disponivel",
        r"total da fatura",
        r"vencimento da fatura",
        r"pagamento minimo",
        r"credito rotativo",
    )
]

CHECKING_KEYWORDS = [
    re.compile(pattern, re.I)
    for pattern in (
        r"extrato",
        r"conta corrente",
        r"saldo anterior",
        r"debitos",
        r"creditos",
        r"saldo disponivel",
        r"cheque especial",
    )
]


def detect_bank(text: str) -> str:
    """Return the issuing bank's name, or ``"Desconhecido"``."""
    plain = strip_accents(text)
    for bank, pattern in BANK_PATTERNS:
        if pattern.search(plain):
            return bank
    return UNKNOWN_BANK


def detect_statement_type(text: str) -> str:
    """Classify text as a credit-card invoice or a checking statement.

    Each vocabulary scores one point per keyword present. The credit-card
    reading must win outright; ties go to checking.
    """
    plain = strip_accents(text)
    credit_score = sum(1 for pattern in CREDIT_CARD_KEYWORDS if pattern.search(plain))
    checking_score = sum(1 for pattern in CHECKING_KEYWORDS if pattern.search(plain))
    return CREDIT_CARD if credit_score > checking_score else CHECKING
